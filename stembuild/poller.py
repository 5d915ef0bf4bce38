"""Repeatedly run a check until it reports completion."""

from __future__ import annotations

import time
from collections.abc import Callable


class Poller:
    """Calls a function at a fixed interval until it returns True."""

    def poll(self, duration: float, loop_func: Callable[[], bool]) -> None:
        """Sleep ``duration`` seconds, then call ``loop_func``; repeat until it returns True.

        Any exception raised by ``loop_func`` stops the polling and propagates.
        """
        done = False
        while not done:
            time.sleep(duration)
            done = bool(loop_func())