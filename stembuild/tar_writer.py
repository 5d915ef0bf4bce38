"""Writing named streams into a gzip-compressed tarball."""

from __future__ import annotations

import tarfile
from typing import Protocol, runtime_checkable


@runtime_checkable
class Tarable(Protocol):
    """A readable stream that knows its name and size."""

    def read(self, size: int = -1) -> bytes: ...

    def size(self) -> int: ...

    def name(self) -> str: ...


class TarWriter:
    """Writes tarables into a ``.tgz`` file."""

    def write(self, filename: str, *args: Tarable) -> None:
        """Create ``filename`` holding every tarable in ``args``, with mode 0644."""
        with tarfile.open(filename, "w:gz") as archive:
            for tarable in args:
                info = tarfile.TarInfo(tarable.name())
                info.size = tarable.size()
                info.mode = 0o644
                archive.addfile(info, tarable)