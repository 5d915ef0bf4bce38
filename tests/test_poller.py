import time

import pytest

from stembuild.poller import Poller


def test_calls_function_once_per_duration_until_it_returns_true():
    poller = Poller()
    period = 0.1
    call_times = []
    start = time.monotonic()

    def check():
        call_times.append(time.monotonic() - start)
        return len(call_times) == 3

    result = poller.poll(period, check)

    assert result is None
    assert len(call_times) == 3
    for index, elapsed in enumerate(call_times, start=1):
        assert elapsed >= index * period * 0.9
        assert elapsed < index * period + 0.2


def test_propagates_error_from_polling_function():
    poller = Poller()

    def check():
        raise RuntimeError("polling is hard :(")

    with pytest.raises(RuntimeError, match=r"polling is hard :\("):
        poller.poll(0, check)


def test_stops_after_first_success():
    poller = Poller()
    calls = []

    def check():
        calls.append(1)
        return True

    result = poller.poll(0, check)
    assert result is None
    assert len(calls) == 1