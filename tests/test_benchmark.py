from unittest import mock

import pytest

from slamkit.benchmark import Timer, time_repeated


def test_elapsed_before_start_raises():
    with pytest.raises(RuntimeError):
        Timer().elapsed_ms()


def test_elapsed_in_milliseconds():
    with mock.patch("time.perf_counter", side_effect=[1.0, 1.5]):
        timer = Timer().start()
        assert timer.elapsed_ms() == 500.0


def test_elapsed_is_monotonic():
    timer = Timer().start()
    first = timer.elapsed_ms()
    second = timer.elapsed_ms()
    assert 0.0 <= first <= second


def test_context_manager_starts_timer():
    with Timer() as timer:
        assert timer.elapsed_ms() >= 0.0


def test_time_repeated_calls_function():
    calls = []
    elapsed = time_repeated(lambda: calls.append(1), 7)
    assert len(calls) == 7
    assert elapsed >= 0.0


def test_time_repeated_rejects_negative():
    with pytest.raises(ValueError):
        time_repeated(lambda: None, -1)