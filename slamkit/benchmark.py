"""Wall-clock timing helpers."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Optional


class Timer:
    """Measures elapsed milliseconds since the last :meth:`start`."""

    def __init__(self) -> None:
        self._start: Optional[float] = None

    def start(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def elapsed_ms(self) -> float:
        if self._start is None:
            raise RuntimeError("timer has not been started")
        return (time.perf_counter() - self._start) * 1000.0

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        return None


def time_repeated(function: Callable[[], object], iterations: int) -> float:
    """Milliseconds taken to call ``function`` ``iterations`` times."""
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    timer = Timer().start()
    for _ in range(iterations):
        function()
    return timer.elapsed_ms()