"""
Clocks - monotonically increasing elapsed-time sources in milliseconds
"""

import time


class MonotonicClock:
    """
    Wall clock measured from construction, in milliseconds.

    Backed by time.perf_counter(), so it never goes backwards.
    """

    def __init__(self):
        self._origin = time.perf_counter()

    def now(self) -> float:
        return (time.perf_counter() - self._origin) * 1000.0


class ManualClock:
    """
    Clock advanced explicitly (tests, offline rendering).

    Example:
        clock = ManualClock()
        clock.advance(16.7)
        engine.tick(clock.now())
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms

    def now(self) -> float:
        return self._now

    def advance(self, delta_ms: float) -> float:
        if delta_ms < 0:
            raise ValueError(f"Clock cannot go backwards (delta={delta_ms})")
        self._now += delta_ms
        return self._now

    def set(self, now_ms: float) -> None:
        if now_ms < self._now:
            raise ValueError(f"Clock cannot go backwards ({self._now} -> {now_ms})")
        self._now = now_ms
