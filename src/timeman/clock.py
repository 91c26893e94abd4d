"""
Clock abstraction for time management.
"""

import time


def now() -> int:
    """Current monotonic time in milliseconds."""
    return int(time.perf_counter() * 1000)


class SystemClock:
    """
    Wall clock backed by the process' monotonic counter.
    """

    def now(self) -> int:
        return now()


class ManualClock:
    """
    Clock that only moves when told to. Useful for tests and replays.
    """

    def __init__(self, start_ms: int = 0):
        self.current = start_ms

    def now(self) -> int:
        return self.current

    def advance(self, ms: int) -> int:
        self.current += ms
        return self.current
