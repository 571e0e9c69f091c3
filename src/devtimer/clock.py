"""Clock sources for timers and benchmark runs.

Timers never read the system clock directly. They go through a ``Clock`` so
tests can substitute a ``ManualClock`` and get exact, repeatable readings.

All readings are integer nanoseconds from an arbitrary, process-local origin.
Only differences between two readings are meaningful.
"""

import time
from collections.abc import Callable
from typing import Final, Literal, Protocol

ClockSource = Literal["perf_counter", "monotonic"]

_SOURCES: Final[dict[str, Callable[[], int]]] = {
    "perf_counter": time.perf_counter_ns,
    "monotonic": time.monotonic_ns,
}

NANOS_PER_SECOND: Final[int] = 1_000_000_000


class Clock(Protocol):
    """Protocol for monotonic instant providers."""

    def now_ns(self) -> int:
        """Return the current instant in nanoseconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block the calling thread for ``seconds``."""
        ...


class MonotonicClock:
    """Platform monotonic clock.

    Uses ``time.perf_counter_ns`` by default, the highest resolution clock
    available for measuring short durations. ``time.monotonic_ns`` can be
    selected instead for coarser but cheaper readings.
    """

    def __init__(self, source: ClockSource = "perf_counter") -> None:
        """Initialize clock.

        Args:
            source: Which platform clock to read ("perf_counter" or "monotonic")

        Raises:
            ValueError: If source is not a known clock
        """
        if source not in _SOURCES:
            raise ValueError(f"Unknown clock source {source!r}, expected one of {list(_SOURCES)}")
        self.source = source
        self._read = _SOURCES[source]

    def now_ns(self) -> int:
        return self._read()

    def sleep(self, seconds: float) -> None:
        # Best-effort: the OS scheduler may oversleep by up to a few milliseconds
        time.sleep(seconds)

    def __repr__(self) -> str:
        return f"MonotonicClock(source={self.source!r})"


class ManualClock:
    """Deterministic clock that only moves when told to.

    ``sleep`` advances the reading instead of blocking, so delayed starts and
    sleeping operations can be measured exactly.

    Example:
        ```python
        clock = ManualClock()
        timer = Timer(clock=clock)
        timer.start()
        clock.advance(0.050)
        timer.stop()
        assert timer.elapsed_millis() == 50
        ```
    """

    def __init__(self, start_ns: int = 0) -> None:
        """Initialize clock.

        Args:
            start_ns: Initial reading in nanoseconds
        """
        self._now_ns = start_ns

    def now_ns(self) -> int:
        return self._now_ns

    def advance_ns(self, nanos: int) -> None:
        """Move the clock forward by ``nanos`` nanoseconds.

        Raises:
            ValueError: If nanos is negative
        """
        if nanos < 0:
            raise ValueError(f"ManualClock cannot move backwards (advance by {nanos} ns)")
        self._now_ns += nanos

    def advance(self, seconds: float) -> None:
        """Move the clock forward by ``seconds``."""
        self.advance_ns(round(seconds * NANOS_PER_SECOND))

    def sleep(self, seconds: float) -> None:
        self.advance(seconds)

    def __repr__(self) -> str:
        return f"ManualClock(now_ns={self._now_ns})"


_default_clock: MonotonicClock | None = None


def default_clock() -> MonotonicClock:
    """Get the process-wide monotonic clock.

    Returns:
        Shared MonotonicClock reading ``time.perf_counter_ns``
    """
    global _default_clock
    if _default_clock is None:
        _default_clock = MonotonicClock()
    return _default_clock
