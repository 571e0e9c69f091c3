"""Start/stop timer with a small, explicit lifecycle.

A ``Timer`` holds an optional start mark and an optional stop mark, both raw
clock readings in nanoseconds. Elapsed time is computed on demand from the
two marks and is ``None`` until both exist.

State Transitions:
    EMPTY → STARTED: start() / try_start() / start_after()
    STARTED → STOPPED: stop() / try_stop()
    any → EMPTY: reset()

Misuse (starting twice, stopping twice, stopping before starting) raises a
``TimerError`` subclass. Timers created with ``strict=False`` log the misuse
and leave their marks untouched instead.
"""

import logging
import threading
from datetime import timedelta
from enum import Enum
from types import TracebackType
from typing import Final, Protocol

from devtimer.clock import NANOS_PER_SECOND, Clock, default_clock
from devtimer.errors import AlreadyStartedError, AlreadyStoppedError, NotStartedError

logger = logging.getLogger(__name__)

NANOS_PER_MICRO: Final[int] = 1_000
NANOS_PER_MILLI: Final[int] = 1_000_000


class TimerState(Enum):
    """Lifecycle state of a timer.

    States:
        EMPTY: No marks recorded (initial and post-reset)
        STARTED: Start mark recorded, waiting for stop
        STOPPED: Both marks recorded, elapsed time available
    """

    EMPTY = "empty"
    STARTED = "started"
    STOPPED = "stopped"


class TimeDifference(Protocol):
    """Anything holding a start mark and a stop mark."""

    @property
    def start_ns(self) -> int | None: ...

    @property
    def stop_ns(self) -> int | None: ...


def elapsed_nanos_between(marks: TimeDifference) -> int | None:
    """Nanoseconds from start mark to stop mark, or None if a mark is missing."""
    if marks.start_ns is None or marks.stop_ns is None:
        return None
    return marks.stop_ns - marks.start_ns


class TimeDifferenceMixin:
    """Elapsed-time queries for classes satisfying ``TimeDifference``.

    Conversions truncate toward zero, so ``elapsed_micros()`` is always
    ``elapsed_nanos() // 1_000`` and so on.
    """

    def elapsed_nanos(self: TimeDifference) -> int | None:
        """Elapsed nanoseconds between the marks, or None if a mark is missing."""
        return elapsed_nanos_between(self)

    def elapsed_micros(self: TimeDifference) -> int | None:
        nanos = elapsed_nanos_between(self)
        return None if nanos is None else nanos // NANOS_PER_MICRO

    def elapsed_millis(self: TimeDifference) -> int | None:
        nanos = elapsed_nanos_between(self)
        return None if nanos is None else nanos // NANOS_PER_MILLI

    def elapsed_secs(self: TimeDifference) -> int | None:
        nanos = elapsed_nanos_between(self)
        return None if nanos is None else nanos // NANOS_PER_SECOND

    def elapsed(self: TimeDifference) -> timedelta | None:
        """Elapsed time as a timedelta (microsecond resolution)."""
        nanos = elapsed_nanos_between(self)
        return None if nanos is None else timedelta(microseconds=nanos // NANOS_PER_MICRO)

    @property
    def state(self: TimeDifference) -> TimerState:
        if self.start_ns is None:
            return TimerState.EMPTY
        if self.stop_ns is None:
            return TimerState.STARTED
        return TimerState.STOPPED


class Timer(TimeDifferenceMixin):
    """Reusable start/stop timer.

    Example:
        ```python
        timer = Timer("load")
        timer.start()
        load_everything()
        timer.stop()
        print(f"{timer.name}: {timer.elapsed_millis()} ms")

        timer.reset()  # ready for another measurement
        with timer:
            load_everything()
        ```

    Not thread-safe: a timer is meant to be driven by one caller at a time.

    Attributes:
        name: Diagnostic name used in error messages and reports
        strict: Raise on lifecycle misuse (True) or log and ignore it (False)
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        clock: Clock | None = None,
        strict: bool = True,
    ) -> None:
        """Initialize an empty timer.

        Args:
            name: Timer name (default: name of the current thread)
            clock: Clock to read marks from (default: process monotonic clock)
            strict: Whether lifecycle misuse raises
        """
        self.name = name if name is not None else threading.current_thread().name
        self.strict = strict
        self._clock = clock if clock is not None else default_clock()
        self._start_ns: int | None = None
        self._stop_ns: int | None = None

    @property
    def start_ns(self) -> int | None:
        return self._start_ns

    @property
    def stop_ns(self) -> int | None:
        return self._stop_ns

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def is_running(self) -> bool:
        """True between start and stop."""
        return self.state is TimerState.STARTED

    def start(self) -> None:
        """Record the start mark.

        Raises:
            AlreadyStartedError: If the timer was started and not reset since
        """
        call_time = self._clock.now_ns()
        if self._start_ns is not None:
            self._misuse(AlreadyStartedError(self.name))
            return
        self._start_ns = call_time

    def try_start(self) -> bool:
        """Record the start mark unless one already exists.

        Returns:
            True if the mark was newly set, False if the timer was already started
        """
        call_time = self._clock.now_ns()
        if self._start_ns is not None:
            return False
        self._start_ns = call_time
        return True

    def stop(self) -> None:
        """Record the stop mark.

        Raises:
            NotStartedError: If the timer has no start mark
            AlreadyStoppedError: If the timer was stopped and not reset since
        """
        # Read the clock first so the check does not count toward the sample
        call_time = self._clock.now_ns()
        if self._start_ns is None:
            self._misuse(NotStartedError(self.name))
            return
        if self._stop_ns is not None:
            self._misuse(AlreadyStoppedError(self.name))
            return
        self._stop_ns = call_time

    def try_stop(self) -> bool:
        """Record the stop mark if the timer is running.

        Returns:
            True if the mark was newly set, False if the timer was not running
        """
        call_time = self._clock.now_ns()
        if self._start_ns is None or self._stop_ns is not None:
            return False
        self._stop_ns = call_time
        return True

    def start_after(self, delay: float | timedelta) -> None:
        """Block for ``delay``, then record the start mark.

        This is a blocking wait on the calling thread, not a scheduled start.
        Sleep precision depends on the OS scheduler; the real delay may exceed
        the requested one by up to a few milliseconds.

        Args:
            delay: Seconds to wait, or a timedelta

        Raises:
            ValueError: If delay is negative
            AlreadyStartedError: If the timer was already started
        """
        seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
        if seconds < 0:
            raise ValueError(f"Delay must be non-negative, got {seconds}s")
        self._clock.sleep(seconds)
        self.start()

    def reset(self) -> None:
        """Clear both marks so the timer can be reused."""
        self._start_ns = None
        self._stop_ns = None

    def _misuse(self, error: Exception) -> None:
        if self.strict:
            raise error
        logger.warning("Ignoring timer misuse: %s", error, extra={"timer": self.name})

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def __repr__(self) -> str:
        return (
            f"Timer(name={self.name!r}, state={self.state.value}, "
            f"elapsed_nanos={self.elapsed_nanos()})"
        )
