"""Named timers keyed by tag.

A ``TimerRegistry`` owns one ``Timer`` per unique string tag. Callers drive
entries only through tag-qualified operations; reads hand out immutable
``TimerSnapshot`` views rather than the owned timers.

Error semantics:
    - Unknown tag on start/stop/reset/delete/get → UnknownTagError
    - Existing tag on create → DuplicateTagError
    - Lifecycle misuse → the Timer's own TimerError subclasses
    - Elapsed queries never raise: None for unknown tags and incomplete timers
"""

import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TextIO

from devtimer.benchmark import BenchmarkRunner, Operation
from devtimer.clock import Clock, default_clock
from devtimer.errors import DuplicateTagError, UnknownTagError
from devtimer.report import BenchmarkReport
from devtimer.timer import TimeDifferenceMixin, Timer

logger = logging.getLogger(__name__)


def _report_line(tag: str, nanos: int | None) -> str:
    return f"{tag} - unavailable" if nanos is None else f"{tag} - {nanos} ns"


@dataclass(frozen=True)
class TimerSnapshot(TimeDifferenceMixin):
    """Read-only view of a registry entry at the time it was taken."""

    name: str
    start_ns: int | None
    stop_ns: int | None

    @classmethod
    def of(cls, timer: Timer) -> "TimerSnapshot":
        return cls(name=timer.name, start_ns=timer.start_ns, stop_ns=timer.stop_ns)


class RegistryEntries:
    """Lazy, restartable iterable over ``(tag, TimerSnapshot)`` pairs.

    Each iteration walks the registry as it is at that moment. Iteration
    order follows the underlying dict and is not part of the contract.
    """

    def __init__(self, timers: dict[str, Timer]) -> None:
        self._timers = timers

    def __iter__(self) -> Iterator[tuple[str, TimerSnapshot]]:
        for tag, timer in list(self._timers.items()):
            yield tag, TimerSnapshot.of(timer)

    def __len__(self) -> int:
        return len(self._timers)


class TimerRegistry:
    """Mapping from tag to an owned, reusable timer.

    Example:
        ```python
        timers = TimerRegistry()
        timers.create("parse")
        timers.start("parse")
        parse(document)
        timers.stop("parse")

        with timers.measure("render"):  # tag must be created first
            render(document)

        timers.print_report()
        ```

    Not thread-safe; share a registry across threads only with external
    locking.
    """

    def __init__(self, clock: Clock | None = None, strict: bool = True) -> None:
        """Initialize an empty registry.

        Args:
            clock: Clock handed to every timer created here
            strict: Strict mode for every timer created here
        """
        self.clock = clock if clock is not None else default_clock()
        self.strict = strict
        self._timers: dict[str, Timer] = {}

    def _lookup(self, tag: str) -> Timer:
        try:
            return self._timers[tag]
        except KeyError:
            raise UnknownTagError(tag) from None

    # === Lifecycle ===

    def create(self, tag: str) -> None:
        """Register a new, empty timer under ``tag``.

        Raises:
            DuplicateTagError: If tag is already registered
        """
        if tag in self._timers:
            raise DuplicateTagError(tag)
        self._timers[tag] = Timer(tag, clock=self.clock, strict=self.strict)
        logger.debug("Timer created", extra={"tag": tag})

    def delete(self, tag: str) -> None:
        """Remove the timer registered under ``tag``.

        Raises:
            UnknownTagError: If tag is not registered
        """
        self._lookup(tag)
        del self._timers[tag]
        logger.debug("Timer deleted", extra={"tag": tag})

    def clear(self) -> None:
        """Remove every timer."""
        count = len(self._timers)
        self._timers.clear()
        logger.debug("Registry cleared", extra={"removed": count})

    # === Marks ===

    def start(self, tag: str) -> None:
        self._lookup(tag).start()

    def stop(self, tag: str) -> None:
        self._lookup(tag).stop()

    def try_start(self, tag: str) -> bool:
        return self._lookup(tag).try_start()

    def try_stop(self, tag: str) -> bool:
        return self._lookup(tag).try_stop()

    def reset(self, tag: str) -> None:
        self._lookup(tag).reset()

    @contextmanager
    def measure(self, tag: str) -> Iterator[None]:
        """Start the tagged timer on entry and stop it on exit.

        The stop mark is recorded even if the block raises.

        Raises:
            UnknownTagError: If tag is not registered
        """
        timer = self._lookup(tag)
        timer.start()
        try:
            yield
        finally:
            timer.stop()

    # === Queries ===

    def _elapsed(self, tag: str, query: Callable[[Timer], int | None]) -> int | None:
        timer = self._timers.get(tag)
        return None if timer is None else query(timer)

    def elapsed_nanos(self, tag: str) -> int | None:
        """Elapsed nanoseconds for ``tag``, or None if unknown or incomplete."""
        return self._elapsed(tag, Timer.elapsed_nanos)

    def elapsed_micros(self, tag: str) -> int | None:
        return self._elapsed(tag, Timer.elapsed_micros)

    def elapsed_millis(self, tag: str) -> int | None:
        return self._elapsed(tag, Timer.elapsed_millis)

    def elapsed_secs(self, tag: str) -> int | None:
        return self._elapsed(tag, Timer.elapsed_secs)

    def get(self, tag: str) -> TimerSnapshot:
        """Snapshot of the timer registered under ``tag``.

        Raises:
            UnknownTagError: If tag is not registered
        """
        return TimerSnapshot.of(self._lookup(tag))

    def entries(self) -> RegistryEntries:
        return RegistryEntries(self._timers)

    def tags(self) -> list[str]:
        return list(self._timers)

    def __contains__(self, tag: object) -> bool:
        return tag in self._timers

    def __len__(self) -> int:
        return len(self._timers)

    # === Reporting ===

    def report_lines(self) -> Iterator[str]:
        """Yield one ``"<tag> - <nanos> ns"`` line per entry.

        Incomplete timers yield ``"<tag> - unavailable"`` instead.
        """
        for tag, snapshot in self.entries():
            yield _report_line(tag, snapshot.elapsed_nanos())

    def print_report(self, file: TextIO | None = None) -> list[str]:
        """Write the per-tag report to ``file`` (default: stdout).

        Returns:
            Tags whose timers were incomplete and printed as unavailable
        """
        out = file if file is not None else sys.stdout
        incomplete: list[str] = []
        for tag, snapshot in self.entries():
            nanos = snapshot.elapsed_nanos()
            if nanos is None:
                incomplete.append(tag)
            print(_report_line(tag, nanos), file=out)
        return incomplete

    # === Benchmarking ===

    def run_through(
        self,
        tag: str,
        iterations: int,
        operation: Operation,
        runner: BenchmarkRunner | None = None,
    ) -> BenchmarkReport:
        """Benchmark ``operation`` using the timer registered under ``tag``.

        The tagged timer is reset and reused for every iteration and keeps the
        marks of the last one. A failing operation leaves it stopped at the
        point of failure.

        Args:
            tag: Registered timer to drive
            iterations: Number of calls, at least 1
            operation: Callable receiving the iteration index
            runner: Runner supplying the per-iteration callback (default: plain runner)

        Raises:
            UnknownTagError: If tag is not registered (operation is not called)
            InvalidIterationCountError: If iterations < 1
        """
        timer = self._lookup(tag)
        if runner is None:
            runner = BenchmarkRunner(clock=self.clock)
        return runner.run_with(timer, iterations, operation)
