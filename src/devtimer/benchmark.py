"""Micro-benchmark loop: time an operation N times and summarize the samples.

Design:
    validate iterations → for i in 0..N-1: reset/start timer → operation(i)
    → stop timer → collect sample → reduce samples → BenchmarkReport

Iterations run strictly sequentially on the caller's thread. The operation is
opaque: if it raises, the run is aborted and the exception propagates without
a partial report.
"""

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from devtimer.clock import Clock, default_clock
from devtimer.errors import InvalidIterationCountError, NotStartedError
from devtimer.report import BenchmarkReport
from devtimer.timer import Timer
from devtimer.utils.logging import log_event

if TYPE_CHECKING:
    from devtimer.registry import TimerRegistry

logger = logging.getLogger(__name__)

Operation = Callable[[int], object]
IterationCallback = Callable[[int, int], None]


def validate_iterations(iterations: int) -> None:
    """Check that ``iterations`` is a positive integer.

    Raises:
        InvalidIterationCountError: If iterations is not an int >= 1
    """
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 1:
        raise InvalidIterationCountError(iterations)


def reduce_samples(samples: Sequence[int]) -> BenchmarkReport:
    """Reduce per-iteration samples to fastest/slowest/average.

    The average is taken over every sample (duplicates included) and
    truncated toward zero.

    Args:
        samples: Per-iteration durations in nanoseconds

    Returns:
        Report over the samples

    Raises:
        InvalidIterationCountError: If samples is empty
    """
    if not samples:
        raise InvalidIterationCountError(0)
    ordered = sorted(samples)
    return BenchmarkReport(
        fastest=ordered[0],
        slowest=ordered[-1],
        average=sum(ordered) // len(ordered),
        iterations=len(ordered),
    )


class BenchmarkRunner:
    """Runs an operation repeatedly and reports per-iteration timings.

    Example:
        ```python
        runner = BenchmarkRunner()
        report = runner.run(1000, lambda i: sorted(data))
        report.print()
        ```

    Attributes:
        clock: Clock used for fresh timers created by ``run``
        on_iteration: Optional callback receiving (index, sample_ns) after
            every iteration
    """

    def __init__(
        self,
        clock: Clock | None = None,
        on_iteration: IterationCallback | None = None,
    ) -> None:
        self.clock = clock if clock is not None else default_clock()
        self.on_iteration = on_iteration

    def run(self, iterations: int, operation: Operation) -> BenchmarkReport:
        """Time ``operation`` over ``iterations`` calls with a fresh timer.

        Args:
            iterations: Number of calls, at least 1
            operation: Callable receiving the iteration index

        Returns:
            Report over all samples

        Raises:
            InvalidIterationCountError: If iterations < 1 (operation is not called)
        """
        validate_iterations(iterations)
        return self.run_with(Timer("benchmark", clock=self.clock), iterations, operation)

    def run_with(self, timer: Timer, iterations: int, operation: Operation) -> BenchmarkReport:
        """Time ``operation`` using an existing timer.

        The timer is reset before every iteration and holds the marks of the
        last iteration afterwards. If the operation raises, the timer is
        stopped before the exception propagates.

        Args:
            timer: Timer to drive
            iterations: Number of calls, at least 1
            operation: Callable receiving the iteration index

        Returns:
            Report over all samples

        Raises:
            InvalidIterationCountError: If iterations < 1
            NotStartedError: If the operation reset a lenient timer mid-iteration
        """
        validate_iterations(iterations)
        log_event(logger, "benchmark_start", {"timer": timer.name, "iterations": iterations})

        samples: list[int] = []
        for index in range(iterations):
            timer.reset()
            timer.start()
            try:
                operation(index)
            except BaseException:
                # Leave the timer stopped, not half-open, when the run aborts
                timer.try_stop()
                raise
            timer.stop()

            sample = timer.elapsed_nanos()
            if sample is None:
                # A lenient timer reset by the operation ignores stop()
                raise NotStartedError(timer.name)
            samples.append(sample)

            if self.on_iteration is not None:
                self.on_iteration(index, sample)

        report = reduce_samples(samples)
        log_event(logger, "benchmark_complete", {"timer": timer.name, **report.to_dict()})
        return report

    def run_through(
        self,
        registry: "TimerRegistry",
        tag: str,
        iterations: int,
        operation: Operation,
    ) -> BenchmarkReport:
        """Time ``operation`` with the timer registered under ``tag``.

        Raises:
            UnknownTagError: If tag is not registered (operation is not called)
            InvalidIterationCountError: If iterations < 1
        """
        return registry.run_through(tag, iterations, operation, runner=self)


def benchmark(
    iterations: int,
    operation: Operation,
    clock: Clock | None = None,
) -> BenchmarkReport:
    """Run a one-off benchmark with a default runner."""
    return BenchmarkRunner(clock=clock).run(iterations, operation)
