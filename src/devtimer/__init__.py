"""Elapsed-time measurement and micro-benchmarking primitives.

This package provides start/stop timers, a registry of named timers and a
benchmark runner that reduces repeated timings to fastest/slowest/average.
"""

from devtimer.benchmark import BenchmarkRunner, benchmark, reduce_samples
from devtimer.clock import Clock, ManualClock, MonotonicClock, default_clock
from devtimer.config import DevTimerConfig
from devtimer.errors import (
    AlreadyStartedError,
    AlreadyStoppedError,
    DevTimerError,
    DuplicateTagError,
    InvalidIterationCountError,
    NotStartedError,
    RegistryError,
    TimerError,
    UnknownTagError,
)
from devtimer.registry import RegistryEntries, TimerRegistry, TimerSnapshot
from devtimer.report import BenchmarkReport
from devtimer.timer import (
    TimeDifference,
    TimeDifferenceMixin,
    Timer,
    TimerState,
    elapsed_nanos_between,
)

__version__ = "0.1.0"

__all__ = [
    "AlreadyStartedError",
    "AlreadyStoppedError",
    "BenchmarkReport",
    "BenchmarkRunner",
    "Clock",
    "DevTimerConfig",
    "DevTimerError",
    "DuplicateTagError",
    "InvalidIterationCountError",
    "ManualClock",
    "MonotonicClock",
    "NotStartedError",
    "RegistryEntries",
    "RegistryError",
    "TimeDifference",
    "TimeDifferenceMixin",
    "Timer",
    "TimerError",
    "TimerRegistry",
    "TimerSnapshot",
    "TimerState",
    "UnknownTagError",
    "benchmark",
    "default_clock",
    "elapsed_nanos_between",
    "reduce_samples",
]
