"""Shared fixtures for devtimer tests.

Provides a deterministic ManualClock and timers/registries bound to it, so
elapsed-time assertions can be exact.
"""

import pytest

from devtimer.clock import ManualClock
from devtimer.registry import TimerRegistry
from devtimer.timer import Timer


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at an arbitrary non-zero reading."""
    return ManualClock(start_ns=1_000_000)


@pytest.fixture
def timer(clock: ManualClock) -> Timer:
    """Strict timer reading the manual clock."""
    return Timer("test-timer", clock=clock)


@pytest.fixture
def registry(clock: ManualClock) -> TimerRegistry:
    """Empty registry whose timers read the manual clock."""
    return TimerRegistry(clock=clock)
