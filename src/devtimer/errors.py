"""Exception hierarchy for timers, registries and benchmark runs.

Every failure is raised synchronously to the immediate caller. A missing
elapsed value is not an error: timer queries return ``None`` instead.
"""


class DevTimerError(Exception):
    """Base exception for devtimer errors."""

    pass


class TimerError(DevTimerError):
    """Base exception for timer lifecycle violations."""

    def __init__(self, name: str, message: str) -> None:
        """Initialize timer error.

        Args:
            name: Name of the timer that was misused
            message: Human-readable description
        """
        super().__init__(message)
        self.name = name


class AlreadyStartedError(TimerError):
    """Raised when starting a timer that already has a start mark."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Timer {name!r} was already started")


class AlreadyStoppedError(TimerError):
    """Raised when stopping a timer that already has a stop mark."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Timer {name!r} was already stopped")


class NotStartedError(TimerError):
    """Raised when stopping a timer that was never started."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Timer {name!r} was stopped before it was started")


class RegistryError(DevTimerError):
    """Base exception for timer registry errors."""

    pass


class UnknownTagError(RegistryError, KeyError):
    """Raised when a registry operation references a tag that does not exist."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"No timer registered under tag {tag!r}")
        self.tag = tag

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class DuplicateTagError(RegistryError):
    """Raised when creating a timer under a tag that already exists."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"A timer is already registered under tag {tag!r}")
        self.tag = tag


class InvalidIterationCountError(DevTimerError, ValueError):
    """Raised when a benchmark is requested with fewer than one iteration."""

    def __init__(self, iterations: object) -> None:
        super().__init__(f"Iteration count must be a positive integer, got {iterations!r}")
        self.iterations = iterations
