"""Configuration schema for devtimer.

Defines Pydantic models for loading and validating clock, timer and logging
settings from YAML files and environment variables.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from devtimer.benchmark import BenchmarkRunner
from devtimer.clock import ClockSource, MonotonicClock
from devtimer.registry import TimerRegistry
from devtimer.timer import Timer
from devtimer.utils.logging import setup_logging

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ClockConfig(BaseModel):
    """Clock source configuration."""

    source: ClockSource = Field(
        default="perf_counter",
        description="Platform clock: perf_counter (highest resolution) or monotonic",
    )


class TimerConfig(BaseModel):
    """Timer behavior configuration."""

    strict: bool = Field(
        default=True,
        description="Raise on lifecycle misuse (False: log a warning and ignore)",
    )
    default_name: str | None = Field(
        default=None,
        description="Name for unnamed timers (default: current thread name)",
    )


class DevTimerConfig(BaseModel):
    """Root devtimer configuration."""

    clock: ClockConfig = Field(default_factory=ClockConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got {v}")
        return level

    @classmethod
    def from_yaml(cls, path: Path) -> "DevTimerConfig":
        """Load configuration from YAML file with environment variable overrides.

        Recognized overrides: DEVTIMER_CLOCK_SOURCE, DEVTIMER_STRICT,
        DEVTIMER_LOG_LEVEL.

        Args:
            path: Path to YAML configuration file

        Returns:
            Loaded configuration

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        import os

        import yaml  # type: ignore[import-untyped]

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping, got {type(data).__name__}")

        if clock_source := os.getenv("DEVTIMER_CLOCK_SOURCE"):
            data.setdefault("clock", {})["source"] = clock_source

        if strict := os.getenv("DEVTIMER_STRICT"):
            data.setdefault("timer", {})["strict"] = strict.lower() in ("true", "1", "yes")

        if log_level := os.getenv("DEVTIMER_LOG_LEVEL"):
            data["log_level"] = log_level

        return cls.model_validate(data)

    @classmethod
    def from_yaml_with_defaults(cls, path: Path | None = None) -> "DevTimerConfig":
        """Load configuration from YAML or use defaults if file doesn't exist.

        Args:
            path: Optional path to YAML configuration file

        Returns:
            Loaded configuration or defaults
        """
        if path is not None and path.exists():
            return cls.from_yaml(path)

        return cls()

    # === Factories ===

    def build_clock(self) -> MonotonicClock:
        return MonotonicClock(self.clock.source)

    def new_timer(self, name: str | None = None) -> Timer:
        """Create a timer honoring the configured clock, name and strictness."""
        return Timer(
            name if name is not None else self.timer.default_name,
            clock=self.build_clock(),
            strict=self.timer.strict,
        )

    def new_registry(self) -> TimerRegistry:
        return TimerRegistry(clock=self.build_clock(), strict=self.timer.strict)

    def new_runner(self) -> BenchmarkRunner:
        return BenchmarkRunner(clock=self.build_clock())

    def configure_logging(self) -> None:
        """Apply ``log_level`` and ``log_json`` to the root logger."""
        setup_logging(self.log_level, json_format=self.log_json)
