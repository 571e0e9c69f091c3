"""Unit tests for devtimer configuration.

Tests configuration loading, validation, defaults and factories.
"""

import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from pydantic import ValidationError

from devtimer.clock import MonotonicClock
from devtimer.config import ClockConfig, DevTimerConfig, TimerConfig
from devtimer.errors import AlreadyStartedError


def test_clock_config_defaults() -> None:
    """Test clock configuration defaults."""
    config = ClockConfig()
    assert config.source == "perf_counter"


def test_clock_config_validation() -> None:
    """Test that only known clock sources are accepted."""
    assert ClockConfig(source="monotonic").source == "monotonic"

    with pytest.raises(ValidationError):
        ClockConfig(source="wall")  # type: ignore[arg-type]


def test_timer_config_defaults() -> None:
    """Test timer configuration defaults."""
    config = TimerConfig()
    assert config.strict is True
    assert config.default_name is None


def test_devtimer_config_defaults() -> None:
    """Test root configuration defaults."""
    config = DevTimerConfig()

    assert isinstance(config.clock, ClockConfig)
    assert isinstance(config.timer, TimerConfig)
    assert config.log_level == "INFO"
    assert config.log_json is False


def test_log_level_validation() -> None:
    """Test log level normalization and validation."""
    assert DevTimerConfig(log_level="debug").log_level == "DEBUG"

    with pytest.raises(ValueError, match="log_level must be one of"):
        DevTimerConfig(log_level="LOUD")


@patch("os.getenv")
def test_config_from_yaml(mock_getenv: Mock, tmp_path: Path) -> None:
    """Test loading configuration from YAML file."""
    mock_getenv.return_value = None

    config_file = tmp_path / "devtimer.yaml"
    config_file.write_text(
        """clock:
  source: monotonic

timer:
  strict: false
  default_name: "bench"

log_level: "DEBUG"
"""
    )

    config = DevTimerConfig.from_yaml(config_file)

    assert config.clock.source == "monotonic"
    assert config.timer.strict is False
    assert config.timer.default_name == "bench"
    assert config.log_level == "DEBUG"


@patch("os.getenv")
def test_config_from_yaml_with_env_overrides(mock_getenv: Mock, tmp_path: Path) -> None:
    """Test loading configuration with environment variable overrides."""
    overrides = {
        "DEVTIMER_CLOCK_SOURCE": "monotonic",
        "DEVTIMER_STRICT": "false",
        "DEVTIMER_LOG_LEVEL": "warning",
    }
    mock_getenv.side_effect = overrides.get

    config_file = tmp_path / "devtimer.yaml"
    config_file.write_text(
        """clock:
  source: perf_counter

timer:
  strict: true
"""
    )

    config = DevTimerConfig.from_yaml(config_file)

    assert config.clock.source == "monotonic"
    assert config.timer.strict is False
    assert config.log_level == "WARNING"


@patch("os.getenv")
def test_config_from_empty_yaml(mock_getenv: Mock, tmp_path: Path) -> None:
    """Test that an empty YAML file yields defaults."""
    mock_getenv.return_value = None
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    assert DevTimerConfig.from_yaml(config_file) == DevTimerConfig()


def test_config_from_yaml_not_a_mapping(tmp_path: Path) -> None:
    """Test that a non-mapping YAML root is rejected."""
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ValueError, match="mapping"):
        DevTimerConfig.from_yaml(config_file)


def test_config_from_yaml_missing_file() -> None:
    """Test loading configuration from non-existent file raises error."""
    with pytest.raises(FileNotFoundError):
        DevTimerConfig.from_yaml(Path("/nonexistent/devtimer.yaml"))


def test_config_from_yaml_with_defaults_missing() -> None:
    """Test loading config with defaults when file doesn't exist."""
    config = DevTimerConfig.from_yaml_with_defaults(Path("/nonexistent/devtimer.yaml"))
    assert config == DevTimerConfig()

    assert DevTimerConfig.from_yaml_with_defaults(None) == DevTimerConfig()


@patch("os.getenv")
def test_config_from_yaml_with_defaults_exists(mock_getenv: Mock, tmp_path: Path) -> None:
    """Test loading config with defaults when file exists."""
    mock_getenv.return_value = None
    config_file = tmp_path / "devtimer.yaml"
    config_file.write_text("log_level: ERROR\n")

    config = DevTimerConfig.from_yaml_with_defaults(config_file)
    assert config.log_level == "ERROR"


class TestFactories:
    """Test objects built from configuration."""

    def test_build_clock(self) -> None:
        """Test that the configured clock source is used."""
        config = DevTimerConfig(clock=ClockConfig(source="monotonic"))
        clock = config.build_clock()
        assert isinstance(clock, MonotonicClock)
        assert clock.source == "monotonic"

    def test_new_timer_default_name(self) -> None:
        """Test that the configured default name applies to unnamed timers."""
        config = DevTimerConfig(timer=TimerConfig(default_name="bench"))
        assert config.new_timer().name == "bench"
        assert config.new_timer("explicit").name == "explicit"

    def test_new_timer_strictness(self) -> None:
        """Test that strictness is carried into timers."""
        strict_timer = DevTimerConfig().new_timer()
        strict_timer.start()
        with pytest.raises(AlreadyStartedError):
            strict_timer.start()

        lenient_timer = DevTimerConfig(timer=TimerConfig(strict=False)).new_timer()
        lenient_timer.start()
        lenient_timer.start()
        assert lenient_timer.is_running

    def test_new_registry(self) -> None:
        """Test that registries inherit strictness."""
        registry = DevTimerConfig(timer=TimerConfig(strict=False)).new_registry()
        assert registry.strict is False
        assert len(registry) == 0

    def test_new_runner(self) -> None:
        """Test that the runner uses the configured clock."""
        runner = DevTimerConfig().new_runner()
        report = runner.run(3, lambda i: None)
        assert report.iterations == 3

    def test_configure_logging(self) -> None:
        """Test that configure_logging applies the log level."""
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, root.handlers[:]
        try:
            DevTimerConfig(log_level="WARNING").configure_logging()
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
