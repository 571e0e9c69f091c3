"""Structured logging utilities."""

import json
import logging
from typing import Any

_HANDLER_NAME = "devtimer"


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Setup logging for applications embedding devtimer.

    The library itself never calls this; it only logs through module loggers.

    Args:
        level: Logging level name
        json_format: Whether to emit one JSON object per line
    """
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    # Replace our own handler on repeated calls, leave foreign handlers alone
    for existing in root.handlers[:]:
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)


def log_event(
    logger: logging.Logger,
    event_type: str,
    data: dict[str, Any],
    level: int = logging.DEBUG,
) -> None:
    """Log structured event.

    Args:
        logger: Logger to emit on
        event_type: Event type identifier
        data: Event data dictionary
        level: Logging level
    """
    if logger.isEnabledFor(level):
        logger.log(level, json.dumps({"event": event_type, **data}))
