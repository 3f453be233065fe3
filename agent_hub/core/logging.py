"""Structured key=value logging for Agent Hub."""

import logging
import sys
from typing import Any

# Fields promoted to top-level keys when passed through log_with_context
CONTEXT_FIELDS = ("department", "event_type", "job_name", "tool_name")


class StructuredFormatter(logging.Formatter):
    """Render records as space separated key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        log_data.update(getattr(record, "extra_data", {}))

        line = " ".join(f"{k}={v}" for k, v in log_data.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _resolve_level() -> int:
    try:
        from agent_hub.core.config import get_settings

        settings = get_settings()
    except Exception:
        # Settings not loadable yet (missing env); fall back to INFO
        return logging.INFO

    if settings.LOG_LEVEL:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        # Unregistered names come back as "Level <name>"
        return level if isinstance(level, int) else logging.INFO
    return logging.DEBUG if settings.AGENT_HUB_ENV == "dev" else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing structured lines to stdout.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(_resolve_level())

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log with correlation fields attached.

    Known context fields (department, event_type, job_name, tool_name) become
    top-level keys; anything else is appended after the message.
    """
    extra: dict[str, Any] = {key: kwargs.pop(key) for key in CONTEXT_FIELDS if key in kwargs}
    extra["extra_data"] = kwargs
    logger.log(level, msg, extra=extra)
