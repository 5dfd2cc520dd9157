"""Structured logging configuration for flowpath."""

import logging
import logging.config
from pathlib import Path
from typing import Any

LOGGER_NAME = "flowpath"


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """
    Configure logging for flowpath.

    Console output is human readable. When ``log_file`` is given, records
    are also written there as JSON lines (with any ``extra`` fields such as
    ``flow_id`` or ``session_id``), rotated at 10MB.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of the rotating JSON log
    """
    level = level.upper()
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "level": level,
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    }

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_file),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "formatter": "json",
            "level": level,
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("file")

    logging.config.dictConfig(config)


class ContextLogger:
    """Logger that stamps every record with fixed context (flow, session...)."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def with_context(self, **context: Any) -> logging.LoggerAdapter:
        """
        Add context to log messages.

        Args:
            **context: Context key-value pairs, e.g. ``session_id=...``

        Returns:
            LoggerAdapter with context
        """
        return logging.LoggerAdapter(self.logger, context)
