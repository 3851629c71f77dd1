"""Logging configuration for pagerduty-backend.

Supports two logging formats:
- JSON logging (production): Structured logs for log aggregation systems
- Standard logging (development): Human-readable logs with stacktraces

Configure via PAGERDUTY_BACKEND_LOG_FORMAT_JSON environment variable (default: True).
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from pagerduty_backend.config import Settings
from pagerduty_backend.config import settings as default_settings

_RESERVED_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message"}


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter with consistent field names.

    Extra fields passed to log calls (``instance``, ``method``, ...) are
    included as top-level keys.
    """

    def add_fields(
        self,
        log_record: dict[str, object],
        record: logging.LogRecord,
        message_dict: dict[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        log_record.update({
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_FIELDS and not key.startswith("_")
        })


def setup_logger(
    logger: logging.Logger,
    log_level: str | None = None,
    settings: Settings | None = None,
) -> logging.Logger:
    """Setup a specific logger with JSON or plain formatting."""
    settings = settings or default_settings
    formatter: logging.Formatter
    if settings.log_format_json:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(logger)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(log_level or settings.log_level)
    return logger


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure the root logger and return the pagerduty_backend logger.

    Loggers listed in ``log_exclude_loggers`` (comma-separated, e.g.
    "httpx,httpcore") are raised to WARNING so DEBUG mode stays readable.
    """
    settings = settings or default_settings
    setup_logger(logging.getLogger(), settings=settings)

    for logger_name in settings.log_exclude_loggers.split(","):
        if logger_name.strip():
            logging.getLogger(logger_name.strip()).setLevel(logging.WARNING)

    return logging.getLogger("pagerduty_backend")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)
    """
    return logging.getLogger(name)
