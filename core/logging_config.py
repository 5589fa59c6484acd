from __future__ import annotations
import logging
from logging.config import dictConfig

# LogRecord attributes passed through `extra=` by the sampler and agent.
CONTEXT_KEYS = ("domain", "device", "reason", "seq")

class ContextFormatter(logging.Formatter):
    """Formats a record and appends ` | key=value ...` for any context keys set on it."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}" for key in CONTEXT_KEYS if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message

def configure_logging(level: str | int = "INFO") -> None:
    """
    Send all log output to stderr through ContextFormatter.

    Args:
        level: Root logger level, e.g. "INFO" or logging.DEBUG
    """
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "context": {
                "()": ContextFormatter,
                "fmt": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            }
        },
        "handlers": {
            "stderr": {"class": "logging.StreamHandler", "formatter": "context"},
        },
        "root": {"handlers": ["stderr"], "level": level},
    })
