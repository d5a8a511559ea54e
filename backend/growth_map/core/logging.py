"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from growth_map.core.context import get_request_id

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"
DEBUG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(request_id)s | %(message)s"

# Chatty third-party loggers; the request middleware already logs one line per request.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "uvicorn.access")


class RequestContextFilter(logging.Filter):
    """Stamp the current request id onto every log record."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        return True


def build_logging_config(log_level: str, debug: bool = False) -> Dict[str, Any]:
    loggers: Dict[str, Any] = {name: {"level": "WARNING"} for name in _QUIET_LOGGERS}
    loggers["sqlalchemy.engine"] = {"level": "INFO" if debug else "WARNING"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"app": {"format": DEBUG_FORMAT if debug else PLAIN_FORMAT}},
        "filters": {"request_context": {"()": RequestContextFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "app",
                "level": log_level,
                "filters": ["request_context"],
            }
        },
        "loggers": loggers,
        "root": {"handlers": ["console"], "level": log_level},
    }


def configure_logging(*, log_level: str = "INFO", debug: bool = False) -> None:
    """Configure application logging once at startup."""
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(build_logging_config(log_level.upper(), debug))
    logging.getLogger(__name__).debug("Logging configured at %s (debug=%s)", log_level, debug)
    setattr(configure_logging, "_configured", True)
