"""Structured logging configuration.

Features:
- JSON formatted logs for aggregation
- Feature / user correlation while a flag is being evaluated
- Error tracking
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Context variables for evaluation tracking
feature_var: ContextVar[Optional[str]] = ContextVar("feature", default=None)
user_var: ContextVar[Optional[str]] = ContextVar("user", default=None)

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(
        self,
        service_name: str = "flipkit",
        environment: str = "production",
        include_stack_trace: bool = True,
    ):
        super().__init__()
        self.service_name = service_name
        self.environment = environment
        self.include_stack_trace = include_stack_trace

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
        }

        log_entry["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if feature := feature_var.get():
            log_entry["feature"] = feature
        if user := user_var.get():
            log_entry["user"] = user

        if hasattr(record, "extra_fields"):
            log_entry["extra"] = record.extra_fields

        if record.exc_info and self.include_stack_trace:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_entry, default=str)


def setup_structured_logging(
    service_name: str = "flipkit",
    environment: str = "production",
    level: int = logging.INFO,
    json_output: bool = True,
) -> None:
    """Configure logging for the ``flipkit`` logger tree."""
    package_logger = logging.getLogger("flipkit")
    package_logger.setLevel(level)

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if json_output:
        formatter: logging.Formatter = StructuredFormatter(
            service_name=service_name,
            environment=environment,
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)


def configure_from_settings() -> None:
    """Apply the logging section of :class:`flipkit.core.config.Settings`."""
    from flipkit.core.config import get_settings

    settings = get_settings()
    setup_structured_logging(
        service_name=settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT,
        level=_LEVELS.get(settings.LOG_LEVEL.upper(), logging.INFO),
        json_output=settings.LOG_JSON,
    )


def set_feature_context(feature: Optional[str], user: Optional[str] = None) -> None:
    """Tag subsequent log records with the feature under evaluation."""
    feature_var.set(feature)
    user_var.set(user)


def clear_feature_context() -> None:
    feature_var.set(None)
    user_var.set(None)
