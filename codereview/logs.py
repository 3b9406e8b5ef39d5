"""Structured logging configuration."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog

LOG_LEVEL_ENV = "CODE_REVIEW_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def get_log_level(level: Optional[str] = None) -> str:
    """Resolve the log level from the argument, then the environment."""

    return (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()


def _stderr_logger(*_args) -> structlog.PrintLogger:
    # resolved per logger: sys.stderr may be swapped at runtime
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structlog to render to stderr, leaving stdout for reports."""

    resolved = get_log_level(level)
    numeric_level = getattr(logging, resolved, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **context):
    """Get a logger bound to the given component name."""

    return structlog.get_logger(name).bind(component=name, **context)
