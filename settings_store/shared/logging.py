"""Structured JSON logging with settings store context."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(log_level: str = "INFO", stream: IO[str] | None = None) -> None:
    """Configure structured JSON logging for the store.

    Logs go to stdout unless another stream is given; the CLI routes them to
    stderr so command output stays machine-readable. Unknown level names
    fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger()


def bind_context(namespace: str | None = None, **extra: Any) -> None:
    """Attach the namespace (and any extra fields) to every following log line."""
    if namespace is not None:
        extra["namespace"] = namespace
    structlog.contextvars.bind_contextvars(**extra)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
