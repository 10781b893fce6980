"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from helm_drift.config import DEFAULT_LOG_LEVEL


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog for key-value output to stderr.

    Diff output owns stdout, so diagnostics always go to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Re-configured per CLI invocation, so loggers must not pin a stream.
        cache_logger_on_first_use=False,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
