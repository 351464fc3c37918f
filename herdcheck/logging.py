"""
Structured logging for the HTTP layer.

Usage:
    from herdcheck.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Record rejected", record="cattle", errors=2)

The validators never log; only the request handlers in ``main`` do.
"""

from __future__ import annotations

import logging
import sys

import structlog


def get_logger(name: str):
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger().bind(logger=name)


def setup_logging(level: str = "INFO", format_type: str = "text") -> None:
    """Configure structlog once.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' or 'text'
    """
    if format_type == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )
