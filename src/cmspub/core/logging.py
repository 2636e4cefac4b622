"""
Logging configuration.

Structured key-value events rendered by structlog to stderr, so that stdout
carries only command results.

Usage:
    from cmspub.core.logging import get_logger, setup_logging

    setup_logging("DEBUG")
    logger = get_logger(__name__)
    logger.debug("api_request", method="GET", path="/api/v1/posts")
"""

import logging
import sys
from typing import Any

import structlog


DEFAULT_LEVEL = "WARNING"


def setup_logging(level: str = DEFAULT_LEVEL) -> None:
    """
    Configure structlog for one CLI invocation.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Raises:
        ValueError: If level is not a known logging level name.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a lazy logger; it binds to the configuration in effect at first use."""
    return structlog.get_logger(name)
