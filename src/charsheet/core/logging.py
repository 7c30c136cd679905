"""Structured logging configuration for charsheet.

Application-wide logging uses structlog for structured, key-value log
entries with either human-readable (development) or JSON (production)
output.

Example:
    >>> from charsheet.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Item equipped", item_id="longsword_1", slot="main_hand")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the application name."""
    event_dict["app"] = "charsheet"
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure application-wide logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output logs in JSON format for production.
        log_file: Optional path to a log file for persistent logging.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Standard library logging for sqlite3 and other stdlib users
    logging.basicConfig(
        format=LOG_FORMAT,
        level=log_level,
        stream=sys.stdout,
        force=True,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional name for the logger (typically __name__).

    Returns:
        A configured structlog BoundLogger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent log entries.

    Example:
        >>> bind_context(character_id="char_1700000000000_abc123xyz")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
