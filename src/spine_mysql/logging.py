"""
spine-mysql logging - structured logging for the persistence layer.

Thin structlog configuration shared by every spine-mysql module. Modules
obtain a logger with ``get_logger(__name__)`` and emit snake_case events
with keyword fields; the correlation id of the call is always passed as
``correlation_id`` so a request can be followed across connection,
bootstrap and CRUD events.

Examples:
    >>> from spine_mysql.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.debug("mysql.connected", correlation_id="123", database="test")

Tags:
    logging, structlog, observability, spine-mysql
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Store service name for metadata
_SERVICE_NAME = "spine-mysql"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _drop_empty_correlation(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Remove ``correlation_id=None`` noise from events."""
    if "correlation_id" in event_dict and event_dict["correlation_id"] is None:
        del event_dict["correlation_id"]
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "spine-mysql",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _drop_empty_correlation,
        _add_service_metadata,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
