"""
Structured logging configuration for the FHIR REST client.

This module provides structured logging using structlog. The library only
emits log events; applications decide how they are rendered by calling
configure_logging() once at startup.
"""

import logging
import sys
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import structlog

from fhir_rest_client.config.settings import get_settings


@dataclass
class LoggingConfig:
    """Logging configuration."""

    suppressed_loggers: dict[str, str] = field(
        default_factory=lambda: {
            "httpx": "WARNING",
            "httpcore": "WARNING",
            "asyncio": "WARNING",
        }
    )
    exchange_id_length: int = 8
    colors: bool = True


# Default logging configuration
_logging_config = LoggingConfig()

# Context variable for correlating the log lines of one HTTP exchange
exchange_id_var: ContextVar[str] = ContextVar("exchange_id", default="")


def get_exchange_id() -> str:
    """Get the current exchange ID from context."""
    return exchange_id_var.get()


@contextmanager
def exchange_context(exchange_id: str | None = None) -> Iterator[str]:
    """
    Scope an exchange ID to one HTTP exchange.

    Generates an ID if none is given. The previous ID (the caller's, or the
    enclosing exchange's) is restored on exit.
    """
    new_id = exchange_id or str(uuid.uuid4())[: _logging_config.exchange_id_length]
    token = exchange_id_var.set(new_id)
    try:
        yield new_id
    finally:
        exchange_id_var.reset(token)


def add_exchange_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor to add the exchange ID to log events."""
    exchange_id = get_exchange_id()
    if exchange_id:
        event_dict["exchange_id"] = exchange_id
    return event_dict


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
) -> None:
    """
    Configure structured logging for applications using the client.

    Args:
        level: Log level (DEBUG, INFO, WARN, ERROR); defaults to FHIR_CLIENT_LOG_LEVEL
        json_format: If True, output JSON logs; otherwise, use console format.
            Defaults to FHIR_CLIENT_LOG_JSON.
    """
    settings = get_settings()
    if level is None:
        level = settings.log_level
    if json_format is None:
        json_format = settings.log_json
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Callable] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_exchange_id,
    ]

    if json_format:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=_logging_config.colors),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # Suppress noisy loggers
    for logger_name, logger_level in _logging_config.suppressed_loggers.items():
        suppressed_level = getattr(logging, logger_level.upper(), logging.WARNING)
        logging.getLogger(logger_name).setLevel(suppressed_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
