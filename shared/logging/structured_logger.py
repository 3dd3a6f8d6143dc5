"""Structured logging configuration using structlog.

Every entry carries the application name, environment and, inside a
request, its correlation ID. Values under secret-looking keys are masked
before rendering.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "devsecops-demo-api"

REDACTED = "***"
SENSITIVE_KEYS = frozenset({"password", "admin_password", "secret", "token", "authorization"})

_app_context: dict[str, str] = {
    "app": APP_NAME,
    "environment": "development",
}


def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp application name and environment, keeping values set by the caller."""
    for key, value in _app_context.items():
        event_dict.setdefault(key, value)
    return event_dict


def redact_sensitive_fields(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask values logged under a sensitive key.

    Args:
        logger: The logger instance
        method_name: The logging method name
        event_dict: The event dictionary

    Returns:
        Event dictionary with sensitive values replaced by ``***``
    """
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        add_app_context,
        redact_sensitive_fields,
    ]


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: Optional[str] = None,
    environment: Optional[str] = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Safe to call more than once; the last call wins.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
        service_name: Bound as ``service`` on every entry
        environment: Deployment environment reported in every entry
    """
    if environment:
        _app_context["environment"] = environment

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*_shared_processors(), renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    if service_name:
        structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs to every later entry in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def request_context(correlation_id: str, **kwargs: Any) -> Iterator[None]:
    """Bind a correlation ID (and extra keys) for the duration of a request."""
    keys = ("correlation_id", *kwargs)
    bind_context(correlation_id=correlation_id, **kwargs)
    try:
        yield
    finally:
        unbind_context(*keys)
