"""Structured logging module using structlog."""

from .structured_logger import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    redact_sensitive_fields,
    request_context,
    unbind_context,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "unbind_context",
    "clear_context",
    "redact_sensitive_fields",
    "request_context",
]
