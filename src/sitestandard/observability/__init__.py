"""Observability for sitestandard: structured logging with DID context."""

from sitestandard.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    configure_logging,
    current_context,
    did_var,
    operation_var,
)

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "LogContext",
    "configure_logging",
    "current_context",
    "did_var",
    "operation_var",
]
