"""Structured logging for sitestandard.

Every record emitted while reading a repository carries the repository
DID and the running operation, taken from context variables so they
follow the read across awaits and tasks.

Usage:
    from sitestandard.observability.logging import LogContext, configure_logging

    configure_logging(json_format=True, level="INFO")

    logger = logging.getLogger(__name__)
    with LogContext(did="did:plc:abc", operation="list:site.standard.document"):
        logger.info("Listing records")  # Includes did and operation
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

did_var: contextvars.ContextVar[str] = contextvars.ContextVar("did", default="")
operation_var: contextvars.ContextVar[str] = contextvars.ContextVar("operation", default="")

_CONTEXT_VARS: dict[str, contextvars.ContextVar[str]] = {
    "did": did_var,
    "operation": operation_var,
}

# Attributes every LogRecord has; anything else was passed through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def current_context() -> dict[str, str]:
    """Non-empty log context fields of the running task."""
    return {name: var.get() for name, var in _CONTEXT_VARS.items() if var.get()}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Output format:
    {
        "timestamp": "2026-01-10T12:34:56.789Z",
        "level": "WARNING",
        "logger": "sitestandard.network.fallback",
        "message": "Home endpoint ... failed for did:plc:abc, trying public fallback",
        "did": "did:plc:abc",
        "operation": "get:site.standard.document",
        "endpoint": "https://pds.example.com"
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **current_context(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            entry[key] = value

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for terminals.

    Output format:
    2026-01-10 12:34:56 | INFO     | sitestandard.records.repository | Fetched 5 records | did=did:plc:abc
    """

    LEVEL_COLORS = {
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "35",
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def _level(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        color = self.LEVEL_COLORS.get(record.levelno)
        if self.use_colors and color:
            return f"\033[{color}m{level}\033[0m"
        return level

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        parts = [timestamp, self._level(record), record.name, record.getMessage()]

        context = current_context()
        if context:
            parts.append(" ".join(f"{key}={value}" for key, value in context.items()))

        line = " | ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    json_format: bool = True,
    level: str = "INFO",
    use_colors: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        json_format: Emit JSON lines instead of console lines
        level: Log level name, case-insensitive
        use_colors: Use ANSI colors in console format (only on a TTY)
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(use_colors))
    root.addHandler(handler)

    # One line per request at INFO is noise next to our own fallback logs
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


class LogContext:
    """Temporarily set log context fields (``did``, ``operation``).

    Usage:
        with LogContext(did="did:plc:abc", operation="fetch_all_documents"):
            logger.info("Listing records")
    """

    def __init__(self, **fields: str) -> None:
        unknown = sorted(set(fields) - set(_CONTEXT_VARS))
        if unknown:
            raise TypeError(f"Unknown log context fields: {', '.join(unknown)}")
        self.fields = fields
        self._tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []

    def __enter__(self) -> LogContext:
        self._tokens = [(_CONTEXT_VARS[k], _CONTEXT_VARS[k].set(v)) for k, v in self.fields.items()]
        return self

    def __exit__(self, *args: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []
