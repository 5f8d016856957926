"""JSON-lines logging for the voice service.

Every record is one JSON object carrying the logger's ``service``, the
request context (request, user and conversation IDs) and a fixed set of
structured extras passed through ``extra={...}``.
"""

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
conversation_id_var: ContextVar[str | None] = ContextVar("conversation_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_var,
    "user_id": user_id_var,
    "conversation_id": conversation_id_var,
}

# Extras copied from ``extra={...}`` onto the JSON line; anything else is dropped
LOG_FIELDS = (
    "request_id",
    "user_id",
    "conversation_id",
    "provider",
    "model",
    "mode",
    "stage",
    "voice",
    "operation",
    "status",
    "duration_ms",
    "latency_ms",
    "tokens_in",
    "tokens_out",
    "token_count",
    "error_code",
    "error_type",
    "error",
    "metadata",
)

_NOISY_LOGGERS = ("asyncio", "uvicorn.access", "httpx", "httpcore")

_REDACTIONS = (
    (re.compile(r"https?://[^\s<>\"]+"), "[URL REMOVED]"),
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL REMOVED]"),
    (
        re.compile(
            r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
        ),
        "[ID REMOVED]",
    ),
    (re.compile(r"eyJ[a-zA-Z0-9-_]+\.[a-zA-Z0-9-_]+\.[a-zA-Z0-9-_]+"), "[TOKEN REMOVED]"),
)


class StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
            "service": getattr(record, "service", record.name.split(".")[0]),
        }

        for key, var in _CONTEXT_VARS.items():
            value = var.get()
            if value:
                entry[key] = value

        # Explicit extras win over the ambient context
        for key in LOG_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class NamespaceFilter(logging.Filter):
    """Pass INFO and above; pass DEBUG only for the configured top-level namespaces."""

    def __init__(self, debug_namespaces: list[str]):
        super().__init__()
        self.debug_namespaces = set(debug_namespaces)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.INFO:
            return True
        return record.name.split(".")[0] in self.debug_namespaces


def setup_logging(log_level: str = "INFO", debug_namespaces: list[str] | None = None) -> None:
    """Install the JSON stdout handler on the root logger.

    Args:
        log_level: Level for everything outside ``debug_namespaces``
        debug_namespaces: Logger namespaces (e.g. ``voice``, ``stt``) that also emit DEBUG
    """
    debug_namespaces = list(debug_namespaces or [])

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    handler.addFilter(NamespaceFilter(debug_namespaces))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug_namespaces else log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("logging").info(
        "Logging configured",
        extra={
            "service": "logging",
            "metadata": {"log_level": log_level, "debug_namespaces": debug_namespaces},
        },
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def redact_sensitive(text: str) -> str:
    """Strip URLs, email addresses, UUIDs and JWTs from text bound for a log line."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


def set_request_context(
    request_id: str | None = None,
    user_id: str | None = None,
    conversation_id: str | None = None,
) -> None:
    """Bind tracing IDs to the current context; ``None`` leaves a value untouched."""
    values = {"request_id": request_id, "user_id": user_id, "conversation_id": conversation_id}
    for key, value in values.items():
        if value is not None:
            _CONTEXT_VARS[key].set(value)


def clear_request_context() -> None:
    for var in _CONTEXT_VARS.values():
        var.set(None)


__all__ = [
    "LOG_FIELDS",
    "StructuredFormatter",
    "NamespaceFilter",
    "setup_logging",
    "get_logger",
    "redact_sensitive",
    "set_request_context",
    "clear_request_context",
    "request_id_var",
    "user_id_var",
    "conversation_id_var",
]
