"""
Structured JSON logging for the stock kernel.

Every line is one JSON object: a fixed envelope (``ts``, ``level``,
``logger``, ``message``), the record/operation context bound by the store,
any ``extra`` fields, and for exceptions the type, message and traceback,
plus the ``code`` and public attributes of a ``StockKernelError``.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from stock_kernel.exceptions import StockKernelError

# ---------------------------------------------------------------------------
# Record / operation context
# ---------------------------------------------------------------------------

_record_id: ContextVar[str | None] = ContextVar("stock_log_record_id", default=None)
_operation: ContextVar[str | None] = ContextVar("stock_log_operation", default=None)

_CONTEXT: dict[str, ContextVar[str | None]] = {
    "record_id": _record_id,
    "operation": _operation,
}


class LogContext:
    """
    Context copied onto every log line emitted while it is bound.

    ``record_id`` is the record a mutation targets; ``operation`` is the
    store mutation in progress (``add``, ``update``, ``remove``,
    ``bulk_load``) or the service action (``export``).  Backed by
    ContextVars, so threads and tasks each see their own values.
    """

    @staticmethod
    def set(*, record_id: str | None = None, operation: str | None = None) -> None:
        """Set fields for the rest of the current context. None leaves a field as is."""
        for var, value in ((_record_id, record_id), (_operation, operation)):
            if value is not None:
                var.set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {name: var.get() for name, var in _CONTEXT.items() if var.get() is not None}

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(
        *, record_id: str | None = None, operation: str | None = None
    ) -> Iterator[None]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens = [
            var.set(value)
            for var, value in ((_record_id, record_id), (_operation, operation))
            if value is not None
        ]
        try:
            yield
        finally:
            for token in reversed(tokens):
                token.var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

_RESERVED: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    # UUID, Decimal and anything else without a JSON form
    return str(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED:
                payload.setdefault(key, value)
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info))
        return json.dumps(payload, default=_json_default)

    def _exception_fields(self, exc_info: Any) -> dict[str, Any]:
        exc = exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        if isinstance(exc, StockKernelError):
            fields["exc_code"] = exc.code
            for key, value in vars(exc).items():
                if not key.startswith("_"):
                    fields[f"exc_{key}"] = value
        fields["traceback"] = self.formatException(exc_info)
        return fields


# ---------------------------------------------------------------------------
# Logger setup
# ---------------------------------------------------------------------------

_ROOT_LOGGER = "stock_kernel"

_configured = False
_config_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Logger ``stock_kernel.<name>``."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the ``stock_kernel`` logger. Later calls are no-ops."""
    global _configured
    with _config_lock:
        if _configured:
            return
        _configured = True
        handler = handler or logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root = logging.getLogger(_ROOT_LOGGER)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(handler)


def reset_logging() -> None:
    """Undo ``configure_logging``. For tests."""
    global _configured
    with _config_lock:
        _configured = False
        root = logging.getLogger(_ROOT_LOGGER)
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        root.propagate = True
