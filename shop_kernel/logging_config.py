"""
shop_kernel.logging_config -- One JSON object per log line.

Every record written under the ``shop_kernel`` logger tree carries:

    ts, level, logger, message    always
    correlation_id                one dashboard or recompute run
    month_key                     the month being reported ("2024-03")
    snapshot_id                   the snapshot build the record came from
    <extra>                       whatever the call site passed as ``extra``
    exc_*, traceback              when logged with ``exc_info``

The three run fields live in context variables, so a recompute thread and
the request that triggered it do not see each other's values.  Money and
dates are written as strings (``Decimal("-380.50")`` -> ``"-380.50"``).

Usage:
    configure_logging(level=logging.DEBUG)
    logger = get_logger("engines.profitability")
    with LogContext.bind(month_key="2024-03"):
        logger.info("month_totals", extra={"net_profit": totals.net_profit})
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
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

_ROOT_LOGGER = "shop_kernel"

_RUN_FIELDS = ("correlation_id", "month_key", "snapshot_id")
_RUN_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"shop_log_{name}", default=None) for name in _RUN_FIELDS
}

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _run_var(name: str) -> ContextVar[str | None]:
    try:
        return _RUN_VARS[name]
    except KeyError:
        raise TypeError(f"unknown log context field {name!r}") from None


class LogContext:
    """Run-scoped fields stamped onto every log line."""

    @staticmethod
    def set(
        *,
        correlation_id: str | None = None,
        month_key: str | None = None,
        snapshot_id: str | None = None,
    ) -> None:
        """Overwrite the given fields; ``None`` leaves a field as it is."""
        values = {
            "correlation_id": correlation_id,
            "month_key": month_key,
            "snapshot_id": snapshot_id,
        }
        for name, value in values.items():
            if value is not None:
                _RUN_VARS[name].set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        values = {name: var.get() for name, var in _RUN_VARS.items()}
        return {name: value for name, value in values.items() if value is not None}

    @staticmethod
    def clear() -> None:
        for var in _RUN_VARS.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a ``with`` block, then put back the old values."""
        tokens = [
            (var, var.set(value))
            for var, value in ((_run_var(name), value) for name, value in fields.items())
            if value is not None
        ]
        try:
            yield LogContext
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


def _to_json(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Exception type, message, ``code`` and public attributes, each prefixed ``exc_``."""
    fields: dict[str, Any] = {"exc_type": type(exc).__name__, "exc_message": str(exc)}
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_") and name != "args":
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as one line of JSON."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS:
                line.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            line.update(_exception_fields(record.exc_info[1]))
            line["traceback"] = self.formatException(record.exc_info)

        return json.dumps(line, default=_to_json)


def get_logger(name: str) -> logging.Logger:
    """``get_logger("ingestion")`` -> the ``shop_kernel.ingestion`` logger."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``shop_kernel`` tree.

    Only the first call in a process has any effect; the dashboard script
    and the recompute loop may both call it.  Records do not propagate to
    the root logger.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

        target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
        target.setFormatter(StructuredFormatter())

        root = logging.getLogger(_ROOT_LOGGER)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(target)


def reset_logging() -> None:
    """Undo ``configure_logging``; used between tests."""
    global _configured
    with _lock:
        _configured = False
        root = logging.getLogger(_ROOT_LOGGER)
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        root.propagate = True
