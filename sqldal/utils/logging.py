"""Loggers for the ``sqldal`` namespace.

Library code asks :func:`get_logger` for a logger and emits DEBUG records only. Output is switched on by the
application, or by the CLI, through :func:`configure_logging`. Records carry the correlation id bound with
:func:`correlation_context` so the statements of one unit of work can be grouped.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqldal._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = (
    "LOG_LEVELS",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_context",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqldal"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
SIMPLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

correlation_id_var: ContextVar[str | None] = ContextVar("sqldal_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Bind ``correlation_id`` to the current context; ``None`` clears it."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Bind a correlation id for the duration of the block.

    Args:
        correlation_id: Id to bind. A random hex id is used when omitted.

    Yields:
        The bound id.
    """
    token = correlation_id_var.set(correlation_id or uuid.uuid4().hex)
    try:
        yield correlation_id_var.get()  # type: ignore[misc]
    finally:
        correlation_id_var.reset(token)


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Fields passed through ``extra={"extra_fields": {...}}`` are merged into the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)  # type: ignore[return-value]


class CorrelationIDFilter(logging.Filter):
    """Copy the current correlation id onto records; never drops a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger ``sqldal.<name>``, or the ``sqldal`` root logger when ``name`` is omitted.

    Names already starting with ``sqldal`` are used as given.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(existing, CorrelationIDFilter) for existing in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(level: str = "INFO", format_style: str = "structured") -> None:
    """Send ``sqldal`` records to stderr.

    Replaces any handlers previously installed on the ``sqldal`` root logger and stops propagation to the
    Python root logger.

    Args:
        level: One of :data:`LOG_LEVELS`, case-insensitive.
        format_style: ``"structured"`` for JSON lines, anything else for plain text.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        msg = f"Unknown log level {level!r}; expected one of: {', '.join(LOG_LEVELS)}"
        raise ValueError(msg)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_name)
    root.propagate = False


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for :class:`StructuredFormatter`."""
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_fields": extra_fields})
