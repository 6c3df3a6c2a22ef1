"""Logging setup for the ``sqlaudit`` namespace.

Records are rendered as one JSON object per line. Records produced by the
statement observers carry a ``statement_event`` attribute; its fields are
written under a ``statement`` key, with bound arguments optionally masked
since they may hold credentials or personal data.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqlaudit.utils.serializers import to_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "REDACTED",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlaudit"
REDACTED = "***"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Bind a request/correlation id to the current context; ``None`` clears it."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class StructuredFormatter(logging.Formatter):
    """JSON formatter aware of statement events.

    Args:
        redact_parameters: Replace every bound argument of a statement event
            with ``"***"``. The SQL text and argument count are kept.
    """

    def __init__(self, *args: Any, redact_parameters: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.redact_parameters = redact_parameters

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        event = getattr(record, "statement_event", None)
        if event is not None:
            entry["statement"] = self._statement_fields(event)
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return to_json(entry)

    def _statement_fields(self, event: Any) -> dict[str, Any]:
        fields = event.as_dict()
        fields.pop("correlation_id", None)
        fields["duration_ms"] = round(fields.pop("duration_s") * 1000, 3)
        if self.redact_parameters:
            fields["parameters"] = [REDACTED] * len(fields["parameters"])
        return fields


class CorrelationIDFilter(logging.Filter):
    """Copy the active correlation id onto each record."""

    def filter(self, record: LogRecord) -> bool:
        if correlation_id := get_correlation_id():
            record.correlation_id = correlation_id
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``sqlaudit`` namespace.

    Names outside the namespace are prefixed, so ``get_logger("builder")``
    and ``get_logger("sqlaudit.builder")`` return the same logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
    redact_parameters: bool = False,
) -> None:
    """Install handlers on the ``sqlaudit`` logger and stop propagation.

    Args:
        level: Level name for the namespace (DEBUG, INFO, WARNING, ...).
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for text.
        log_to_file: Optional path; the file always receives JSON lines.
        extra_handlers: Handlers added as given, formatter untouched.
        redact_parameters: Mask statement arguments in JSON output.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if format_style == "structured":
        console_handler.setFormatter(StructuredFormatter(redact_parameters=redact_parameters))
    else:
        console_handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter(redact_parameters=redact_parameters))
        root_logger.addHandler(file_handler)

    for handler in extra_handlers or ():
        root_logger.addHandler(handler)
    root_logger.propagate = False

    root_logger.debug(
        "sqlaudit logging configured",
        extra={"extra_fields": {"level": level, "format_style": format_style, "redact_parameters": redact_parameters}},
    )
