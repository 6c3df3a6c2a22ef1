"""Statement observer primitives for SQL execution events."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from time import time
from typing import Any

from sqlaudit.utils.logging import get_correlation_id, get_logger

__all__ = (
    "StatementEvent",
    "StatementObserver",
    "create_event",
    "default_statement_observer",
    "format_statement_event",
)


logger = get_logger("sqlaudit.observability")


StatementObserver = Callable[["StatementEvent"], None]


@dataclass(slots=True)
class StatementEvent:
    """Structured payload describing a SQL execution."""

    sql: str
    parameters: Sequence[Any]
    driver: str
    operation: str
    rows_affected: "int | None"
    duration_s: float
    started_at: float
    correlation_id: "str | None"
    error: "str | None" = None
    extra: "dict[str, Any]" = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def as_dict(self) -> "dict[str, Any]":
        """Return event payload as a dictionary."""

        return {
            "sql": self.sql,
            "parameters": list(self.parameters),
            "driver": self.driver,
            "operation": self.operation,
            "rows_affected": self.rows_affected,
            "duration_s": self.duration_s,
            "started_at": self.started_at,
            "correlation_id": self.correlation_id,
            "error": self.error,
            **self.extra,
        }


def create_event(
    *,
    sql: str,
    parameters: Sequence[Any],
    driver: str,
    operation: str,
    rows_affected: "int | None",
    duration_s: float,
    started_at: "float | None" = None,
    error: "BaseException | None" = None,
    **extra: Any,
) -> StatementEvent:
    """Factory helper used by drivers to build statement events."""

    return StatementEvent(
        sql=sql,
        parameters=parameters,
        driver=driver,
        operation=operation,
        rows_affected=rows_affected,
        duration_s=duration_s,
        started_at=started_at if started_at is not None else time() - duration_s,
        correlation_id=get_correlation_id(),
        error=f"{type(error).__name__}: {error}" if error is not None else None,
        extra=extra,
    )


def format_statement_event(event: StatementEvent) -> str:
    """Create a concise human-readable representation of a statement event."""

    rows_label = "rows=%s" % (event.rows_affected if event.rows_affected is not None else "unknown")
    duration_label = f"{event.duration_s:.6f}s"
    status = "failed" if event.failed else "ok"
    message = (
        f"[{event.driver}] {event.operation} ({status}, {rows_label}, duration={duration_label})\n"
        f"SQL: {event.sql}\nParameters: {list(event.parameters)}"
    )
    if event.error:
        message = f"{message}\nError: {event.error}"
    return message


def default_statement_observer(event: StatementEvent) -> None:
    """Log statement execution payload when no custom observer is supplied."""

    level = logging.ERROR if event.failed else logging.INFO
    logger.log(level, format_statement_event(event), extra={"statement_event": event})
