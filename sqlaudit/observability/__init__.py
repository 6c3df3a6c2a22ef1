"""Execution observers: callbacks that receive one event per executed statement."""

from sqlaudit.observability._observer import (
    StatementEvent,
    StatementObserver,
    create_event,
    default_statement_observer,
    format_statement_event,
)

__all__ = (
    "StatementEvent",
    "StatementObserver",
    "create_event",
    "default_statement_observer",
    "format_statement_event",
)
