import contextlib
import datetime
import sqlite3
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Callable, Optional

from sqlaudit.driver import SyncDriverAdapterBase
from sqlaudit.parameters import ParameterStyle
from sqlaudit.utils.serializers import to_json

__all__ = ("SqliteConnection", "SqliteCursor", "SqliteDriver", "sqlite_type_coercion_map")

SqliteConnection = sqlite3.Connection

# bool must precede any int handling; it is an int subclass.
sqlite_type_coercion_map: "dict[type, Callable[[Any], Any]]" = {
    bool: int,
    datetime.datetime: lambda v: v.isoformat(),
    datetime.date: lambda v: v.isoformat(),
    Decimal: str,
    dict: to_json,
    list: to_json,
    tuple: lambda v: to_json(list(v)),
}


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


def _coerce(value: Any) -> Any:
    converter = sqlite_type_coercion_map.get(type(value))
    return converter(value) if converter is not None else value


class SqliteDriver(SyncDriverAdapterBase):
    """Synchronous SQLite driver."""

    __slots__ = ()

    dialect = "sqlite"
    parameter_style = ParameterStyle.QMARK

    def with_cursor(self, connection: "SqliteConnection") -> "SqliteCursor":
        return SqliteCursor(connection)

    def prepare_parameters(self, parameters: Sequence[Any]) -> Sequence[Any]:
        return [_coerce(value) for value in parameters]

    def begin(self) -> None:
        """Begin a database transaction."""
        if not self.connection.in_transaction:
            self.connection.execute("BEGIN")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.connection.rollback()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.connection.commit()
