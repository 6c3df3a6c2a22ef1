"""PostgreSQL driver built on psycopg 3."""

from collections.abc import Sequence
from typing import Any, Optional

from psycopg import Connection
from psycopg.types.json import Jsonb

from sqlaudit.driver import SyncDriverAdapterBase
from sqlaudit.parameters import ParameterStyle

__all__ = ("PsycopgConnection", "PsycopgCursor", "PsycopgDriver")

PsycopgConnection = Connection[Any]


class PsycopgCursor:
    """Context manager for psycopg cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "PsycopgConnection") -> None:
        self.connection = connection
        self.cursor: Optional[Any] = None

    def __enter__(self) -> Any:
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _ = (exc_type, exc_val, exc_tb)
        if self.cursor is not None:
            self.cursor.close()


class PsycopgDriver(SyncDriverAdapterBase):
    """Synchronous PostgreSQL driver.

    Statements are sent with ``%s`` placeholders; literal ``%`` characters in
    the statement text are escaped during conversion.
    """

    __slots__ = ()

    dialect = "postgres"
    parameter_style = ParameterStyle.POSITIONAL_PYFORMAT

    def with_cursor(self, connection: "PsycopgConnection") -> "PsycopgCursor":
        return PsycopgCursor(connection)

    def prepare_parameters(self, parameters: Sequence[Any]) -> Sequence[Any]:
        return [Jsonb(value) if isinstance(value, dict) else value for value in parameters]

    def begin(self) -> None:
        """Begin a database transaction.

        Outside autocommit mode psycopg opens the transaction implicitly with
        the first statement.
        """
        if self.connection.autocommit:
            self.connection.execute("BEGIN")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.connection.rollback()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.connection.commit()
