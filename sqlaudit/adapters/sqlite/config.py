"""SQLite database configuration."""

import sqlite3
from collections.abc import Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlaudit.adapters.sqlite.driver import SqliteConnection, SqliteDriver
from sqlaudit.config import NoPoolSyncConfig
from sqlaudit.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlaudit.observability import StatementObserver

logger = get_logger("adapters.sqlite")

__all__ = ("SqliteConfig", "SqliteConnectionParams")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(NoPoolSyncConfig[SqliteConnection, SqliteDriver]):
    """SQLite configuration.

    Every connection is opened on demand and closed when its context exits.
    With the default ``:memory:`` database each connection therefore sees a
    fresh, empty database.
    """

    __slots__ = ()

    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    connection_type: "ClassVar[type[SqliteConnection]]" = SqliteConnection

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None,
        observers: "Optional[Sequence[StatementObserver]]" = None,
    ) -> None:
        connection_config = dict(connection_config or {})
        connection_config.setdefault("database", ":memory:")
        database_path = str(connection_config["database"])
        if database_path.startswith("file:") and not connection_config.get("uri"):
            logger.debug("Database URI detected (%s), enabling URI mode", database_path)
            connection_config["uri"] = True
        super().__init__(connection_config=connection_config, observers=observers)

    def _get_connection_config_dict(self) -> "dict[str, Any]":
        return {k: v for k, v in self.connection_config.items() if v is not None}

    def create_connection(self) -> SqliteConnection:
        """Open a new SQLite connection.

        Returns:
            SqliteConnection: The opened connection.
        """
        return sqlite3.connect(**self._get_connection_config_dict())

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[SqliteConnection, None, None]":
        """Provide a SQLite connection context manager.

        Yields:
            SqliteConnection: A connection closed on exit.
        """
        connection = self.create_connection()
        try:
            yield connection
        finally:
            connection.close()
