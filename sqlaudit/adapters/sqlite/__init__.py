from sqlaudit.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlaudit.adapters.sqlite.driver import SqliteConnection, SqliteCursor, SqliteDriver

__all__ = ("SqliteConfig", "SqliteConnection", "SqliteConnectionParams", "SqliteCursor", "SqliteDriver")
