"""Psycopg database configuration using TypedDict for better maintainability."""

import contextlib
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from psycopg import Connection, connect
from psycopg_pool import ConnectionPool
from typing_extensions import NotRequired

from sqlaudit.adapters.psycopg.driver import PsycopgConnection, PsycopgDriver
from sqlaudit.config import SyncDatabaseConfig
from sqlaudit.exceptions import ImproperConfigurationError
from sqlaudit.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from sqlaudit.observability import StatementObserver

logger = get_logger("adapters.psycopg")

__all__ = ("DEFAULT_MAX_LIFETIME", "DEFAULT_MAX_SIZE", "DEFAULT_MIN_SIZE", "PsycopgConfig", "PsycopgPoolConfig")

DEFAULT_MIN_SIZE = 10
DEFAULT_MAX_SIZE = 100
DEFAULT_MAX_LIFETIME = 3600.0

POOL_KEYS = frozenset(
    {
        "min_size",
        "max_size",
        "name",
        "timeout",
        "max_waiting",
        "max_lifetime",
        "max_idle",
        "reconnect_timeout",
        "num_workers",
        "configure",
    }
)


class PsycopgPoolConfig(TypedDict, total=False):
    """Psycopg pool configuration as TypedDict.

    Connection parameters are passed to ``psycopg.connect()``; the rest
    configure ``psycopg_pool.ConnectionPool``.
    """

    conninfo: NotRequired[str]
    """Connection string in libpq format."""

    host: NotRequired[str]
    """Database server host."""

    port: NotRequired[int]
    """Database server port."""

    user: NotRequired[str]
    """Database user."""

    password: NotRequired[str]
    """Database password."""

    dbname: NotRequired[str]
    """Database name."""

    connect_timeout: NotRequired[float]
    """Connection timeout in seconds."""

    options: NotRequired[str]
    """Command-line options to send to the server."""

    application_name: NotRequired[str]
    """Application name for logging and statistics."""

    sslmode: NotRequired[str]
    """SSL mode (disable, prefer, require, etc.)."""

    timezone: NotRequired[str]
    """Session time zone, sent as a ``TimeZone`` server option."""

    autocommit: NotRequired[bool]
    """Enable autocommit mode."""

    min_size: NotRequired[int]
    """Minimum number of connections in the pool."""

    max_size: NotRequired[int]
    """Maximum number of connections in the pool."""

    name: NotRequired[str]
    """Name of the connection pool."""

    timeout: NotRequired[float]
    """Timeout for acquiring connections."""

    max_waiting: NotRequired[int]
    """Maximum number of waiting clients."""

    max_lifetime: NotRequired[float]
    """Maximum connection lifetime."""

    max_idle: NotRequired[float]
    """Maximum idle time for connections."""

    reconnect_timeout: NotRequired[float]
    """Time between reconnection attempts."""

    num_workers: NotRequired[int]
    """Number of background workers."""

    configure: NotRequired["Callable[[Connection[Any]], None]"]
    """Callback to configure new connections."""


class PsycopgConfig(SyncDatabaseConfig[PsycopgConnection, ConnectionPool, PsycopgDriver]):
    """Configuration for psycopg connections backed by a bounded pool."""

    __slots__ = ()

    driver_type: "ClassVar[type[PsycopgDriver]]" = PsycopgDriver
    connection_type: "ClassVar[type[Any]]" = Connection

    def __init__(
        self,
        *,
        pool_config: "Optional[Union[PsycopgPoolConfig, dict[str, Any]]]" = None,
        pool_instance: "Optional[ConnectionPool]" = None,
        observers: "Optional[Sequence[StatementObserver]]" = None,
    ) -> None:
        pool_config = dict(pool_config or {})
        # Defaults give way to whichever bound the caller set.
        if "min_size" not in pool_config:
            pool_config["min_size"] = min(DEFAULT_MIN_SIZE, pool_config.get("max_size", DEFAULT_MIN_SIZE))
        if "max_size" not in pool_config:
            pool_config["max_size"] = max(DEFAULT_MAX_SIZE, pool_config["min_size"])
        pool_config.setdefault("max_lifetime", DEFAULT_MAX_LIFETIME)
        if pool_config["min_size"] > pool_config["max_size"]:
            msg = f"min_size ({pool_config['min_size']}) must not exceed max_size ({pool_config['max_size']})"
            raise ImproperConfigurationError(msg)
        super().__init__(pool_config=pool_config, pool_instance=pool_instance, observers=observers)

    @property
    def connection_config_dict(self) -> "dict[str, Any]":
        """Keyword arguments for ``psycopg.connect()``.

        ``timezone`` is folded into ``options`` as ``-c TimeZone=...``.
        """
        config = {
            k: v for k, v in self.pool_config.items() if v is not None and k not in POOL_KEYS and k != "conninfo"
        }
        timezone = config.pop("timezone", None)
        if timezone:
            options = config.get("options")
            config["options"] = f"{options} -c TimeZone={timezone}" if options else f"-c TimeZone={timezone}"
        return config

    @property
    def pool_config_dict(self) -> "dict[str, Any]":
        """Keyword arguments for ``psycopg_pool.ConnectionPool``."""
        return {k: v for k, v in self.pool_config.items() if v is not None and k in POOL_KEYS}

    def _create_pool(self) -> "ConnectionPool":
        logger.info("Creating psycopg connection pool", extra={"extra_fields": {"adapter": "psycopg"}})
        try:
            pool = ConnectionPool(
                self.pool_config.get("conninfo", ""),
                kwargs=self.connection_config_dict,
                open=True,
                **self.pool_config_dict,
            )
        except Exception:
            logger.exception("Failed to create psycopg connection pool", extra={"extra_fields": {"adapter": "psycopg"}})
            raise
        return pool

    def _close_pool(self) -> None:
        if not self.pool_instance:
            return
        logger.info("Closing psycopg connection pool", extra={"extra_fields": {"adapter": "psycopg"}})
        self.pool_instance.close()

    def create_connection(self) -> "PsycopgConnection":
        """Create a single connection (not from pool).

        Returns:
            A psycopg Connection instance.
        """
        return connect(self.pool_config.get("conninfo", ""), **self.connection_config_dict)

    @contextlib.contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[PsycopgConnection, None, None]":
        """Provide a pooled connection, waiting at most ``timeout`` seconds for one.

        Yields:
            A psycopg Connection instance.
        """
        pool = self.provide_pool()
        with pool.connection() as conn:
            yield conn
