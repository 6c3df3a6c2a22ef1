from abc import ABC, abstractmethod
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from sqlaudit.utils.logging import get_logger

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from sqlaudit.driver import SyncDriverAdapterBase
    from sqlaudit.observability import StatementObserver


__all__ = (
    "ConnectionT",
    "DatabaseConfigProtocol",
    "DriverT",
    "NoPoolSyncConfig",
    "PoolT",
    "SyncDatabaseConfig",
)

ConnectionT = TypeVar("ConnectionT")
PoolT = TypeVar("PoolT")
DriverT = TypeVar("DriverT", bound="SyncDriverAdapterBase")

logger = get_logger("config")


class DatabaseConfigProtocol(ABC, Generic[ConnectionT, PoolT, DriverT]):
    """Protocol defining the interface for database configurations.

    Connection pooling (size, lifetime, acquisition timeout) is owned by the
    concrete configuration; drivers only ever see one connection.
    """

    __slots__ = ("observers", "pool_instance")
    driver_type: "ClassVar[type[Any]]"
    connection_type: "ClassVar[type[Any]]"
    supports_connection_pooling: "ClassVar[bool]" = False

    pool_instance: Optional[PoolT]
    observers: "Optional[tuple[StatementObserver, ...]]"

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pool_instance={self.pool_instance!r})"

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Create and return a new database connection."""

    @abstractmethod
    def provide_connection(self, *args: Any, **kwargs: Any) -> "AbstractContextManager[ConnectionT]":
        """Provide a database connection context manager."""

    @abstractmethod
    def create_pool(self) -> Optional[PoolT]:
        """Create and return connection pool."""

    @abstractmethod
    def close_pool(self) -> None:
        """Terminate the connection pool."""

    def create_driver(self, connection: ConnectionT) -> DriverT:
        return self.driver_type(connection=connection, observers=self.observers)

    @contextmanager
    def provide_session(self, *args: Any, **kwargs: Any) -> "Generator[DriverT, None, None]":
        """Provide a driver bound to one connection.

        The session's work is committed when the block exits cleanly and
        rolled back when it raises; the exception is re-raised unchanged.

        Yields:
            A driver instance.
        """
        with self.provide_connection(*args, **kwargs) as connection:
            driver = self.create_driver(connection)
            try:
                yield driver
            except Exception:
                driver.rollback()
                raise
            driver.commit()


class NoPoolSyncConfig(DatabaseConfigProtocol[ConnectionT, None, DriverT]):
    """Base class for a sync database configurations that do not implement a pool."""

    __slots__ = ("connection_config",)
    supports_connection_pooling: "ClassVar[bool]" = False

    def __init__(
        self,
        *,
        connection_config: Optional[dict[str, Any]] = None,
        observers: "Optional[Sequence[StatementObserver]]" = None,
    ) -> None:
        self.pool_instance = None
        self.connection_config = connection_config or {}
        self.observers = tuple(observers) if observers is not None else None

    def create_pool(self) -> None:
        return None

    def close_pool(self) -> None:
        return None


class SyncDatabaseConfig(DatabaseConfigProtocol[ConnectionT, PoolT, DriverT]):
    """Generic Sync Database Configuration."""

    __slots__ = ("pool_config",)
    supports_connection_pooling: "ClassVar[bool]" = True

    def __init__(
        self,
        *,
        pool_config: "Optional[dict[str, Any]]" = None,
        pool_instance: "Optional[PoolT]" = None,
        observers: "Optional[Sequence[StatementObserver]]" = None,
    ) -> None:
        self.pool_instance = pool_instance
        self.pool_config = pool_config or {}
        self.observers = tuple(observers) if observers is not None else None

    def create_pool(self) -> PoolT:
        """Create the pool once and reuse it afterwards.

        Returns:
            The created pool.
        """
        if self.pool_instance is not None:
            return self.pool_instance
        self.pool_instance = self._create_pool()
        logger.debug("Created connection pool for %s", type(self).__name__)
        return self.pool_instance

    def close_pool(self) -> None:
        if self.pool_instance is None:
            return
        self._close_pool()
        self.pool_instance = None

    def provide_pool(self) -> PoolT:
        if self.pool_instance is None:
            self.pool_instance = self.create_pool()
        return self.pool_instance

    @abstractmethod
    def _create_pool(self) -> PoolT:
        """Actual pool creation implementation."""

    @abstractmethod
    def _close_pool(self) -> None:
        """Actual pool destruction implementation."""
