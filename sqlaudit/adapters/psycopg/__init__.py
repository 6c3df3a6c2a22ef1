from sqlaudit.exceptions import MissingDependencyError

try:
    import psycopg  # noqa: F401
    import psycopg_pool  # noqa: F401
except ImportError as e:
    raise MissingDependencyError("psycopg", install_package="psycopg") from e

from sqlaudit.adapters.psycopg.config import PsycopgConfig, PsycopgPoolConfig  # noqa: E402
from sqlaudit.adapters.psycopg.driver import PsycopgConnection, PsycopgCursor, PsycopgDriver  # noqa: E402

__all__ = ("PsycopgConfig", "PsycopgConnection", "PsycopgCursor", "PsycopgDriver", "PsycopgPoolConfig")
