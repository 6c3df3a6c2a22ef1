"""Unit tests for the psycopg adapter. No database connection is opened."""

from unittest.mock import MagicMock, Mock, patch

import pytest

pytest.importorskip("psycopg")
pytest.importorskip("psycopg_pool")

from psycopg.types.json import Jsonb  # noqa: E402

from sqlaudit import select  # noqa: E402
from sqlaudit.adapters.psycopg import PsycopgConfig, PsycopgDriver  # noqa: E402
from sqlaudit.adapters.psycopg.config import DEFAULT_MAX_LIFETIME, DEFAULT_MAX_SIZE, DEFAULT_MIN_SIZE  # noqa: E402
from sqlaudit.exceptions import ImproperConfigurationError  # noqa: E402
from sqlaudit.parameters import ParameterStyle  # noqa: E402

pytestmark = pytest.mark.psycopg


def test_pool_defaults() -> None:
    """Test bounded pool defaults are applied."""
    config = PsycopgConfig(pool_config={"host": "db", "dbname": "app"})

    assert config.pool_config_dict == {
        "min_size": DEFAULT_MIN_SIZE,
        "max_size": DEFAULT_MAX_SIZE,
        "max_lifetime": DEFAULT_MAX_LIFETIME,
    }
    assert config.connection_config_dict == {"host": "db", "dbname": "app"}


def test_connection_and_pool_settings_are_split() -> None:
    """Test libpq parameters and pool parameters go to different places."""
    config = PsycopgConfig(
        pool_config={
            "conninfo": "postgresql://db/app",
            "host": "db",
            "port": 5433,
            "user": "svc",
            "password": "secret",
            "dbname": "app",
            "sslmode": "require",
            "min_size": 2,
            "max_size": 8,
            "timeout": 5.0,
            "max_lifetime": 600.0,
        }
    )

    assert config.connection_config_dict == {
        "host": "db",
        "port": 5433,
        "user": "svc",
        "password": "secret",
        "dbname": "app",
        "sslmode": "require",
    }
    assert config.pool_config_dict == {"min_size": 2, "max_size": 8, "timeout": 5.0, "max_lifetime": 600.0}


@pytest.mark.parametrize(
    ("options", "expected"),
    [(None, "-c TimeZone=UTC"), ("-c statement_timeout=5000", "-c statement_timeout=5000 -c TimeZone=UTC")],
    ids=["timezone-only", "merged-with-options"],
)
def test_timezone_becomes_server_option(options: "str | None", expected: str) -> None:
    """Test the session time zone is sent as a server option."""
    pool_config = {"timezone": "UTC"}
    if options:
        pool_config["options"] = options

    config = PsycopgConfig(pool_config=pool_config)

    assert config.connection_config_dict["options"] == expected
    assert "timezone" not in config.connection_config_dict


@pytest.mark.parametrize(
    ("pool_config", "expected"),
    [({"max_size": 5}, (5, 5)), ({"min_size": 150}, (150, 150)), ({"max_size": 50}, (DEFAULT_MIN_SIZE, 50))],
    ids=["small-max-only", "large-min-only", "max-above-default-min"],
)
def test_single_pool_bound_adjusts_default(pool_config: "dict[str, int]", expected: "tuple[int, int]") -> None:
    """Test setting one bound never conflicts with the default of the other."""
    config = PsycopgConfig(pool_config={"host": "db", **pool_config})

    assert (config.pool_config["min_size"], config.pool_config["max_size"]) == expected


def test_min_size_above_max_size_is_rejected() -> None:
    """Test inconsistent pool bounds fail at configuration time."""
    with pytest.raises(ImproperConfigurationError):
        PsycopgConfig(pool_config={"min_size": 20, "max_size": 5})


def test_create_and_close_pool() -> None:
    """Test the pool is built from the split settings and closed once."""
    config = PsycopgConfig(pool_config={"conninfo": "dbname=app", "host": "db", "max_size": 20, "timeout": 3.0})

    with patch("sqlaudit.adapters.psycopg.config.ConnectionPool") as pool_class:
        pool = config.create_pool()

    pool_class.assert_called_once_with(
        "dbname=app",
        kwargs={"host": "db"},
        open=True,
        min_size=DEFAULT_MIN_SIZE,
        max_size=20,
        timeout=3.0,
        max_lifetime=DEFAULT_MAX_LIFETIME,
    )
    assert config.create_pool() is pool

    config.close_pool()

    pool.close.assert_called_once_with()
    assert config.pool_instance is None


def test_provide_session_uses_pooled_connection() -> None:
    """Test sessions borrow a pooled connection and commit it."""
    pool = MagicMock()
    connection = pool.connection.return_value.__enter__.return_value
    config = PsycopgConfig(pool_instance=pool, observers=[])

    with config.provide_session() as session:
        assert isinstance(session, PsycopgDriver)
        assert session.connection is connection

    connection.commit.assert_called_once_with()


def test_driver_uses_pyformat_and_wraps_dicts() -> None:
    """Test %s placeholders, percent escaping and JSON adaptation of dicts."""
    cursor = MagicMock()
    cursor.description = [("id",)]
    cursor.fetchall.return_value = [(1,)]
    connection = Mock()
    connection.cursor.return_value = cursor
    driver = PsycopgDriver(connection, observers=[])

    rows = driver.select(select("users", "id").where("email LIKE '%@x.io'").where("prefs @> ?", {"dark": True}))

    sql, parameters = cursor.execute.call_args.args
    assert sql == "SELECT id FROM users WHERE email LIKE '%%@x.io' AND prefs @> %s"
    assert isinstance(parameters[0], Jsonb)
    assert rows == [{"id": 1}]
    assert PsycopgDriver.parameter_style is ParameterStyle.POSITIONAL_PYFORMAT
    cursor.close.assert_called_once_with()


def test_begin_only_issues_sql_in_autocommit_mode() -> None:
    """Test explicit BEGIN is sent only when psycopg would not open a transaction itself."""
    connection = Mock(autocommit=False)
    PsycopgDriver(connection, observers=[]).begin()
    connection.execute.assert_not_called()

    connection.autocommit = True
    PsycopgDriver(connection, observers=[]).begin()
    connection.execute.assert_called_once_with("BEGIN")
