"""Unit tests for the soft/hard DELETE builder."""

import logging
from datetime import datetime
from typing import Callable

import pytest

from sqlaudit.builder import AuditColumns, delete
from sqlaudit.exceptions import SQLBuilderError


def test_soft_delete_with_actor_scenario(clock: Callable[[], datetime], now: datetime) -> None:
    """Test the canonical soft delete: deleted_at, deleted_by, updated_at, then WHERE."""
    statement = delete("users", clock=clock).where("id = ?", "u1").set_deleted_by("admin1").build()

    assert statement.sql == "UPDATE users SET deleted_at = $1, deleted_by = $2, updated_at = $3 WHERE id = $4"
    assert statement.parameters == [now, "admin1", now, "u1"]
    assert statement.operation == "DELETE"


def test_soft_delete_without_actor(clock: Callable[[], datetime], now: datetime) -> None:
    """Test soft delete without an actor stamps the timestamps only."""
    sql, parameters = delete("users", clock=clock).where("id = ?", "u1").build()

    assert sql == "UPDATE users SET deleted_at = $1, updated_at = $2 WHERE id = $3"
    assert parameters == [now, now, "u1"]


def test_clock_is_read_once_per_build() -> None:
    """Test every timestamp in one statement carries the same value."""
    ticks = iter([datetime(2024, 1, 1), datetime(2024, 1, 2)])
    sql, parameters = delete("users", clock=lambda: next(ticks)).set_deleted_by("a").where("id = ?", 1).build()

    assert parameters[0] == parameters[2] == datetime(2024, 1, 1)
    assert sql.startswith("UPDATE users SET")


def test_hard_delete_ignores_actor() -> None:
    """Test hard mode after setting an actor references no audit columns."""
    builder = delete("users").set_deleted_by("admin1").where("id = ?", "u1").hard_delete()

    sql, parameters = builder.build()

    assert builder.is_hard_delete
    assert sql == "DELETE FROM users WHERE id = $1"
    assert parameters == ["u1"]


def test_builder_starts_in_soft_mode() -> None:
    """Test soft mode is the default."""
    assert delete("users").is_hard_delete is False


def test_hard_delete_twice_fails() -> None:
    """Test the mode switch is allowed exactly once."""
    builder = delete("users").hard_delete()

    with pytest.raises(SQLBuilderError, match="already"):
        builder.hard_delete()


def test_hard_delete_after_build_fails() -> None:
    """Test the mode cannot change once the statement was built."""
    builder = delete("users").where("id = ?", 1)
    builder.build()

    with pytest.raises(SQLBuilderError, match="after the statement was built"):
        builder.hard_delete()
    assert builder.is_hard_delete is False


def test_build_is_repeatable(clock: Callable[[], datetime]) -> None:
    """Test building twice with a fixed clock is byte-identical."""
    builder = delete("users", clock=clock).where("id = ?", "u1").where_in("tenant", ["a", "b"]).set_deleted_by("x")

    assert tuple(builder.build()) == tuple(builder.build())


def test_custom_audit_column_names(clock: Callable[[], datetime], now: datetime) -> None:
    """Test soft delete honours renamed audit columns."""
    columns = AuditColumns(deleted_at="removed_at", deleted_by="removed_by", updated_at="modified_at")
    sql, parameters = (
        delete("users", clock=clock, audit_columns=columns).set_deleted_by("a").where("id = ?", 1).build()
    )

    assert sql == "UPDATE users SET removed_at = $1, removed_by = $2, modified_at = $3 WHERE id = $4"
    assert parameters == [now, "a", now, 1]


@pytest.mark.parametrize("hard", [False, True], ids=["soft", "hard"])
def test_delete_without_where_is_rendered_and_logged(hard: bool, caplog: pytest.LogCaptureFixture) -> None:
    """Test an unrestricted delete is not prevented but is logged."""
    builder = delete("users")
    if hard:
        builder.hard_delete()

    with caplog.at_level(logging.WARNING, logger="sqlaudit"):
        sql = builder.build().sql

    assert "WHERE" not in sql
    assert any(record.levelno == logging.WARNING for record in caplog.records)


@pytest.mark.parametrize("hard", [False, True], ids=["soft", "hard"])
def test_delete_statements_parse(hard: bool) -> None:
    """Test both modes render valid PostgreSQL."""
    builder = delete("users").where("id = ?", 1)
    if hard:
        builder.hard_delete()

    expression = builder.build().validate()

    assert expression.key == ("delete" if hard else "update")
