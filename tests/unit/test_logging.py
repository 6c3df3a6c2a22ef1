"""Unit tests for sqlaudit logging utilities."""

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from sqlaudit.observability import create_event, default_statement_observer
from sqlaudit.utils.logging import (
    REDACTED,
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def _restore_sqlaudit_logger() -> Iterator[None]:
    root = logging.getLogger("sqlaudit")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
    set_correlation_id(None)


def _record(message: str = "hello", **attrs: object) -> logging.LogRecord:
    record = logging.LogRecord("sqlaudit.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


def test_get_logger_forces_namespace() -> None:
    """Test loggers are always created under the sqlaudit namespace."""
    assert get_logger().name == "sqlaudit"
    assert get_logger("builder").name == "sqlaudit.builder"
    assert get_logger("sqlaudit.driver").name == "sqlaudit.driver"


def test_get_logger_adds_filter_once() -> None:
    """Test repeated lookups do not stack correlation filters."""
    logger = get_logger("test_filter_once")
    get_logger("test_filter_once")

    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


def test_correlation_id_round_trip() -> None:
    """Test the context variable accessors."""
    set_correlation_id("abc")
    assert get_correlation_id() == "abc"
    set_correlation_id(None)
    assert get_correlation_id() is None


def test_correlation_filter_sets_attribute() -> None:
    """Test the filter copies the active id onto records."""
    set_correlation_id("cid-1")
    record = _record()

    assert CorrelationIDFilter().filter(record) is True
    assert record.correlation_id == "cid-1"  # type: ignore[attr-defined]


def test_structured_formatter_outputs_json() -> None:
    """Test records render as JSON with extra fields and correlation id."""
    set_correlation_id("cid-2")
    record = _record("statement done", extra_fields={"rows_affected": 3, "parameters": ["a", 1]})

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "statement done"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "sqlaudit.test"
    assert payload["correlation_id"] == "cid-2"
    assert payload["rows_affected"] == 3
    assert payload["parameters"] == ["a", 1]


def test_structured_formatter_includes_exception() -> None:
    """Test exception text is included when present."""
    try:
        raise ValueError("bad")
    except ValueError:
        record = _record(exc_info=sys.exc_info())

    payload = json.loads(StructuredFormatter().format(record))

    assert "ValueError: bad" in payload["exception"]


@pytest.mark.parametrize("format_style", ["structured", "simple"], ids=["structured", "simple"])
def test_configure_logging(format_style: str, tmp_path: Path) -> None:
    """Test configure_logging installs console, file and extra handlers."""
    extra = logging.NullHandler()
    log_file = tmp_path / "sqlaudit.log"

    configure_logging(level="debug", format_style=format_style, log_to_file=str(log_file), extra_handlers=[extra])

    root = logging.getLogger("sqlaudit")
    assert root.level == logging.DEBUG
    assert root.propagate is False
    assert len(root.handlers) == 3
    assert extra in root.handlers
    expected = StructuredFormatter if format_style == "structured" else logging.Formatter
    assert type(root.handlers[0].formatter) is expected
    for handler in root.handlers:
        handler.flush()
    assert "sqlaudit logging configured" in log_file.read_text()


def _statement_record(**formatter_options: object) -> "dict[str, object]":
    event = create_event(
        sql="UPDATE users SET password_hash = $1 WHERE id = $2",
        parameters=["secret-hash", "u1"],
        driver="SqliteDriver",
        operation="UPDATE",
        rows_affected=1,
        duration_s=0.0125,
        started_at=100.0,
    )
    record = _record("statement done", statement_event=event)
    return json.loads(StructuredFormatter(**formatter_options).format(record))  # type: ignore[arg-type]


def test_structured_formatter_renders_statement_events() -> None:
    """Test statement events are written under a statement key with millisecond durations."""
    payload = _statement_record()

    assert payload["statement"] == {
        "sql": "UPDATE users SET password_hash = $1 WHERE id = $2",
        "parameters": ["secret-hash", "u1"],
        "driver": "SqliteDriver",
        "operation": "UPDATE",
        "rows_affected": 1,
        "duration_ms": 12.5,
        "started_at": 100.0,
        "error": None,
    }


def test_structured_formatter_redacts_statement_parameters() -> None:
    """Test bound arguments can be masked while keeping their count."""
    payload = _statement_record(redact_parameters=True)

    assert payload["statement"]["parameters"] == [REDACTED, REDACTED]  # type: ignore[index]
    assert "secret-hash" not in json.dumps(payload)


def test_configure_logging_redacts_default_observer_output(tmp_path: Path) -> None:
    """Test the default observer's records are redacted in the configured file output."""
    log_file = tmp_path / "statements.log"
    configure_logging(level="info", log_to_file=str(log_file), extra_handlers=[], redact_parameters=True)
    event = create_event(
        sql="SELECT * FROM users WHERE email = $1",
        parameters=["a@b.com"],
        driver="SqliteDriver",
        operation="SELECT",
        rows_affected=1,
        duration_s=0.001,
    )

    default_statement_observer(event)
    for handler in logging.getLogger("sqlaudit").handlers:
        handler.flush()

    (line,) = log_file.read_text().splitlines()
    assert json.loads(line)["statement"]["parameters"] == [REDACTED]
