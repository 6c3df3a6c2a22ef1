"""INSERT statement builders."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from sqlaudit.builder._base import QueryBuilder
from sqlaudit.builder._predicates import ParameterBinder
from sqlaudit.exceptions import SQLBuilderError
from sqlaudit.utils.logging import get_logger

__all__ = ("BulkInsertBuilder", "InsertBuilder")

logger = get_logger("sqlaudit.builder")


@dataclass
class InsertBuilder(QueryBuilder):
    """Builder for single-row INSERT statements.

    Renders ``INSERT INTO table (cols) VALUES ($1, ...) RETURNING id``. When an
    actor is supplied through :meth:`set_created_by`, ``created_by`` and
    ``created_at`` are appended after every caller column at build time.
    """

    operation: ClassVar[str] = "INSERT"

    _columns: list[str] = field(default_factory=list, init=False)
    _values: list[Any] = field(default_factory=list, init=False)
    _created_by: Optional[str] = field(default=None, init=False)
    _returning: str = field(default="id", init=False)

    def set(self, column: str, value: Any) -> "InsertBuilder":
        """Add a column and its value.

        Returns:
            InsertBuilder: The current builder instance for method chaining.
        """
        self._columns.append(column)
        self._values.append(value)
        return self

    def values(self, **pairs: Any) -> "InsertBuilder":
        """Add several columns at once, in keyword order.

        Returns:
            InsertBuilder: The current builder instance for method chaining.
        """
        for column, value in pairs.items():
            self.set(column, value)
        return self

    def set_created_by(self, actor: str) -> "InsertBuilder":
        self._created_by = actor
        return self

    def returning(self, column: str) -> "InsertBuilder":
        """Name the generated key column returned by the INSERT (default ``id``).

        Returns:
            InsertBuilder: The current builder instance for method chaining.
        """
        self._returning = column
        return self

    def _render(self, binder: ParameterBinder) -> str:
        columns = list(self._columns)
        values = list(self._values)
        if self._created_by is not None:
            columns.extend((self.audit_columns.created_by, self.audit_columns.created_at))
            values.extend((self._created_by, self.clock()))
        if not columns:
            msg = f"INSERT into {self.table} has no columns"
            raise SQLBuilderError(msg)
        placeholders = ", ".join(binder.bind(value) for value in values)
        return (
            f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING {self._returning}"
        )


@dataclass
class BulkInsertBuilder(QueryBuilder):
    """Builder for multi-row INSERT statements.

    Rows whose arity differs from the column list are dropped when added and
    logged at ERROR level; they never reach the database.
    """

    operation: ClassVar[str] = "INSERT"

    columns: Sequence[str] = ()
    _rows: list[tuple[Any, ...]] = field(default_factory=list, init=False)
    _created_by: Optional[str] = field(default=None, init=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.columns = tuple(self.columns)
        if not self.columns:
            msg = f"Bulk INSERT into {self.table} requires at least one column"
            raise SQLBuilderError(msg)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def add_row(self, *values: Any) -> "BulkInsertBuilder":
        """Queue one row of values, in column order.

        Returns:
            BulkInsertBuilder: The current builder instance for method chaining.
        """
        if len(values) != len(self.columns):
            logger.error(
                "Bulk insert: column count mismatch",
                extra={"extra_fields": {"table": self.table, "expected": len(self.columns), "got": len(values)}},
            )
            return self
        self._rows.append(tuple(values))
        return self

    def set_created_by(self, actor: str) -> "BulkInsertBuilder":
        self._created_by = actor
        return self

    def _render(self, binder: ParameterBinder) -> str:
        if not self._rows:
            msg = f"No rows to insert into {self.table}"
            raise SQLBuilderError(msg)
        columns = list(self.columns)
        audit: tuple[Any, ...] = ()
        if self._created_by is not None:
            columns.extend((self.audit_columns.created_by, self.audit_columns.created_at))
            audit = (self._created_by, self.clock())
        rows = ", ".join(
            "(" + ", ".join(binder.bind(value) for value in (*row, *audit)) + ")" for row in self._rows
        )
        return f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES {rows}"
