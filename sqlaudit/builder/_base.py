"""Shared pieces of the statement builders.

Builders are single-use value objects: created per logical query, mutated
through chained calls and rendered by :meth:`QueryBuilder.build` into a
:class:`BuiltStatement` carrying numeric ``$n`` placeholders and the
matching argument list.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

from sqlaudit.builder._predicates import ParameterBinder
from sqlaudit.exceptions import SQLBuilderError, SQLParsingError

__all__ = (
    "DEFAULT_AUDIT_COLUMNS",
    "AuditColumns",
    "BuiltStatement",
    "Clock",
    "QueryBuilder",
    "utc_now",
)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuditColumns:
    """Column names of the audit and soft-delete convention.

    Every table targeted by audit injection or soft deletes is expected to
    carry these six columns.
    """

    created_at: str = "created_at"
    created_by: str = "created_by"
    updated_at: str = "updated_at"
    updated_by: str = "updated_by"
    deleted_at: str = "deleted_at"
    deleted_by: str = "deleted_by"


DEFAULT_AUDIT_COLUMNS = AuditColumns()


@dataclass
class BuiltStatement:
    """Final SQL text plus the ordered arguments for its placeholders."""

    sql: str
    parameters: list[Any] = field(default_factory=list)
    operation: str = "SELECT"

    def __iter__(self) -> Iterator[Any]:
        """Allow ``sql, parameters = builder.build()``."""
        yield self.sql
        yield self.parameters

    def validate(self, dialect: str = "postgres") -> exp.Expression:
        """Parse the statement to confirm it is syntactically valid.

        Args:
            dialect: sqlglot dialect used to parse the text.

        Raises:
            SQLParsingError: If sqlglot cannot parse the statement.

        Returns:
            exp.Expression: The parsed statement.
        """
        try:
            expression = sqlglot.parse_one(self.sql, read=dialect)
        except ParseError as e:
            msg = f"Built statement is not valid {dialect} SQL: {e}"
            raise SQLParsingError(msg) from e
        if expression is None:
            msg = "Built statement is empty"
            raise SQLParsingError(msg)
        return expression


@dataclass
class QueryBuilder:
    """Base class for SQL statement builders."""

    operation: ClassVar[str] = ""

    table: str
    clock: Clock = field(default=utc_now, kw_only=True, repr=False)
    audit_columns: AuditColumns = field(default=DEFAULT_AUDIT_COLUMNS, kw_only=True, repr=False)

    def __post_init__(self) -> None:
        if not self.table:
            msg = f"{type(self).__name__} requires a table name"
            raise SQLBuilderError(msg)

    def _render(self, binder: ParameterBinder) -> str:
        msg = "Subclasses must implement _render"
        raise NotImplementedError(msg)

    def build(self) -> BuiltStatement:
        """Render the statement.

        Rendering does not change builder state, so building twice with the
        same clock yields identical text and arguments.

        Returns:
            BuiltStatement: The SQL text and its ordered arguments.
        """
        binder = ParameterBinder()
        sql = self._render(binder)
        return BuiltStatement(sql=sql, parameters=binder.parameters, operation=self.operation)

    def __str__(self) -> str:
        return self._render(ParameterBinder())
