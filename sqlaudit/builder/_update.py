"""UPDATE statement builder."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlaudit.builder._base import QueryBuilder
from sqlaudit.builder._predicates import Assignment, ParameterBinder, render_conjunction
from sqlaudit.builder._where import WhereClauseMixin
from sqlaudit.exceptions import SQLBuilderError
from sqlaudit.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlaudit.builder._predicates import Predicate

__all__ = ("UpdateBuilder",)

logger = get_logger("sqlaudit.builder")


@dataclass
class UpdateBuilder(WhereClauseMixin, QueryBuilder):
    """Builder for UPDATE statements.

    SET placeholders are numbered first, then the audit pair
    (``updated_by``/``updated_at``) when an actor was supplied, then the
    WHERE predicates. Predicates are ANDed; there is no OR grouping here.

    Without any predicate the statement updates every row of the table.
    That is rendered as asked and only logged.
    """

    operation: ClassVar[str] = "UPDATE"

    _assignments: list[Assignment] = field(default_factory=list, init=False)
    _predicates: "list[Predicate]" = field(default_factory=list, init=False)
    _updated_by: Optional[str] = field(default=None, init=False)

    def set(self, column: str, value: Any) -> "UpdateBuilder":
        """Set a column to a value.

        Returns:
            UpdateBuilder: The current builder instance for method chaining.
        """
        self._assignments.append(Assignment(column, value))
        return self

    def values(self, **pairs: Any) -> "UpdateBuilder":
        for column, value in pairs.items():
            self.set(column, value)
        return self

    def set_updated_by(self, actor: str) -> "UpdateBuilder":
        """Record ``actor`` in ``updated_by`` and stamp ``updated_at`` at build time.

        Returns:
            UpdateBuilder: The current builder instance for method chaining.
        """
        self._updated_by = actor
        return self

    def _render(self, binder: ParameterBinder) -> str:
        assignments = list(self._assignments)
        if self._updated_by is not None:
            assignments.append(Assignment(self.audit_columns.updated_by, self._updated_by))
            assignments.append(Assignment(self.audit_columns.updated_at, self.clock()))
        if not assignments:
            msg = f"UPDATE of {self.table} has no SET clause"
            raise SQLBuilderError(msg)

        sql = f"UPDATE {self.table} SET {', '.join(item.render(binder) for item in assignments)}"
        if self._predicates:
            return f"{sql} WHERE {render_conjunction(self._predicates, binder)}"
        logger.warning("UPDATE of %s has no WHERE clause and affects every row", self.table)
        return sql
