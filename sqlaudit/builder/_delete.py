"""DELETE statement builder with soft and hard modes."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlaudit.builder._base import BuiltStatement, QueryBuilder
from sqlaudit.builder._predicates import Assignment, ParameterBinder, render_conjunction
from sqlaudit.builder._where import WhereClauseMixin
from sqlaudit.exceptions import SQLBuilderError
from sqlaudit.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlaudit.builder._predicates import Predicate

__all__ = ("DeleteBuilder",)

logger = get_logger("sqlaudit.builder")


@dataclass
class DeleteBuilder(WhereClauseMixin, QueryBuilder):
    """Builder for logical (soft) and physical (hard) deletes.

    Soft mode, the default, renders::

        UPDATE table SET deleted_at = $1[, deleted_by = $2], updated_at = $n WHERE ...

    with the clock read once so every timestamp in the statement is equal.
    :meth:`hard_delete` switches to ``DELETE FROM table WHERE ...`` and makes
    any actor set through :meth:`set_deleted_by` irrelevant.

    The switch may happen exactly once and only before the first
    :meth:`build`.
    """

    operation: ClassVar[str] = "DELETE"

    _predicates: "list[Predicate]" = field(default_factory=list, init=False)
    _deleted_by: Optional[str] = field(default=None, init=False)
    _hard: bool = field(default=False, init=False)
    _built: bool = field(default=False, init=False)

    @property
    def is_hard_delete(self) -> bool:
        return self._hard

    def set_deleted_by(self, actor: str) -> "DeleteBuilder":
        """Record ``actor`` in ``deleted_by``. Ignored in hard mode.

        Returns:
            DeleteBuilder: The current builder instance for method chaining.
        """
        self._deleted_by = actor
        return self

    def hard_delete(self) -> "DeleteBuilder":
        """Switch to a physical ``DELETE FROM``.

        Raises:
            SQLBuilderError: If the builder is already in hard mode or was built.

        Returns:
            DeleteBuilder: The current builder instance for method chaining.
        """
        if self._built:
            msg = "Cannot switch to hard delete after the statement was built"
            raise SQLBuilderError(msg)
        if self._hard:
            msg = "Builder is already in hard delete mode"
            raise SQLBuilderError(msg)
        self._hard = True
        return self

    def build(self) -> BuiltStatement:
        statement = super().build()
        self._built = True
        return statement

    def _render(self, binder: ParameterBinder) -> str:
        if self._hard:
            sql = f"DELETE FROM {self.table}"
        else:
            now = self.clock()
            assignments = [Assignment(self.audit_columns.deleted_at, now)]
            if self._deleted_by is not None:
                assignments.append(Assignment(self.audit_columns.deleted_by, self._deleted_by))
            assignments.append(Assignment(self.audit_columns.updated_at, now))
            sql = f"UPDATE {self.table} SET {', '.join(item.render(binder) for item in assignments)}"

        if self._predicates:
            return f"{sql} WHERE {render_conjunction(self._predicates, binder)}"
        logger.warning("DELETE on %s has no WHERE clause and affects every row", self.table)
        return sql
