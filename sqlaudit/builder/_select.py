# ruff: noqa: PLR0904
"""SELECT statement builder."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlaudit.builder._base import BuiltStatement, QueryBuilder
from sqlaudit.builder._predicates import AnyOf, Fragment, ParameterBinder, render_conjunction, to_fragment
from sqlaudit.builder._where import WhereClauseMixin

if TYPE_CHECKING:
    from sqlaudit.builder._predicates import Condition, Predicate

__all__ = ("DEFAULT_PER_PAGE", "SelectBuilder", "normalize_page")

DEFAULT_PER_PAGE = 10


@dataclass
class SelectBuilder(WhereClauseMixin, QueryBuilder):
    """Builder for SELECT statements.

    Renders ``SELECT [DISTINCT] cols FROM table [joins] [WHERE ...]
    [GROUP BY ...] [HAVING ...] [ORDER BY ...] [LIMIT n] [OFFSET n]``.
    Predicates render in call order; HAVING placeholders follow WHERE ones.
    """

    operation: ClassVar[str] = "SELECT"

    _columns: list[str] = field(default_factory=lambda: ["*"], init=False)
    _distinct: bool = field(default=False, init=False)
    _joins: list[str] = field(default_factory=list, init=False)
    _predicates: "list[Predicate]" = field(default_factory=list, init=False)
    _group_by: list[str] = field(default_factory=list, init=False)
    _having: list[Fragment] = field(default_factory=list, init=False)
    _order_by: list[str] = field(default_factory=list, init=False)
    _limit: Optional[int] = field(default=None, init=False)
    _offset: Optional[int] = field(default=None, init=False)

    def columns(self, *columns: str) -> "SelectBuilder":
        """Replace the projection. With no arguments the projection is ``*``.

        Returns:
            SelectBuilder: The current builder instance for method chaining.
        """
        self._columns = list(columns) or ["*"]
        return self

    def distinct(self) -> "SelectBuilder":
        self._distinct = True
        return self

    def or_where(self, *conditions: "Condition") -> "SelectBuilder":
        """Add a group of conditions joined by OR, ANDed with the rest.

        Each condition is either fragment text or a ``(fragment, *values)``
        tuple, e.g. ``or_where(("role = ?", "admin"), "is_staff")``.

        Returns:
            SelectBuilder: The current builder instance for method chaining.
        """
        if conditions:
            self._predicates.append(AnyOf(tuple(to_fragment(condition) for condition in conditions)))
        return self

    def join(self, clause: str) -> "SelectBuilder":
        """Add a join clause verbatim, e.g. ``"JOIN roles r ON r.id = u.role_id"``.

        Returns:
            SelectBuilder: The current builder instance for method chaining.
        """
        self._joins.append(clause)
        return self

    def inner_join(self, table: str, on: str) -> "SelectBuilder":
        return self.join(f"INNER JOIN {table} ON {on}")

    def left_join(self, table: str, on: str) -> "SelectBuilder":
        return self.join(f"LEFT JOIN {table} ON {on}")

    def right_join(self, table: str, on: str) -> "SelectBuilder":
        return self.join(f"RIGHT JOIN {table} ON {on}")

    def group_by(self, *columns: str) -> "SelectBuilder":
        self._group_by.extend(columns)
        return self

    def having(self, condition: str, *values: Any) -> "SelectBuilder":
        """Add a HAVING fragment, ANDed with other HAVING fragments.

        Returns:
            SelectBuilder: The current builder instance for method chaining.
        """
        self._having.append(Fragment.create(condition, values))
        return self

    def order_by(self, *clauses: str) -> "SelectBuilder":
        self._order_by.extend(clauses)
        return self

    def limit(self, value: int) -> "SelectBuilder":
        """Set LIMIT. Values below 1 leave the statement unlimited.

        Returns:
            SelectBuilder: The current builder instance for method chaining.
        """
        self._limit = value
        return self

    def offset(self, value: int) -> "SelectBuilder":
        self._offset = value
        return self

    def paginate(self, page: int, per_page: int = DEFAULT_PER_PAGE) -> "SelectBuilder":
        """Apply LIMIT/OFFSET for a 1-based page.

        ``page`` below 1 is treated as the first page and ``per_page`` below 1
        falls back to :data:`DEFAULT_PER_PAGE`.

        Returns:
            SelectBuilder: The current builder instance for method chaining.
        """
        page, per_page = normalize_page(page, per_page)
        return self.limit(per_page).offset((page - 1) * per_page)

    def build_count(self) -> BuiltStatement:
        """Render a ``COUNT(*)`` over the rows this SELECT would match.

        ORDER BY, LIMIT and OFFSET are ignored. Grouped or DISTINCT selects are
        counted through a derived table so each output row counts once.

        Returns:
            BuiltStatement: The count statement and its arguments.
        """
        binder = ParameterBinder()
        if self._distinct or self._group_by or self._having:
            inner = " ".join([self._select_clause(), *self._render_source(binder)])
            sql = f"SELECT COUNT(*) FROM ({inner}) AS counted"
        else:
            sql = " ".join(["SELECT COUNT(*)", *self._render_source(binder)])
        return BuiltStatement(sql=sql, parameters=binder.parameters, operation=self.operation)

    def _select_clause(self) -> str:
        keyword = "SELECT DISTINCT" if self._distinct else "SELECT"
        return f"{keyword} {', '.join(self._columns)}"

    def _render_source(self, binder: ParameterBinder) -> list[str]:
        parts = [f"FROM {self.table}", *self._joins]
        if self._predicates:
            parts.append(f"WHERE {render_conjunction(self._predicates, binder)}")
        if self._group_by:
            parts.append(f"GROUP BY {', '.join(self._group_by)}")
        if self._having:
            parts.append(f"HAVING {render_conjunction(self._having, binder)}")
        return parts

    def _render(self, binder: ParameterBinder) -> str:
        parts = [self._select_clause(), *self._render_source(binder)]
        if self._order_by:
            parts.append(f"ORDER BY {', '.join(self._order_by)}")
        if self._limit is not None and self._limit > 0:
            parts.append(f"LIMIT {self._limit}")
        if self._offset is not None and self._offset > 0:
            parts.append(f"OFFSET {self._offset}")
        return " ".join(parts)


def normalize_page(page: int, per_page: int) -> tuple[int, int]:
    """Clamp 1-based pagination input to usable values."""
    return max(page, 1), per_page if per_page >= 1 else DEFAULT_PER_PAGE
