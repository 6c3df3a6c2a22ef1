from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from sqlaudit.builder._predicates import Between, Fragment, InList, IsNull, Like
from sqlaudit.exceptions import SQLBuilderError
from sqlaudit.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlaudit.builder._predicates import Predicate

__all__ = ("WhereClauseMixin",)

logger = get_logger("sqlaudit.builder")


class WhereClauseMixin:
    """Mixin providing AND-joined WHERE helpers for SELECT, UPDATE and DELETE builders."""

    table: str
    _predicates: "list[Predicate]"

    def where(self, condition: str, *values: Any) -> Self:
        """Add a predicate fragment, ANDed with the others.

        Args:
            condition: SQL text using ``?`` or ``$1``-style local placeholders.
            *values: Values for the fragment's placeholders, in local order.

        Returns:
            The current builder instance for method chaining.
        """
        self._predicates.append(Fragment.create(condition, values))
        return self

    def where_in(self, column: str, values: Sequence[Any]) -> Self:
        """Add ``column IN (...)`` with one placeholder per value.

        An empty ``values`` adds no predicate at all, so the statement is not
        narrowed by this call. Callers that need "matches nothing" semantics
        must check for emptiness themselves. A ``str`` or ``bytes`` value is
        rejected rather than split into characters.

        Returns:
            The current builder instance for method chaining.
        """
        return self._add_in_list(column, values, negate=False)

    def where_not_in(self, column: str, values: Sequence[Any]) -> Self:
        """Add ``column NOT IN (...)``; an empty ``values`` is a no-op.

        Returns:
            The current builder instance for method chaining.
        """
        return self._add_in_list(column, values, negate=True)

    def where_like(self, column: str, pattern: str) -> Self:
        self._predicates.append(Like(column, pattern))
        return self

    def where_between(self, column: str, start: Any, end: Any) -> Self:
        """Add an inclusive ``column BETWEEN start AND end`` range.

        Returns:
            The current builder instance for method chaining.
        """
        self._predicates.append(Between(column, start, end))
        return self

    def where_null(self, column: str) -> Self:
        self._predicates.append(IsNull(column))
        return self

    def where_not_null(self, column: str) -> Self:
        self._predicates.append(IsNull(column, negate=True))
        return self

    def _add_in_list(self, column: str, values: Sequence[Any], negate: bool) -> Self:
        if isinstance(values, (str, bytes)):
            method = "where_not_in" if negate else "where_in"
            msg = f"{method} expects a sequence of values for {column}, not a single {type(values).__name__}"
            raise SQLBuilderError(msg)
        if not values:
            logger.debug("Empty value list for %s on %s; predicate skipped", column, self.table)
            return self
        self._predicates.append(InList(column, tuple(values), negate=negate))
        return self
