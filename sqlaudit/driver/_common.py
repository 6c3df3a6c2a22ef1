"""Shared driver types and helpers."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from sqlaudit.builder import BuiltStatement, QueryBuilder

__all__ = ("PaginationResult", "Statement", "resolve_statement", "rows_to_dicts")

Statement = Union[QueryBuilder, BuiltStatement]


@dataclass
class PaginationResult:
    """One page of rows plus the totals needed to render pagination."""

    page: int
    per_page: int
    total: int
    data: list[dict[str, Any]] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "per_page": self.per_page,
            "total": self.total,
            "total_pages": self.total_pages,
            "data": self.data,
        }


def resolve_statement(statement: Statement) -> BuiltStatement:
    """Build a builder, or pass an already built statement through."""
    if isinstance(statement, QueryBuilder):
        return statement.build()
    return statement


def rows_to_dicts(description: "Sequence[Any] | None", rows: Sequence[Sequence[Any]]) -> list[dict[str, Any]]:
    """Map DB-API rows to dictionaries keyed by column name."""
    column_names = [column[0] for column in description or ()]
    return [dict(zip(column_names, row)) for row in rows]
