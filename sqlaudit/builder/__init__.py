"""Statement builders with placeholder renumbering and audit-column injection.

This module provides a fluent interface for building positionally
parameterized SQL (``$1, $2, ...``) from independently authored fragments.
"""

from collections.abc import Sequence
from typing import Any

from sqlaudit.builder._base import DEFAULT_AUDIT_COLUMNS, AuditColumns, BuiltStatement, Clock, QueryBuilder, utc_now
from sqlaudit.builder._delete import DeleteBuilder
from sqlaudit.builder._insert import BulkInsertBuilder, InsertBuilder
from sqlaudit.builder._predicates import ParameterBinder
from sqlaudit.builder._select import DEFAULT_PER_PAGE, SelectBuilder, normalize_page
from sqlaudit.builder._update import UpdateBuilder

__all__ = (
    "DEFAULT_AUDIT_COLUMNS",
    "DEFAULT_PER_PAGE",
    "AuditColumns",
    "BuiltStatement",
    "BulkInsertBuilder",
    "Clock",
    "DeleteBuilder",
    "InsertBuilder",
    "ParameterBinder",
    "QueryBuilder",
    "SelectBuilder",
    "UpdateBuilder",
    "bulk_insert",
    "delete",
    "insert",
    "normalize_page",
    "select",
    "update",
    "utc_now",
)


def select(table: str, *columns: str, **options: Any) -> SelectBuilder:
    """Create a SELECT builder.

    Args:
        table: Table name, optionally with an alias (``"users u"``).
        *columns: Optional columns to select. If not provided, selects all columns.
        **options: ``clock`` and ``audit_columns`` overrides.

    Returns:
        SelectBuilder: A new SelectBuilder instance.
    """
    builder = SelectBuilder(table, **options)
    if columns:
        builder.columns(*columns)
    return builder


def insert(table: str, **options: Any) -> InsertBuilder:
    """Create an INSERT builder.

    Args:
        table: Target table name.
        **options: ``clock`` and ``audit_columns`` overrides.

    Returns:
        InsertBuilder: A new InsertBuilder instance.
    """
    return InsertBuilder(table, **options)


def bulk_insert(table: str, columns: Sequence[str], **options: Any) -> BulkInsertBuilder:
    """Create a multi-row INSERT builder.

    Args:
        table: Target table name.
        columns: Column names every row supplies, in order.
        **options: ``clock`` and ``audit_columns`` overrides.

    Returns:
        BulkInsertBuilder: A new BulkInsertBuilder instance.
    """
    return BulkInsertBuilder(table, columns, **options)


def update(table: str, **options: Any) -> UpdateBuilder:
    """Create an UPDATE builder.

    Args:
        table: Target table name.
        **options: ``clock`` and ``audit_columns`` overrides.

    Returns:
        UpdateBuilder: A new UpdateBuilder instance.
    """
    return UpdateBuilder(table, **options)


def delete(table: str, **options: Any) -> DeleteBuilder:
    """Create a DELETE builder, soft by default.

    Args:
        table: Target table name.
        **options: ``clock`` and ``audit_columns`` overrides.

    Returns:
        DeleteBuilder: A new DeleteBuilder instance.
    """
    return DeleteBuilder(table, **options)
