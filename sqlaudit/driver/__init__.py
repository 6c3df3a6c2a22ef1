"""Driver protocols and base classes for database adapters."""

from sqlaudit.driver._common import PaginationResult, Statement, resolve_statement, rows_to_dicts
from sqlaudit.driver._sync import SyncDriverAdapterBase

__all__ = ("PaginationResult", "Statement", "SyncDriverAdapterBase", "resolve_statement", "rows_to_dicts")
