"""sqlaudit: parameterized SQL building with audit-column conventions."""

from sqlaudit import builder, driver, exceptions, observability, parameters, utils
from sqlaudit.__metadata__ import __version__
from sqlaudit.builder import (
    AuditColumns,
    BuiltStatement,
    BulkInsertBuilder,
    DeleteBuilder,
    InsertBuilder,
    QueryBuilder,
    SelectBuilder,
    UpdateBuilder,
    bulk_insert,
    delete,
    insert,
    select,
    update,
)
from sqlaudit.config import NoPoolSyncConfig, SyncDatabaseConfig
from sqlaudit.driver import PaginationResult, SyncDriverAdapterBase
from sqlaudit.exceptions import (
    NotFoundError,
    ParameterError,
    SQLAuditError,
    SQLBuilderError,
    SQLParsingError,
)
from sqlaudit.observability import StatementEvent, StatementObserver
from sqlaudit.parameters import ParameterStyle

__all__ = (
    "AuditColumns",
    "BuiltStatement",
    "BulkInsertBuilder",
    "DeleteBuilder",
    "InsertBuilder",
    "NoPoolSyncConfig",
    "NotFoundError",
    "PaginationResult",
    "ParameterError",
    "ParameterStyle",
    "QueryBuilder",
    "SQLAuditError",
    "SQLBuilderError",
    "SQLParsingError",
    "SelectBuilder",
    "StatementEvent",
    "StatementObserver",
    "SyncDatabaseConfig",
    "SyncDriverAdapterBase",
    "UpdateBuilder",
    "__version__",
    "builder",
    "bulk_insert",
    "delete",
    "driver",
    "exceptions",
    "insert",
    "observability",
    "parameters",
    "select",
    "update",
    "utils",
)
