"""Synchronous driver protocol implementation."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from copy import copy
from time import perf_counter, time
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypeVar

from sqlaudit.builder import BuiltStatement, SelectBuilder, normalize_page
from sqlaudit.driver._common import PaginationResult, Statement, resolve_statement, rows_to_dicts
from sqlaudit.exceptions import NotFoundError, SQLAuditError
from sqlaudit.observability import StatementObserver, create_event, default_statement_observer
from sqlaudit.parameters import ParameterConverter, ParameterStyle

if TYPE_CHECKING:
    from sqlaudit.observability import StatementEvent

__all__ = ("SyncDriverAdapterBase",)

ResultT = TypeVar("ResultT")


class SyncDriverAdapterBase(ABC):
    """Executes built statements on a DB-API connection.

    Every execution is reported to the observers given at construction,
    successful or not. Database errors are re-raised exactly as the driver
    library raised them; classifying them (duplicate key, not found,
    transient) is the caller's job.
    """

    __slots__ = ("_converter", "connection", "observers")

    dialect: ClassVar[str] = ""
    parameter_style: ClassVar[ParameterStyle] = ParameterStyle.NUMERIC

    def __init__(self, connection: Any, observers: "Optional[Sequence[StatementObserver]]" = None) -> None:
        self.connection = connection
        self.observers: tuple[StatementObserver, ...] = (
            tuple(observers) if observers is not None else (default_statement_observer,)
        )
        self._converter = ParameterConverter()

    @abstractmethod
    def with_cursor(self, connection: Any) -> "AbstractContextManager[Any]":
        """Return a context manager yielding a cursor and closing it afterwards."""

    @abstractmethod
    def begin(self) -> None:
        """Begin a database transaction on the current connection."""

    @abstractmethod
    def rollback(self) -> None:
        """Rollback the current transaction on the current connection."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the current transaction on the current connection."""

    def prepare_parameters(self, parameters: Sequence[Any]) -> Sequence[Any]:
        """Hook for adapters that must coerce values before binding."""
        return parameters

    def select(self, statement: Statement) -> list[dict[str, Any]]:
        """Execute a row-returning statement.

        Returns:
            The rows as dictionaries keyed by column name.
        """

        def handler(cursor: Any) -> "tuple[list[dict[str, Any]], Optional[int]]":
            data = rows_to_dicts(cursor.description, cursor.fetchall())
            return data, len(data)

        return self._run(resolve_statement(statement), handler)

    def select_one(self, statement: Statement) -> dict[str, Any]:
        """Execute a statement expected to match exactly one row.

        Raises:
            NotFoundError: If no row matched.

        Returns:
            The first row.
        """
        row = self.select_one_or_none(statement)
        if row is None:
            msg = "No row matched the statement"
            raise NotFoundError(msg)
        return row

    def select_one_or_none(self, statement: Statement) -> Optional[dict[str, Any]]:
        rows = self.select(statement)
        return rows[0] if rows else None

    def select_value(self, statement: Statement) -> Any:
        """Execute a statement and return the first column of the first row.

        Raises:
            SQLAuditError: If the statement returned no rows.

        Returns:
            The scalar value.
        """

        def handler(cursor: Any) -> "tuple[Any, Optional[int]]":
            row = cursor.fetchone()
            if row is None:
                msg = "Statement returned no rows"
                raise SQLAuditError(msg)
            return row[0], 1

        return self._run(resolve_statement(statement), handler)

    def execute(self, statement: Statement) -> int:
        """Execute a statement and return the number of affected rows.

        Zero affected rows is a normal result, not an error.

        Returns:
            Rows affected.
        """

        def handler(cursor: Any) -> "tuple[int, Optional[int]]":
            affected = max(cursor.rowcount or 0, 0)
            return affected, affected

        return self._run(resolve_statement(statement), handler)

    def execute_insert(self, statement: Statement) -> str:
        """Execute an ``INSERT ... RETURNING`` and return the generated key.

        Raises:
            SQLAuditError: If the statement returned no key.

        Returns:
            The generated primary key as a string.
        """

        def handler(cursor: Any) -> "tuple[str, Optional[int]]":
            row = cursor.fetchone()
            if row is None:
                msg = "INSERT did not return a generated key"
                raise SQLAuditError(msg)
            return str(row[0]), 1

        return self._run(resolve_statement(statement), handler)

    def raw_query(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """Run hand-written SQL using ``$1``-style placeholders and return rows."""
        return self.select(BuiltStatement(sql=sql, parameters=list(args), operation="RAW_QUERY"))

    def raw_exec(self, sql: str, *args: Any) -> int:
        """Run hand-written SQL using ``$1``-style placeholders and return rows affected."""
        return self.execute(BuiltStatement(sql=sql, parameters=list(args), operation="RAW_EXEC"))

    def count(self, table: str, where: Optional[str] = None, *args: Any) -> int:
        """Count rows of ``table``, optionally filtered by a predicate fragment.

        Returns:
            The number of matching rows.
        """
        builder = SelectBuilder(table).columns("COUNT(*)")
        if where:
            builder.where(where, *args)
        return int(self.select_value(builder))

    def exists(self, table: str, where: Optional[str] = None, *args: Any) -> bool:
        return self.count(table, where, *args) > 0

    def paginate(self, builder: SelectBuilder, page: int, per_page: int) -> PaginationResult:
        """Fetch one page of ``builder`` together with the total row count.

        The page is read through a copy; LIMIT and OFFSET on ``builder`` are
        left as the caller set them.

        Returns:
            PaginationResult: The page of rows and the totals.
        """
        page, per_page = normalize_page(page, per_page)
        total = int(self.select_value(builder.build_count()))
        data = self.select(copy(builder).paginate(page, per_page))
        return PaginationResult(page=page, per_page=per_page, total=total, data=data)

    def _run(self, statement: BuiltStatement, handler: "Callable[[Any], tuple[ResultT, Optional[int]]]") -> ResultT:
        sql, parameters = statement.sql, list(statement.parameters)
        if self._converter.needs_conversion(self.parameter_style):
            sql, parameters = self._converter.convert(sql, parameters, self.parameter_style)
        prepared = self.prepare_parameters(parameters)
        started_at = time()
        start = perf_counter()
        try:
            with self.with_cursor(self.connection) as cursor:
                cursor.execute(sql, prepared)
                result, rows_affected = handler(cursor)
        except Exception as e:
            self._notify(statement, None, perf_counter() - start, started_at, e)
            raise
        self._notify(statement, rows_affected, perf_counter() - start, started_at, None)
        return result

    def _notify(
        self,
        statement: BuiltStatement,
        rows_affected: Optional[int],
        duration_s: float,
        started_at: float,
        error: Optional[BaseException],
    ) -> None:
        event: StatementEvent = create_event(
            sql=statement.sql,
            parameters=statement.parameters,
            driver=type(self).__name__,
            operation=statement.operation,
            rows_affected=rows_affected,
            duration_s=duration_s,
            started_at=started_at,
            error=error,
        )
        for observer in self.observers:
            observer(event)
