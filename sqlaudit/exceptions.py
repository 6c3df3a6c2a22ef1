from typing import Any, Optional

__all__ = (
    "ExtraParameterError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "MissingParameterError",
    "NotFoundError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "SQLAuditError",
    "SQLBuilderError",
    "SQLParsingError",
)


class SQLAuditError(Exception):
    """Base exception class from which all sqlaudit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLAuditError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLAuditError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlaudit[{install_package or package}]' to install sqlaudit with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class SQLParsingError(SQLAuditError):
    """Issues parsing SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues parsing SQL statement."
        super().__init__(message)


class SQLBuilderError(SQLAuditError):
    """Issues Building or Generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class ParameterError(SQLAuditError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when a fragment references more placeholders than values were supplied."""


class ExtraParameterError(ParameterError):
    """Raised when more values are supplied than a fragment has placeholders."""


class ParameterStyleMismatchError(ParameterError):
    """Raised when a single fragment mixes ``?`` and ``$N`` placeholders."""


class ImproperConfigurationError(SQLAuditError):
    """Improper Configuration error.

    Raised when a database configuration is missing required settings.
    """


class NotFoundError(SQLAuditError):
    """An identity does not exist."""
