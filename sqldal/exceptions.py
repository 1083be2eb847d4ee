from collections.abc import Generator, Sequence
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "MissingDependencyError",
    "MissingFileProviderError",
    "MissingParameterError",
    "NotFoundError",
    "ParameterError",
    "QueryError",
    "RepositoryError",
    "SQLDalError",
    "SQLLoadingError",
    "StatementExecutionError",
    "StatementPrepareError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "wrap_exceptions",
)


class SQLDalError(Exception):
    """Base exception class from which all sqldal exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLDalError``.

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


class MissingDependencyError(SQLDalError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqldal[{install_package or package}]' to install sqldal with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLDalError):
    """Improper Configuration error.

    Raised when the data access layer is missing a collaborator or a setting has an invalid value.
    """


# -- Repository Errors --
class RepositoryError(SQLDalError):
    """Base repository exception type."""


class NotFoundError(RepositoryError):
    """An identity does not exist."""


class TemplateNotFoundError(NotFoundError):
    """A SQL template name does not resolve to any file."""

    name: str
    suggestions: "tuple[str, ...]"

    def __init__(self, name: str, suggestions: "Optional[Sequence[str]]" = None, message: Optional[str] = None) -> None:
        self.name = name
        self.suggestions = tuple(suggestions or ())
        if message is None:
            message = f"SQL template {name!r} not found" if name else "SQL template name cannot be empty"
        if self.suggestions:
            message = f"{message}. Did you mean: {', '.join(repr(s) for s in self.suggestions)}?"
        super().__init__(detail=message)


class MissingFileProviderError(ImproperConfigurationError, TemplateNotFoundError):
    """No file provider is configured, so no template can be resolved."""

    def __init__(self, name: str = "") -> None:
        TemplateNotFoundError.__init__(
            self, name, message="No SQL file provider configured; cannot resolve SQL template " + repr(name)
        )


# -- SQL Loading Errors --
class SQLLoadingError(SQLDalError):
    """Issues loading referenced SQL file."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues loading referenced SQL file."
        super().__init__(message)


class TemplateLoadError(SQLLoadingError):
    """A SQL template exists but its content could not be read or decoded."""

    name: str

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Failed to read SQL template {name!r}: {reason}")


# -- SQL Parameter Errors --
class ParameterError(SQLDalError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when a placeholder has no entry in the supplied parameters."""

    missing: "tuple[str, ...]"

    def __init__(self, missing: "Sequence[str]", sql: Optional[str] = None) -> None:
        self.missing = tuple(missing)
        names = ", ".join(repr(name) for name in self.missing)
        super().__init__(f"Missing required parameter(s): {names}", sql)


# -- SQL Query Errors --
class QueryError(SQLDalError):
    """Base class for Query errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class StatementPrepareError(QueryError):
    """The database rejected the statement text, including empty text."""


class StatementExecutionError(QueryError):
    """Executing a prepared statement failed."""


@contextmanager
def wrap_exceptions(
    error_class: "type[QueryError]", message: str, sql: Optional[str] = None
) -> Generator[None, None, None]:
    """Re-raise any non-sqldal exception as ``error_class``.

    Exceptions that already belong to ``error_class`` pass through untouched.

    Args:
        error_class: Query error type to raise.
        message: Message prefix; the original error text is appended.
        sql: SQL text attached to the raised error.

    Raises:
        error_class: When the wrapped block raises.
    """
    try:
        yield
    except error_class:
        raise
    except Exception as exc:
        raise error_class(f"{message}: {exc}", sql) from exc
