"""Runtime-checkable protocols for the collaborators of the data access layer.

The file provider and database handle are external collaborators; these protocols describe the capabilities the
pipeline consumes so any implementation, including test doubles, can be injected.
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqldal.driver.result import Row, Rows
    from sqldal.parameters import ParameterStyle

__all__ = (
    "DatabaseHandleProtocol",
    "FileProviderProtocol",
    "HasParameterStyleProtocol",
    "ListableFileProviderProtocol",
    "PreparedStatementProtocol",
)


@runtime_checkable
class FileProviderProtocol(Protocol):
    """Resolves logical names to raw bytes."""

    def read_bytes(self, name: str) -> bytes:
        """Return the content stored under ``name``.

        Raises:
            FileNotFoundError: If nothing is stored under ``name``.
        """
        ...

    def exists(self, name: str) -> bool:
        """Report whether ``name`` resolves to content."""
        ...


@runtime_checkable
class ListableFileProviderProtocol(FileProviderProtocol, Protocol):
    """File provider that can enumerate its names."""

    def list_names(self) -> "list[str]":
        """Return every name the provider can resolve."""
        ...


@runtime_checkable
class PreparedStatementProtocol(Protocol):
    """A statement prepared against a database handle."""

    def query_row(self, *args: Any) -> "Row":
        """Execute and return a single-row handle."""
        ...

    def query(self, *args: Any) -> "Rows":
        """Execute and return a row-set handle."""
        ...


@runtime_checkable
class DatabaseHandleProtocol(Protocol):
    """Connection-like handle able to prepare statements."""

    def prepare(self, sql: str) -> PreparedStatementProtocol:
        """Prepare ``sql`` for execution."""
        ...


@runtime_checkable
class HasParameterStyleProtocol(Protocol):
    """Handle that declares the positional placeholder style of its driver."""

    @property
    def parameter_style(self) -> "ParameterStyle":
        """Native positional placeholder style."""
        ...

