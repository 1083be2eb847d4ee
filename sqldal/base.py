"""Data access entry point.

:class:`DataAccessLayer` runs named SQL templates: load the template, bind the named parameters, then prepare and
execute the statement.

Example:
    >>> dal = DataAccessLayer(sqlite_handle(sqlite3.connect("app.db")), load_files("sql"))
    >>> row = dal.query_row("customers/by_id.sql", {"id": 1})
    >>> rows = dal.query("customers/all.sql")
"""

from typing import TYPE_CHECKING, Optional

from sqldal.driver.executor import ExecutionMode, StatementExecutor
from sqldal.loader import TemplateStore
from sqldal.parameters import ParameterBinder, ParameterStyle
from sqldal.protocols import HasParameterStyleProtocol
from sqldal.utils.logging import get_logger

if TYPE_CHECKING:
    from sqldal.config import DALConfig
    from sqldal.driver.result import Row, Rows
    from sqldal.parameters import BoundStatement
    from sqldal.protocols import DatabaseHandleProtocol, FileProviderProtocol
    from sqldal.typing import ParameterMapping

__all__ = ("DataAccessLayer",)

logger = get_logger("base")

DEFAULT_PARAMETER_STYLE = ParameterStyle.NUMERIC


class DataAccessLayer:
    """Runs SQL templates stored on a file provider against a database handle.

    Instances hold references to their collaborators only and never change after construction, so one instance can
    serve concurrent callers as long as the handle and provider can.
    """

    __slots__ = ("binder", "executor", "templates")

    def __init__(
        self,
        db: "DatabaseHandleProtocol",
        files: "Optional[FileProviderProtocol]",
        *,
        parameter_style: "Optional[ParameterStyle]" = None,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the data access layer.

        Args:
            db: Handle used to prepare and execute statements.
            files: Provider holding SQL templates. Without one, every call fails with
                :class:`~sqldal.exceptions.MissingFileProviderError`.
            parameter_style: Placeholder style to bind into. Defaults to the handle's ``parameter_style`` when it
                declares one, otherwise ``$1``-style numeric markers.
            encoding: Encoding of template files.
        """
        if parameter_style is None:
            declared = db.parameter_style if isinstance(db, HasParameterStyleProtocol) else None
            parameter_style = declared if isinstance(declared, ParameterStyle) else DEFAULT_PARAMETER_STYLE
        self.templates = TemplateStore(files, encoding=encoding)
        self.binder = ParameterBinder(parameter_style)
        self.executor = StatementExecutor(db)

    @classmethod
    def from_config(cls, db: "DatabaseHandleProtocol", config: "DALConfig") -> "DataAccessLayer":
        """Create a data access layer from a :class:`~sqldal.config.DALConfig`.

        Raises:
            ImproperConfigurationError: If the configured SQL root is not a directory.
        """
        return cls(
            db,
            config.create_file_provider(),
            parameter_style=config.parameter_style,
            encoding=config.encoding,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(templates={self.templates!r}, binder={self.binder!r})"

    @property
    def parameter_style(self) -> ParameterStyle:
        return self.binder.style

    def bind(self, name: str, params: "ParameterMapping" = None) -> "BoundStatement":
        """Load template ``name`` and bind ``params`` without touching the database.

        Raises:
            MissingFileProviderError: If no file provider is configured.
            TemplateNotFoundError: If the template does not exist.
            TemplateLoadError: If the template cannot be read or decoded.
            MissingParameterError: If a placeholder has no value in ``params``.

        Returns:
            The bound statement.
        """
        sql = self.templates.load_text(name)
        return self.binder.bind(sql, params)

    def query_row(self, name: str, params: "ParameterMapping" = None) -> "Row":
        """Run template ``name`` and return a single-row handle.

        A query matching nothing returns an empty :class:`~sqldal.driver.result.Row`, not an error.

        Args:
            name: Logical template name.
            params: Values for the template's named placeholders.

        Raises:
            MissingFileProviderError: If no file provider is configured.
            TemplateNotFoundError: If the template does not exist.
            TemplateLoadError: If the template cannot be read or decoded.
            MissingParameterError: If a placeholder has no value in ``params``.
            StatementPrepareError: If the database rejects the statement, including empty templates.
            StatementExecutionError: If execution fails.

        Returns:
            The row handle.
        """
        bound = self.bind(name, params)
        logger.debug("Running %s as single-row query", name)
        return self.executor.execute(bound, ExecutionMode.SINGLE)

    def query(self, name: str, params: "ParameterMapping" = None) -> "Rows":
        """Run template ``name`` and return a row-set handle.

        Args:
            name: Logical template name.
            params: Values for the template's named placeholders.

        Raises:
            MissingFileProviderError: If no file provider is configured.
            TemplateNotFoundError: If the template does not exist.
            TemplateLoadError: If the template cannot be read or decoded.
            MissingParameterError: If a placeholder has no value in ``params``.
            StatementPrepareError: If the database rejects the statement, including empty templates.
            StatementExecutionError: If execution fails.

        Returns:
            The row-set handle, possibly empty.
        """
        bound = self.bind(name, params)
        logger.debug("Running %s as multi-row query", name)
        return self.executor.execute(bound, ExecutionMode.MULTI)
