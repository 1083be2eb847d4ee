"""Database handle over a PEP 249 (DB-API 2.0) connection.

DB-API drivers have no explicit prepare call, so :meth:`DBAPIHandle.prepare` only validates the text and the
driver compiles the statement on first execution. Syntax errors therefore surface as execution errors for these
drivers.
"""

import contextlib
import datetime
from decimal import Decimal
from types import ModuleType
from typing import TYPE_CHECKING, Any, Optional

from sqldal.driver.result import Row, Rows
from sqldal.exceptions import ImproperConfigurationError, StatementExecutionError, StatementPrepareError
from sqldal.parameters import POSITIONAL_STYLES, ParameterStyle
from sqldal.utils.logging import get_logger
from sqldal.utils.serializers import to_json

if TYPE_CHECKING:
    from sqldal.typing import TypeCoercionMap

__all__ = (
    "SQLITE_TYPE_COERCION_MAP",
    "DBAPICursor",
    "DBAPIHandle",
    "DBAPIPreparedStatement",
    "resolve_rowcount",
    "sqlite_handle",
)

logger = get_logger("driver.dbapi")


SQLITE_TYPE_COERCION_MAP: "TypeCoercionMap" = {
    bool: int,
    datetime.datetime: lambda v: v.isoformat(),
    datetime.date: lambda v: v.isoformat(),
    datetime.time: lambda v: v.isoformat(),
    Decimal: str,
    dict: to_json,
    list: to_json,
    tuple: lambda v: to_json(list(v)),
}


def resolve_rowcount(cursor: Any) -> int:
    """Return the cursor rowcount, or 0 when the driver does not report one."""
    rowcount = getattr(cursor, "rowcount", None)
    if not isinstance(rowcount, int) or rowcount < 0:
        return 0
    return rowcount


class DBAPICursor:
    """Context manager for DB-API cursor management."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self.cursor: Optional[Any] = None

    def __enter__(self) -> Any:
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


class DBAPIPreparedStatement:
    """Statement bound to a connection, executed on a fresh cursor per call."""

    __slots__ = ("_closed", "autocommit", "connection", "sql", "type_coercion_map")

    def __init__(
        self,
        connection: Any,
        sql: str,
        type_coercion_map: "Optional[TypeCoercionMap]" = None,
        autocommit: bool = False,
    ) -> None:
        self.connection = connection
        self.sql = sql
        self.type_coercion_map = type_coercion_map or {}
        self.autocommit = autocommit
        self._closed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, closed={self._closed!r})"

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def _coerce(self, args: "tuple[Any, ...]") -> "tuple[Any, ...]":
        if not self.type_coercion_map:
            return args
        coerced = []
        for value in args:
            converter = self.type_coercion_map.get(type(value))
            coerced.append(converter(value) if converter is not None else value)
        return tuple(coerced)

    def _run(self, cursor: Any, args: "tuple[Any, ...]") -> None:
        if self._closed:
            msg = "Cannot execute a closed statement"
            raise StatementExecutionError(msg, self.sql)
        cursor.execute(self.sql, self._coerce(args))

    def _finish(self) -> None:
        if self.autocommit:
            self.connection.commit()

    def query_row(self, *args: Any) -> Row:
        with DBAPICursor(self.connection) as cursor:
            self._run(cursor, args)
            rowcount = resolve_rowcount(cursor)
            if cursor.description is None:
                row = Row.empty(rowcount=rowcount)
            else:
                column_names = [column[0] for column in cursor.description]
                row = Row(cursor.fetchone(), column_names, rowcount)
        self._finish()
        return row

    def query(self, *args: Any) -> Rows:
        with DBAPICursor(self.connection) as cursor:
            self._run(cursor, args)
            rowcount = resolve_rowcount(cursor)
            if cursor.description is None:
                rows = Rows(rowcount=rowcount)
            else:
                column_names = [column[0] for column in cursor.description]
                rows = Rows(cursor.fetchall(), column_names, rowcount)
        self._finish()
        return rows


class DBAPIHandle:
    """:class:`~sqldal.protocols.DatabaseHandleProtocol` implementation for DB-API connections.

    Example:
        >>> handle = DBAPIHandle.for_module(psycopg.connect(dsn), psycopg)
        >>> dal = DataAccessLayer(handle, load_files("sql"))
    """

    __slots__ = ("autocommit", "connection", "parameter_style", "type_coercion_map")

    def __init__(
        self,
        connection: Any,
        parameter_style: ParameterStyle = ParameterStyle.QMARK,
        type_coercion_map: "Optional[TypeCoercionMap]" = None,
        autocommit: bool = False,
    ) -> None:
        """Initialize the handle.

        Args:
            connection: Open DB-API connection.
            parameter_style: Positional style the driver accepts.
            type_coercion_map: Converters applied to arguments by exact type before execution.
            autocommit: Commit after every execution. Leave disabled to manage transactions on the connection.

        Raises:
            ImproperConfigurationError: If ``parameter_style`` is not a positional style.
        """
        if parameter_style not in POSITIONAL_STYLES:
            msg = f"Parameter style {parameter_style} is not a positional style"
            raise ImproperConfigurationError(msg)
        self.connection = connection
        self.parameter_style = ParameterStyle(parameter_style)
        self.type_coercion_map = dict(type_coercion_map or {})
        self.autocommit = autocommit

    @classmethod
    def for_module(cls, connection: Any, module: ModuleType, **kwargs: Any) -> "DBAPIHandle":
        """Create a handle using the ``paramstyle`` declared by a DB-API module."""
        return cls(connection, ParameterStyle.from_paramstyle(module.paramstyle), **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(connection={self.connection!r}, parameter_style={self.parameter_style!r})"

    def prepare(self, sql: str) -> DBAPIPreparedStatement:
        """Validate ``sql`` and bind it to the connection.

        Raises:
            StatementPrepareError: If ``sql`` is empty.
        """
        if not sql or not sql.strip():
            msg = "Cannot prepare an empty SQL statement"
            raise StatementPrepareError(msg, sql)
        logger.debug("Prepared statement", extra={"extra_fields": {"sql": sql}})
        return DBAPIPreparedStatement(self.connection, sql, self.type_coercion_map, self.autocommit)


def sqlite_handle(connection: Any, autocommit: bool = False) -> DBAPIHandle:
    """Create a handle for a :mod:`sqlite3` connection."""
    return DBAPIHandle(connection, ParameterStyle.QMARK, SQLITE_TYPE_COERCION_MAP, autocommit=autocommit)
