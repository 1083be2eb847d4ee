"""Statement execution.

Drives prepare, bind and execute against a database handle. Each call prepares a fresh statement and closes it
before returning; nothing is cached or retried.
"""

import logging
import time
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Optional, Union, overload

import sqlglot
from sqlglot.errors import SqlglotError
from typing_extensions import Literal

from sqldal.exceptions import StatementExecutionError, StatementPrepareError, wrap_exceptions
from sqldal.parameters import ParameterStyle
from sqldal.utils.logging import get_logger, log_with_context
from sqldal.utils.text import leading_keyword

if TYPE_CHECKING:
    from sqldal.driver.result import Row, Rows
    from sqldal.parameters import BoundStatement
    from sqldal.protocols import DatabaseHandleProtocol, PreparedStatementProtocol

__all__ = ("ExecutionMode", "StatementExecutor", "classify_operation")

logger = get_logger("driver.executor")

_STYLE_DIALECTS: "dict[ParameterStyle, Optional[str]]" = {
    ParameterStyle.QMARK: "sqlite",
    ParameterStyle.NUMERIC: "postgres",
    ParameterStyle.POSITIONAL_COLON: "oracle",
    ParameterStyle.POSITIONAL_PYFORMAT: "postgres",
}


class ExecutionMode(str, Enum):
    """Result shape requested from the executor."""

    SINGLE = "single"
    MULTI = "multi"

    def __str__(self) -> str:
        return self.value


@lru_cache(maxsize=512)
def classify_operation(sql: str, dialect: Optional[str] = None) -> str:
    """Return the statement type of ``sql`` (``SELECT``, ``INSERT``, ...).

    Falls back to the leading keyword when sqlglot cannot parse the statement.

    Args:
        sql: SQL text.
        dialect: sqlglot dialect used for parsing.

    Returns:
        Upper-case statement type.
    """
    try:
        expression = sqlglot.parse_one(sql, dialect=dialect)
    except SqlglotError:
        return leading_keyword(sql)
    if expression is None or expression.key == "command":
        return leading_keyword(sql)
    return expression.key.upper()


class StatementExecutor:
    """Prepares and runs bound statements on a database handle."""

    __slots__ = ("handle",)

    def __init__(self, handle: "DatabaseHandleProtocol") -> None:
        self.handle = handle

    def __repr__(self) -> str:
        return f"{type(self).__name__}(handle={self.handle!r})"

    @overload
    def execute(self, bound: "BoundStatement", mode: Literal[ExecutionMode.SINGLE]) -> "Row": ...

    @overload
    def execute(self, bound: "BoundStatement", mode: Literal[ExecutionMode.MULTI]) -> "Rows": ...

    @overload
    def execute(self, bound: "BoundStatement", mode: "Union[ExecutionMode, str]") -> "Union[Row, Rows]": ...

    def execute(self, bound: "BoundStatement", mode: "Union[ExecutionMode, str]") -> "Union[Row, Rows]":
        """Prepare ``bound.sql`` and execute it with ``bound.parameters``.

        Args:
            bound: Statement produced by the parameter binder.
            mode: ``SINGLE`` for a row handle, ``MULTI`` for a row-set handle.

        Raises:
            StatementPrepareError: If the SQL is empty or the handle rejects it.
            StatementExecutionError: If execution fails.

        Returns:
            A :class:`Row` for ``SINGLE`` or a :class:`Rows` for ``MULTI``.
        """
        mode = ExecutionMode(mode)
        sql = bound.sql
        if not sql.strip():
            msg = "Cannot prepare an empty SQL statement"
            raise StatementPrepareError(msg, sql)

        with wrap_exceptions(StatementPrepareError, "Failed to prepare statement", sql):
            statement = self.handle.prepare(sql)

        started = time.perf_counter()
        try:
            with wrap_exceptions(StatementExecutionError, "Failed to execute statement", sql):
                if mode is ExecutionMode.SINGLE:
                    result: Union[Row, Rows] = statement.query_row(*bound.parameters)
                else:
                    result = statement.query(*bound.parameters)
        finally:
            self._close_statement(statement)

        if logger.isEnabledFor(logging.DEBUG):
            log_with_context(
                logger,
                logging.DEBUG,
                "Executed statement",
                operation=classify_operation(sql, _STYLE_DIALECTS.get(bound.style)),
                mode=str(mode),
                parameter_count=len(bound.parameters),
                duration_ms=round((time.perf_counter() - started) * 1000, 3),
            )
        return result

    def query_row(self, bound: "BoundStatement") -> "Row":
        """Execute ``bound`` and return a single-row handle."""
        return self.execute(bound, ExecutionMode.SINGLE)

    def query(self, bound: "BoundStatement") -> "Rows":
        """Execute ``bound`` and return a row-set handle."""
        return self.execute(bound, ExecutionMode.MULTI)

    @staticmethod
    def _close_statement(statement: "PreparedStatementProtocol") -> None:
        close = getattr(statement, "close", None)
        if not callable(close):
            return
        try:
            close()
        except Exception:
            logger.debug("Failed to close prepared statement", exc_info=True)
