"""Statement execution and database handle adapters."""

from sqldal.driver.dbapi import DBAPIHandle, DBAPIPreparedStatement, sqlite_handle
from sqldal.driver.executor import ExecutionMode, StatementExecutor, classify_operation
from sqldal.driver.result import Row, Rows

__all__ = (
    "DBAPIHandle",
    "DBAPIPreparedStatement",
    "ExecutionMode",
    "Row",
    "Rows",
    "StatementExecutor",
    "classify_operation",
    "sqlite_handle",
)
