"""sqldal: run named SQL templates with bound parameters."""

from sqldal import base, config, driver, exceptions, loader, parameters, storage, typing, utils
from sqldal.__metadata__ import __version__
from sqldal.base import DataAccessLayer
from sqldal.config import DALConfig
from sqldal.driver import DBAPIHandle, ExecutionMode, Row, Rows, StatementExecutor, sqlite_handle
from sqldal.exceptions import (
    ImproperConfigurationError,
    MissingFileProviderError,
    MissingParameterError,
    NotFoundError,
    ParameterError,
    SQLDalError,
    StatementExecutionError,
    StatementPrepareError,
    TemplateLoadError,
    TemplateNotFoundError,
)
from sqldal.loader import SQLTemplate, TemplateStore
from sqldal.parameters import BoundStatement, ParameterBinder, ParameterStyle, bind
from sqldal.storage import LocalFileProvider, MemoryFileProvider, load_files
from sqldal.typing import ParameterMapping, ParameterValue

__all__ = (
    "BoundStatement",
    "DALConfig",
    "DBAPIHandle",
    "DataAccessLayer",
    "ExecutionMode",
    "ImproperConfigurationError",
    "LocalFileProvider",
    "MemoryFileProvider",
    "MissingFileProviderError",
    "MissingParameterError",
    "NotFoundError",
    "ParameterBinder",
    "ParameterError",
    "ParameterMapping",
    "ParameterStyle",
    "ParameterValue",
    "Row",
    "Rows",
    "SQLDalError",
    "SQLTemplate",
    "StatementExecutionError",
    "StatementExecutor",
    "StatementPrepareError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "TemplateStore",
    "__version__",
    "base",
    "bind",
    "config",
    "driver",
    "exceptions",
    "load_files",
    "loader",
    "parameters",
    "sqlite_handle",
    "storage",
    "typing",
    "utils",
)
