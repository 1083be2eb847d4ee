from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Callable

import pytest

from sqldal.driver.result import Row, Rows
from sqldal.storage import MemoryFileProvider, load_files
from sqldal.utils.logging import ROOT_LOGGER_NAME

here = Path(__file__).parent
root_path = here.parent
sql_fixtures_path = here / "fixtures" / "sqls"


class RecordingStatement:
    """Prepared statement double that records every execution."""

    def __init__(self, db: RecordingDb, sql: str) -> None:
        self.db = db
        self.sql = sql
        self.closed = False

    def _record(self, kind: str, args: tuple[Any, ...]) -> None:
        self.db.executions.append((kind, self.sql, args))
        if self.db.execute_error is not None:
            raise self.db.execute_error

    def query_row(self, *args: Any) -> Row:
        self._record("query_row", args)
        return self.db.row

    def query(self, *args: Any) -> Rows:
        self._record("query", args)
        return self.db.rows

    def close(self) -> None:
        self.closed = True
        if self.db.close_error is not None:
            raise self.db.close_error


class RecordingDb:
    """Database handle double.

    ``prepare_ok=False`` makes every prepare call fail the way a database rejecting the statement would.
    """

    def __init__(self, prepare_ok: bool = True) -> None:
        self.prepare_ok = prepare_ok
        self.prepared: list[str] = []
        self.statements: list[RecordingStatement] = []
        self.executions: list[tuple[str, str, tuple[Any, ...]]] = []
        self.row = Row(("ok",), ("status",), 1)
        self.rows = Rows([(1,), (2,)], ("id",), 2)
        self.execute_error: Exception | None = None
        self.close_error: Exception | None = None

    def prepare(self, sql: str) -> RecordingStatement:
        self.prepared.append(sql)
        if not self.prepare_ok:
            msg = "syntax error at end of input"
            raise RuntimeError(msg)
        statement = RecordingStatement(self, sql)
        self.statements.append(statement)
        return statement


@pytest.fixture(autouse=True)
def reset_sqldal_logger() -> Iterator[None]:
    """Undo handler and propagation changes made by ``configure_logging``."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sql_root() -> Path:
    """Directory holding the SQL template fixtures."""
    return sql_fixtures_path


@pytest.fixture
def file_provider(sql_root: Path) -> MemoryFileProvider:
    return load_files(sql_root)


@pytest.fixture
def recording_db() -> RecordingDb:
    return RecordingDb()


@pytest.fixture
def make_db() -> Callable[..., RecordingDb]:
    """Factory for database doubles with custom prepare behaviour."""
    return RecordingDb
