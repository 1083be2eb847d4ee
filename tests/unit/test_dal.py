"""Unit tests for :class:`DataAccessLayer` against a recording database double.

Mirrors the query paths an application takes: missing provider, unknown template, empty template, database
rejecting the statement, and successful single and multi row queries.
"""

from pathlib import Path
from typing import Any

import pytest

from sqldal import DataAccessLayer
from sqldal.config import DALConfig
from sqldal.driver.dbapi import DBAPIHandle
from sqldal.driver.result import Row, Rows
from sqldal.exceptions import (
    ImproperConfigurationError,
    MissingFileProviderError,
    MissingParameterError,
    StatementPrepareError,
    TemplateNotFoundError,
)
from sqldal.parameters import ParameterStyle
from sqldal.storage import MemoryFileProvider

CUSTOMER_PARAMS = {"first_name": "bearpig", "last_name": "man", "address": b'{"test": "foo"}'}


def test_no_file_provider_is_configuration_error(recording_db: Any) -> None:
    dal = DataAccessLayer(recording_db, None)

    with pytest.raises(ImproperConfigurationError) as exc_info:
        dal.query_row("", None)

    assert isinstance(exc_info.value, MissingFileProviderError)
    assert recording_db.prepared == []


def test_no_file_provider_fails_query(recording_db: Any) -> None:
    with pytest.raises(MissingFileProviderError):
        DataAccessLayer(recording_db, None).query("select_all_customer.sql")


def test_unknown_template_never_reaches_database(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    dal = DataAccessLayer(recording_db, file_provider)

    with pytest.raises(TemplateNotFoundError):
        dal.query_row("manbearpig.sql", None)

    assert recording_db.prepared == []


def test_empty_template_fails_to_prepare(make_db: Any, file_provider: MemoryFileProvider) -> None:
    db = make_db(prepare_ok=False)
    dal = DataAccessLayer(db, file_provider)

    with pytest.raises(StatementPrepareError):
        dal.query_row("test.sql", {})


def test_empty_template_fails_even_when_database_accepts(
    recording_db: Any, file_provider: MemoryFileProvider
) -> None:
    with pytest.raises(StatementPrepareError):
        DataAccessLayer(recording_db, file_provider).query_row("test.sql", {})

    assert recording_db.executions == []


def test_prepare_rejection_is_prepare_error(make_db: Any, file_provider: MemoryFileProvider) -> None:
    db = make_db(prepare_ok=False)

    with pytest.raises(StatementPrepareError):
        DataAccessLayer(db, file_provider).query_row("insert_customer.sql", CUSTOMER_PARAMS)

    assert len(db.prepared) == 1


def test_missing_parameter_never_reaches_database(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    with pytest.raises(MissingParameterError) as exc_info:
        DataAccessLayer(recording_db, file_provider).query_row("insert_customer.sql", {"first_name": "bearpig"})

    assert exc_info.value.missing == ("last_name", "address")
    assert recording_db.prepared == []


def test_query_row_binds_numeric_by_default(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    row = DataAccessLayer(recording_db, file_provider).query_row("insert_customer.sql", CUSTOMER_PARAMS)

    assert isinstance(row, Row)
    kind, sql, args = recording_db.executions[0]
    assert kind == "query_row"
    assert "VALUES ($1, $2, $3)" in sql
    assert args == ("bearpig", "man", b'{"test": "foo"}')


def test_query_ignores_extra_params(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    rows = DataAccessLayer(recording_db, file_provider).query("delete_customer.sql", CUSTOMER_PARAMS)

    assert isinstance(rows, Rows)
    kind, _, args = recording_db.executions[0]
    assert kind == "query"
    assert args == ("bearpig", "man")


def test_query_without_params(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    DataAccessLayer(recording_db, file_provider).query_row("select_all_customer.sql", None)

    assert recording_db.executions[0][2] == ()


def test_repeated_placeholder_in_nested_template(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    dal = DataAccessLayer(recording_db, file_provider, parameter_style=ParameterStyle.QMARK)

    dal.query("customers/by_name.sql", {"name": "man"})

    _, sql, args = recording_db.executions[0]
    assert "first_name = ? OR last_name = ?" in sql
    assert "-- Customers whose first or last name equals :name" in sql
    assert args == ("man", "man")


def test_style_defaults_to_handle_style(file_provider: MemoryFileProvider) -> None:
    handle = DBAPIHandle(object(), ParameterStyle.POSITIONAL_PYFORMAT)

    assert DataAccessLayer(handle, file_provider).parameter_style is ParameterStyle.POSITIONAL_PYFORMAT


def test_explicit_style_overrides_handle_style(file_provider: MemoryFileProvider) -> None:
    handle = DBAPIHandle(object(), ParameterStyle.QMARK)
    dal = DataAccessLayer(handle, file_provider, parameter_style=ParameterStyle.NUMERIC)

    assert dal.parameter_style is ParameterStyle.NUMERIC


def test_handle_without_style_uses_numeric(recording_db: Any) -> None:
    assert DataAccessLayer(recording_db, None).parameter_style is ParameterStyle.NUMERIC


def test_bind_without_database(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    bound = DataAccessLayer(recording_db, file_provider).bind("delete_customer.sql", CUSTOMER_PARAMS)

    assert bound.parameter_names == ("first_name", "last_name")
    assert recording_db.prepared == []


def test_from_config(recording_db: Any, sql_root: Path) -> None:
    config = DALConfig(sql_root=sql_root, parameter_style=ParameterStyle.QMARK)

    dal = DataAccessLayer.from_config(recording_db, config)
    dal.query("delete_customer.sql", CUSTOMER_PARAMS)

    assert "first_name = ?" in recording_db.executions[0][1]


def test_from_config_without_root(recording_db: Any) -> None:
    dal = DataAccessLayer.from_config(recording_db, DALConfig())

    with pytest.raises(MissingFileProviderError):
        dal.query_row("insert_customer.sql", CUSTOMER_PARAMS)


def test_shared_instance_is_reusable(recording_db: Any, file_provider: MemoryFileProvider) -> None:
    """Test consecutive calls on one instance do not leak state."""
    dal = DataAccessLayer(recording_db, file_provider)

    dal.query_row("insert_customer.sql", CUSTOMER_PARAMS)
    with pytest.raises(TemplateNotFoundError):
        dal.query_row("manbearpig.sql")
    dal.query("delete_customer.sql", CUSTOMER_PARAMS)

    assert [kind for kind, _, _ in recording_db.executions] == ["query_row", "query"]
