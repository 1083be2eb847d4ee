import pytest

from sqldal.exceptions import (
    ImproperConfigurationError,
    MissingDependencyError,
    MissingFileProviderError,
    MissingParameterError,
    NotFoundError,
    ParameterError,
    QueryError,
    SQLDalError,
    StatementExecutionError,
    StatementPrepareError,
    TemplateLoadError,
    TemplateNotFoundError,
    wrap_exceptions,
)


def test_exception_hierarchy() -> None:
    """Test exception classes inherit correctly."""
    assert issubclass(TemplateNotFoundError, NotFoundError)
    assert issubclass(NotFoundError, SQLDalError)
    assert issubclass(MissingParameterError, ParameterError)
    assert issubclass(StatementPrepareError, QueryError)
    assert issubclass(StatementExecutionError, QueryError)
    assert issubclass(TemplateLoadError, SQLDalError)
    assert issubclass(MissingDependencyError, ImportError)


def test_missing_file_provider_is_both_config_and_not_found() -> None:
    """Test a missing provider can be caught as configuration error or as not-found."""
    exc = MissingFileProviderError("customers.sql")

    assert isinstance(exc, ImproperConfigurationError)
    assert isinstance(exc, TemplateNotFoundError)
    assert exc.name == "customers.sql"
    assert "No SQL file provider configured" in str(exc)


def test_template_not_found_message() -> None:
    exc = TemplateNotFoundError("manbearpig.sql")

    assert exc.name == "manbearpig.sql"
    assert exc.suggestions == ()
    assert str(exc) == "SQL template 'manbearpig.sql' not found"


def test_template_not_found_empty_name() -> None:
    assert str(TemplateNotFoundError("")) == "SQL template name cannot be empty"


def test_template_not_found_with_suggestions() -> None:
    exc = TemplateNotFoundError("insert_custmer.sql", ["insert_customer.sql"])

    assert exc.suggestions == ("insert_customer.sql",)
    assert "Did you mean: 'insert_customer.sql'?" in str(exc)


def test_missing_parameter_lists_names() -> None:
    exc = MissingParameterError(["first_name", "address"], "INSERT ...")

    assert exc.missing == ("first_name", "address")
    assert str(exc).startswith("Missing required parameter(s): 'first_name', 'address'")
    assert exc.sql == "INSERT ..."
    assert "SQL: INSERT ..." in str(exc)


def test_template_load_error_message() -> None:
    exc = TemplateLoadError("broken.sql", "permission denied")

    assert exc.name == "broken.sql"
    assert str(exc) == "Failed to read SQL template 'broken.sql': permission denied"


def test_missing_dependency_message() -> None:
    exc = MissingDependencyError(package="rich-click", install_package="cli")

    assert "pip install sqldal[cli]" in str(exc)


def test_wrap_exceptions_chains_cause() -> None:
    """Test foreign exceptions are wrapped and chained with 'from'."""
    with pytest.raises(StatementExecutionError, match="Failed to execute: boom") as exc_info:
        with wrap_exceptions(StatementExecutionError, "Failed to execute", "SELECT 1"):
            raise RuntimeError("boom")

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.sql == "SELECT 1"


def test_wrap_exceptions_passes_through_same_class() -> None:
    original = StatementPrepareError("already wrapped")

    with pytest.raises(StatementPrepareError) as exc_info:
        with wrap_exceptions(StatementPrepareError, "Failed to prepare"):
            raise original

    assert exc_info.value is original
