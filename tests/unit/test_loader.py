"""Unit tests for the SQL template store."""

from typing import Any
from unittest.mock import Mock

import pytest

from sqldal.exceptions import (
    ImproperConfigurationError,
    MissingFileProviderError,
    TemplateLoadError,
    TemplateNotFoundError,
)
from sqldal.loader import SQLTemplate, TemplateStore
from sqldal.storage import MemoryFileProvider


def test_load_returns_raw_content(file_provider: MemoryFileProvider) -> None:
    template = TemplateStore(file_provider).load("insert_customer.sql")

    assert template.name == "insert_customer.sql"
    assert template.text.startswith("INSERT INTO customer")
    assert not template.is_empty


def test_load_empty_template(file_provider: MemoryFileProvider) -> None:
    """Test an empty file is returned as empty content, not as an error."""
    template = TemplateStore(file_provider).load("test.sql")

    assert template.content == b""
    assert template.is_empty


def test_load_nested_name(file_provider: MemoryFileProvider) -> None:
    assert "WHERE first_name = :name" in TemplateStore(file_provider).load_text("customers/by_name.sql")


def test_load_missing_template(file_provider: MemoryFileProvider) -> None:
    with pytest.raises(TemplateNotFoundError) as exc_info:
        TemplateStore(file_provider).load("manbearpig.sql")

    assert exc_info.value.name == "manbearpig.sql"
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


def test_load_missing_template_suggests_close_names(file_provider: MemoryFileProvider) -> None:
    with pytest.raises(TemplateNotFoundError) as exc_info:
        TemplateStore(file_provider).load("insert_customers.sql")

    assert exc_info.value.suggestions[0] == "insert_customer.sql"


@pytest.mark.parametrize("name", ["", "../insert_customer.sql", "/insert_customer.sql"])
def test_load_invalid_names(file_provider: MemoryFileProvider, name: str) -> None:
    with pytest.raises(TemplateNotFoundError):
        TemplateStore(file_provider).load(name)


def test_load_without_provider() -> None:
    """Test a store without provider fails for every name, including the empty one."""
    store = TemplateStore(None)

    for name in ("", "insert_customer.sql"):
        with pytest.raises(MissingFileProviderError) as exc_info:
            store.load(name)
        assert isinstance(exc_info.value, ImproperConfigurationError)
        assert isinstance(exc_info.value, TemplateNotFoundError)


def test_load_read_failure_is_load_error() -> None:
    provider = Mock()
    provider.read_bytes.side_effect = PermissionError("permission denied")

    with pytest.raises(TemplateLoadError, match="permission denied"):
        TemplateStore(provider).load("insert_customer.sql")


def test_load_text_decode_failure() -> None:
    store = TemplateStore(MemoryFileProvider({"latin.sql": "SELECT 'é'".encode("latin-1")}))

    with pytest.raises(TemplateLoadError, match="cannot decode as utf-8"):
        store.load_text("latin.sql")


def test_load_text_custom_encoding() -> None:
    store = TemplateStore(MemoryFileProvider({"latin.sql": "SELECT 'é'".encode("latin-1")}), encoding="latin-1")

    assert store.load_text("latin.sql") == "SELECT 'é'"


def test_store_does_not_cache() -> None:
    """Test every call reads through to the provider."""
    calls: list[str] = []

    class CountingProvider:
        def read_bytes(self, name: str) -> bytes:
            calls.append(name)
            return b"SELECT 1"

        def exists(self, name: str) -> bool:
            return True

    store = TemplateStore(CountingProvider())
    store.load("a.sql")
    store.load("a.sql")

    assert calls == ["a.sql", "a.sql"]


def test_exists(file_provider: MemoryFileProvider) -> None:
    store = TemplateStore(file_provider)

    assert store.exists("delete_customer.sql")
    assert not store.exists("manbearpig.sql")
    assert not store.exists("")
    assert not TemplateStore(None).exists("delete_customer.sql")


def test_list_templates(file_provider: MemoryFileProvider) -> None:
    assert "select_all_customer.sql" in TemplateStore(file_provider).list_templates()


def test_list_templates_unlistable_provider() -> None:
    provider: Any = Mock(spec=["read_bytes", "exists"])

    assert TemplateStore(provider).list_templates() == []


def test_list_templates_without_provider() -> None:
    with pytest.raises(MissingFileProviderError):
        TemplateStore(None).list_templates()


def test_template_checksum_and_equality() -> None:
    first = SQLTemplate("a.sql", b"SELECT 1")
    second = SQLTemplate("a.sql", b"SELECT 1")

    assert first == second
    assert hash(first) == hash(second)
    assert first.checksum == second.checksum
    assert len(first.checksum) == 32
    assert first != SQLTemplate("a.sql", b"SELECT 2")
