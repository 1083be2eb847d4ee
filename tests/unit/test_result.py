import pytest

from sqldal.driver.result import Row, Rows
from sqldal.exceptions import NotFoundError


def test_row_with_data() -> None:
    row = Row((1, "bearpig"), ("id", "first_name"), 1)

    assert row
    assert not row.is_empty
    assert row.one() == (1, "bearpig")
    assert row.one_or_none() == (1, "bearpig")
    assert row.as_dict() == {"id": 1, "first_name": "bearpig"}
    assert row[0] == 1
    assert row["first_name"] == "bearpig"
    assert row.rowcount == 1


def test_empty_row_is_a_state_not_an_error() -> None:
    """Test an empty row only fails when a record is demanded."""
    row = Row.empty(("id",))

    assert not row
    assert row.is_empty
    assert row.one_or_none() is None
    with pytest.raises(NotFoundError, match="No rows in result set"):
        row.one()
    with pytest.raises(NotFoundError):
        row["id"]


def test_row_unknown_column() -> None:
    with pytest.raises(KeyError):
        Row((1,), ("id",))["missing"]


def test_row_equality() -> None:
    assert Row((1,), ("id",)) == Row([1], ["id"])
    assert Row.empty() != Row((1,))
    assert hash(Row((1,), ("id",))) == hash(Row((1,), ("id",)))


def test_rows_iteration_and_helpers() -> None:
    rows = Rows([(1, "a"), (2, "b")], ("id", "name"), 2)

    assert len(rows) == 2
    assert list(rows) == [(1, "a"), (2, "b")]
    assert rows.all() == [(1, "a"), (2, "b")]
    assert rows.dicts() == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
    assert rows.first().one() == (1, "a")


def test_empty_rows() -> None:
    rows = Rows(column_names=("id",))

    assert len(rows) == 0
    assert rows.all() == []
    assert rows.first().is_empty


def test_rows_context_manager_closes() -> None:
    with Rows([(1,)], ("id",)) as rows:
        assert not rows.closed
        assert rows.all() == [(1,)]

    assert rows.closed
    assert rows.all() == []
