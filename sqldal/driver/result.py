"""Result handles returned by statement execution.

:class:`Row` is the single-row handle. "No matching row" is a state of the handle, not an error; it only becomes
:class:`~sqldal.exceptions.NotFoundError` when the caller demands a row with :meth:`Row.one`.

:class:`Rows` is the row-set handle.
"""

from collections.abc import Iterator, Sequence
from typing import Any, Optional, Union

from sqldal.exceptions import NotFoundError
from sqldal.typing import RowData

__all__ = ("Row", "Rows")


class Row:
    """Single-row result handle."""

    __slots__ = ("_data", "column_names", "rowcount")

    def __init__(
        self, data: "Optional[Sequence[Any]]", column_names: "Sequence[str]" = (), rowcount: int = -1
    ) -> None:
        """Initialize the handle.

        Args:
            data: The fetched record, or ``None`` when nothing matched.
            column_names: Column names in record order.
            rowcount: Rows affected as reported by the driver, ``-1`` when unknown.
        """
        self._data: Optional[RowData] = tuple(data) if data is not None else None
        self.column_names: tuple[str, ...] = tuple(column_names)
        self.rowcount = rowcount

    @classmethod
    def empty(cls, column_names: "Sequence[str]" = (), rowcount: int = -1) -> "Row":
        """Create a handle in the "no rows" state."""
        return cls(None, column_names, rowcount)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={self._data!r}, column_names={self.column_names!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._data == other._data and self.column_names == other.column_names

    def __hash__(self) -> int:
        return hash((self._data, self.column_names))

    def __bool__(self) -> bool:
        return self._data is not None

    def __getitem__(self, key: "Union[int, str]") -> Any:
        data = self.one()
        if isinstance(key, str):
            try:
                return data[self.column_names.index(key)]
            except ValueError:
                msg = f"Row has no column {key!r}"
                raise KeyError(msg) from None
        return data[key]

    @property
    def is_empty(self) -> bool:
        """Whether the query matched no row."""
        return self._data is None

    def one(self) -> "RowData":
        """Return the record.

        Raises:
            NotFoundError: If the query matched no row.

        Returns:
            The record values in column order.
        """
        if self._data is None:
            msg = "No rows in result set"
            raise NotFoundError(msg)
        return self._data

    def one_or_none(self) -> "Optional[RowData]":
        """Return the record, or ``None`` when the query matched no row."""
        return self._data

    def as_dict(self) -> "dict[str, Any]":
        """Return the record keyed by column name.

        Raises:
            NotFoundError: If the query matched no row.
        """
        return dict(zip(self.column_names, self.one()))


class Rows:
    """Row-set result handle.

    Records are fetched when the handle is created, so the handle stays usable after the statement that produced it
    has been closed.
    """

    __slots__ = ("_closed", "_records", "column_names", "rowcount")

    def __init__(
        self, records: "Sequence[Sequence[Any]]" = (), column_names: "Sequence[str]" = (), rowcount: int = -1
    ) -> None:
        self._records: list[RowData] = [tuple(record) for record in records]
        self.column_names: tuple[str, ...] = tuple(column_names)
        self.rowcount = rowcount
        self._closed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rows={len(self._records)}, column_names={self.column_names!r})"

    def __iter__(self) -> "Iterator[RowData]":
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __enter__(self) -> "Rows":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def all(self) -> "list[RowData]":
        """Return every record."""
        return list(self._records)

    def dicts(self) -> "list[dict[str, Any]]":
        """Return every record keyed by column name."""
        return [dict(zip(self.column_names, record)) for record in self._records]

    def first(self) -> Row:
        """Return the first record as a :class:`Row` handle, empty when there are no records."""
        if not self._records:
            return Row.empty(self.column_names, self.rowcount)
        return Row(self._records[0], self.column_names, self.rowcount)

    def close(self) -> None:
        """Release the fetched records."""
        self._records = []
        self._closed = True
