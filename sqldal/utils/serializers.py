"""JSON serialization helpers.

Thin typed wrappers over the backend in :mod:`sqldal._serialization`.
"""

from typing import Any, Literal, Union, overload

from sqldal._serialization import decode_json, encode_json

__all__ = ("from_json", "to_json")


@overload
def to_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def to_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def to_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to a compact JSON string or bytes.

    Args:
        data: Data to encode.
        as_bytes: Whether to return UTF-8 bytes instead of a string.

    Returns:
        JSON string or bytes representation based on as_bytes parameter.
    """
    return encode_json(data, as_bytes=as_bytes)


def from_json(data: Union[str, bytes]) -> Any:
    """Decode a JSON string or bytes to a Python object.

    Raises:
        ValueError: If ``data`` is not valid JSON.
    """
    return decode_json(data)
