from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from typing_extensions import TypeAlias

__all__ = ("ParameterMapping", "ParameterValue", "RowData", "TypeCoercionMap")

ParameterValue: TypeAlias = Union[
    str, int, float, bool, bytes, bytearray, memoryview, Decimal, date, datetime, time, UUID, None
]
"""Value bound to a placeholder.

Covers text, numeric, boolean, binary, temporal and null values. The binder never inspects values, so drivers
may accept further types through their coercion maps.
"""
ParameterMapping: TypeAlias = Optional[Mapping[str, ParameterValue]]
"""Named parameters supplied by the caller. ``None`` is treated like an empty mapping."""
RowData: TypeAlias = "tuple[Any, ...]"
"""A single fetched record in column order."""
TypeCoercionMap: TypeAlias = "dict[type, Any]"
"""Per-driver mapping of Python type to a callable converting values before execution."""
