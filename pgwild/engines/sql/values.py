"""
Tagged value variants accepted by the formatter.

Python values are converted once, at the boundary, by ``to_sql_value``.
The formatter then dispatches on the variant type only; anything that has
no variant is rejected here with ``UnsupportedTypeError``.

* ``None``                         -> ``SqlNull``
* ``bool``                         -> ``SqlBool``
* ``int`` / ``float`` / ``Decimal``  -> ``SqlNumber``
* ``str``                          -> ``SqlText``
* ``bytes`` / ``bytearray`` / ``memoryview`` -> ``SqlBlob``
* ``list`` / ``tuple``             -> ``SqlSequence``
* ``Mapping``                      -> ``SqlMapping``
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pgwild.engines.sql.errors import UnsupportedTypeError


@dataclass(frozen=True)
class SqlNull:
    pass


@dataclass(frozen=True)
class SqlBool:
    value: bool


@dataclass(frozen=True)
class SqlNumber:
    value: int | float | Decimal


@dataclass(frozen=True)
class SqlText:
    value: str


@dataclass(frozen=True)
class SqlBlob:
    value: bytes


@dataclass(frozen=True)
class SqlSequence:
    items: tuple[SqlValue, ...]


@dataclass(frozen=True)
class SqlMapping:
    """Ordered key/value pairs; keys are identifiers."""

    items: tuple[tuple[str, SqlValue], ...]


SqlValue = SqlNull | SqlBool | SqlNumber | SqlText | SqlBlob | SqlSequence | SqlMapping

_VARIANTS = (SqlNull, SqlBool, SqlNumber, SqlText, SqlBlob, SqlSequence, SqlMapping)

_SHAPES: dict[type, str] = {
    SqlNull: "null",
    SqlBool: "boolean",
    SqlNumber: "number",
    SqlText: "string",
    SqlBlob: "blob",
    SqlSequence: "array",
    SqlMapping: "object",
}


def shape_of(value: Any) -> str:
    """Name of the observed shape of *value* (raw Python value or variant)."""
    if isinstance(value, _VARIANTS):
        return _SHAPES[type(value)]
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "blob"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def to_sql_value(value: Any) -> SqlValue:
    """Convert a Python value (recursively) to its ``SqlValue`` variant."""
    if isinstance(value, _VARIANTS):
        return value
    if value is None:
        return SqlNull()
    # bool is a subclass of int
    if isinstance(value, bool):
        return SqlBool(value)
    if isinstance(value, (int, float, Decimal)):
        return SqlNumber(value)
    if isinstance(value, str):
        return SqlText(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return SqlBlob(bytes(value))
    if isinstance(value, (list, tuple)):
        return SqlSequence(tuple(to_sql_value(v) for v in value))
    if isinstance(value, Mapping):
        return SqlMapping(tuple((str(k), to_sql_value(v)) for k, v in value.items()))
    raise UnsupportedTypeError(
        f"Unsupported data type: {value!r} ({shape_of(value)})",
        value=value,
        shape=shape_of(value),
    )
