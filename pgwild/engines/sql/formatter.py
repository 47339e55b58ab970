"""
SQL wildcard formatter.

Rewrites a template containing ``$`` wildcards into final SQL plus an
ordered list of binary parameters for a ``$1, $2, ...`` parameterized query.

Wildcards (each one consumes exactly one value, in order):

- ``$``   Number|Decimal : 1 ==> 1
          String         : a ==> 'a'
          Boolean        : True ==> TRUE
          None           : None ==> NULL
          List           : [1, "a", True] ==> ARRAY[1, 'a', TRUE]
          Dict           : {"a": 1, "b": "a"} ==> "a"=1, "b"='a'
          Bytes          : b"..." ==> $N (value appended to params)
- ``$$``  String         : a ==> "a"
- ``$r``  String         : a ==> a (escaped, not quoted)
          List           : [1, "a", True] ==> 1, a, TRUE (elements unquoted too)
- ``$i``  Dict           : {"a": 1, "b": "a"} ==> ("a", "b")VALUES(1, 'a')

When the values run out, the remaining wildcards are left in the SQL as
written.
"""

import logging
import math
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from pgwild.engines.sql.errors import (
    FormatError,
    UnsupportedTypeError,
    WildcardTypeMismatchError,
)
from pgwild.engines.sql.values import (
    SqlBlob,
    SqlBool,
    SqlMapping,
    SqlNull,
    SqlNumber,
    SqlSequence,
    SqlText,
    SqlValue,
    shape_of,
    to_sql_value,
)

_log = logging.getLogger(__name__)

# Single-quote escape for SQL strings
_SQL_QUOTE_ESCAPE = str.maketrans({"'": "''"})

_WILDCARD_SUFFIXES = frozenset("ri$")

EMPTY_ARRAY = "'{}'"

# Shapes accepted by the flavored wildcards; bare ``$`` accepts every shape
_FLAVOR_SHAPES: dict[str, frozenset[str]] = {
    "$$": frozenset({"string"}),
    "$r": frozenset({"array", "string"}),
    "$i": frozenset({"object"}),
}


def quote_identifier(name: str) -> str:
    """Wrap *name* in double quotes. Embedded quotes are not escaped."""
    return f'"{name}"'


def _format_number(number: int | float | Decimal) -> str:
    if isinstance(number, float) and not math.isfinite(number):
        if math.isnan(number):
            return "'NaN'"
        return "'Infinity'" if number > 0 else "'-Infinity'"
    if isinstance(number, Decimal) and not number.is_finite():
        return f"'{number}'"
    return str(number)


def _format_common(value: SqlValue, params: list[bytes], raw: bool = False) -> str:
    """Literal for *value*. ``raw`` (the ``$r`` flavor) drops quote and ARRAY wrapping."""
    if isinstance(value, SqlNumber):
        return _format_number(value.value)
    if isinstance(value, SqlText):
        escaped = value.value.translate(_SQL_QUOTE_ESCAPE)
        return escaped if raw else f"'{escaped}'"
    if isinstance(value, SqlBool):
        return "TRUE" if value.value else "FALSE"
    if isinstance(value, SqlNull):
        return "NULL"
    if isinstance(value, SqlSequence):
        body = ", ".join(_format_common(item, params, raw) for item in value.items)
        if raw:
            return body
        return f"ARRAY[{body}]" if value.items else EMPTY_ARRAY
    if isinstance(value, SqlBlob):
        params.append(value.value)
        return f"${len(params)}"
    raise UnsupportedTypeError(
        f"Unsupported data type: {shape_of(value)}",
        value=value,
        shape=shape_of(value),
    )


def _format_pairs(mapping: SqlMapping, params: list[bytes]) -> str:
    return ", ".join(
        f"{quote_identifier(key)}={_format_common(item, params)}"
        for key, item in mapping.items
    )


def _format_insert(mapping: SqlMapping, params: list[bytes]) -> str:
    keys: list[str] = []
    vals: list[str] = []
    for key, item in mapping.items:
        keys.append(quote_identifier(key))
        vals.append(_format_common(item, params))
    return f"({', '.join(keys)})VALUES({', '.join(vals)})"


def _format_wildcard(wildcard: str, raw_value: Any, params: list[bytes]) -> str:
    accepted = _FLAVOR_SHAPES.get(wildcard)
    if accepted is not None:
        shape = shape_of(raw_value)
        if shape not in accepted:
            raise WildcardTypeMismatchError(
                f"Wildcard {wildcard} does not accept {shape}: {raw_value!r}",
                value=raw_value,
                shape=shape,
            )

    value = to_sql_value(raw_value)

    if wildcard == "$$":
        return quote_identifier(value.value)
    if wildcard == "$i":
        return _format_insert(value, params)
    if wildcard == "$r":
        return _format_common(value, params, raw=True)
    if isinstance(value, SqlMapping):
        return _format_pairs(value, params)
    return _format_common(value, params)


def format_sql(template: str, values: Sequence[Any] = ()) -> tuple[str, list[bytes]]:
    """
    Format *template* with *values*.

    Returns ``(sql, params)`` where ``params`` holds the binary values bound
    to the ``$N`` markers of ``sql``, in order.

    Raises ``FormatError`` (``UnsupportedTypeError`` or
    ``WildcardTypeMismatchError``) carrying the offset of the failing
    wildcard in *template*.
    """
    params: list[bytes] = []
    out: list[str] = []
    index = 0
    cursor = 0
    length = len(template)

    while cursor < length:
        start = template.find("$", cursor)
        if start == -1:
            out.append(template[cursor:])
            break
        out.append(template[cursor:start])

        end = start + 1
        if end < length and template[end] in _WILDCARD_SUFFIXES:
            end += 1
        wildcard = template[start:end]
        cursor = end

        if index >= len(values):
            # values exhausted: keep the wildcard as written
            out.append(wildcard)
            index += 1
            continue

        raw_value = values[index]
        index += 1
        try:
            out.append(_format_wildcard(wildcard, raw_value, params))
        except FormatError as e:
            e.with_position(start, wildcard)
            raise

    if index < len(values):
        _log.debug(
            "SQL template consumed %d of %d values; extra values ignored",
            index,
            len(values),
        )

    return "".join(out), params
