"""
SQL wildcard formatter and PostgreSQL executor.

Exports: format_sql, Postgres, PostgresClient, parse_result and the value/error types.
"""

from pgwild.engines.sql.errors import (
    FormatError,
    UnsupportedTypeError,
    WildcardTypeMismatchError,
)
from pgwild.engines.sql.executor import Postgres, PostgresClient
from pgwild.engines.sql.formatter import format_sql, quote_identifier
from pgwild.engines.sql.result import QueryResult, parse_result, result_from_cursor
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

__all__ = [
    "format_sql",
    "quote_identifier",
    "Postgres",
    "PostgresClient",
    "QueryResult",
    "parse_result",
    "result_from_cursor",
    "FormatError",
    "UnsupportedTypeError",
    "WildcardTypeMismatchError",
    "SqlValue",
    "SqlNull",
    "SqlBool",
    "SqlNumber",
    "SqlText",
    "SqlBlob",
    "SqlSequence",
    "SqlMapping",
    "shape_of",
    "to_sql_value",
]
