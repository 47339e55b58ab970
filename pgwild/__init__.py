"""
pgwild: PostgreSQL query helpers around a ``$`` wildcard SQL formatter.
"""

from pgwild.core.config import DatabaseAuth
from pgwild.engines.sql import (
    FormatError,
    Postgres,
    PostgresClient,
    UnsupportedTypeError,
    WildcardTypeMismatchError,
    format_sql,
    parse_result,
)

__all__ = [
    "DatabaseAuth",
    "Postgres",
    "PostgresClient",
    "format_sql",
    "parse_result",
    "FormatError",
    "UnsupportedTypeError",
    "WildcardTypeMismatchError",
]
