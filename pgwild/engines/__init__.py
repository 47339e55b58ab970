"""
Engines: SQL wildcard formatter and PostgreSQL executor.
"""

from pgwild.engines.sql import Postgres, PostgresClient, format_sql, parse_result

__all__ = [
    "Postgres",
    "PostgresClient",
    "format_sql",
    "parse_result",
]
