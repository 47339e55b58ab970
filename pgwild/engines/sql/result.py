"""
Normalize driver results into the shape callers expect.

- INSERT / UPDATE / DELETE: rows (e.g. ``RETURNING``) when present, else rowcount
- SELECT: rows (possibly empty)
- anything else: the ``QueryResult`` itself
"""

from typing import Any, NamedTuple

from pgwild.core.pool import cursor_to_dicts

_MUTATING_COMMANDS = frozenset({"INSERT", "UPDATE", "DELETE"})


class QueryResult(NamedTuple):
    command: str
    rows: list[dict[str, Any]]
    rowcount: int


def result_from_cursor(cursor: Any) -> QueryResult:
    """Build a ``QueryResult`` from an executed psycopg cursor."""
    status = cursor.statusmessage or ""
    command = status.split()[0].upper() if status.strip() else ""
    rows = cursor_to_dicts(cursor)
    rowcount = cursor.rowcount if cursor.rowcount is not None else 0
    return QueryResult(command=command, rows=rows, rowcount=rowcount)


def parse_result(result: QueryResult) -> Any:
    if result.command in _MUTATING_COMMANDS:
        if result.rows:
            return result.rows
        return result.rowcount
    if result.command == "SELECT":
        return result.rows
    return result
