"""
PostgreSQL connection helpers.

Connections are opened in autocommit mode (transactions are explicit
``BEGIN`` / ``COMMIT``) with ``psycopg.RawCursor`` so queries use native
``$1, $2, ...`` placeholders, as produced by ``format_sql``.
"""

import logging
from collections.abc import Sequence
from typing import Any

import psycopg

from pgwild.core.config import DatabaseAuth, settings

_log = logging.getLogger(__name__)


def _get(auth: Any, key: str) -> Any:
    """Get attribute or dict key from DatabaseAuth or dict."""
    if isinstance(auth, dict):
        return auth.get(key)
    return getattr(auth, key, None)


def connect(auth: DatabaseAuth | dict[str, Any]) -> psycopg.Connection:
    """
    Open a connection from ``DatabaseAuth`` or a dict with
    host, port, database, user, password.
    """
    host = _get(auth, "host")
    port = _get(auth, "port") or 5432
    database = _get(auth, "database")
    user = _get(auth, "user")
    password = _get(auth, "password")

    for name, val in [
        ("host", host),
        ("database", database),
        ("user", user),
    ]:
        if val is None:
            raise ValueError(f"auth must provide {name}")
    password = password if password is not None else ""

    return psycopg.connect(
        host=host,
        port=int(port),
        dbname=database,
        user=user,
        password=password,
        connect_timeout=settings.DB_CONNECT_TIMEOUT,
        autocommit=True,
        cursor_factory=psycopg.RawCursor,
    )


def execute(
    conn: Any,
    sql: str,
    params: Sequence[Any] | None = None,
) -> Any:
    """
    Execute SQL and return the cursor. Caller uses cursor_to_dicts(cursor) or cursor.rowcount.

    When DB_STATEMENT_TIMEOUT is set, ``statement_timeout`` is applied before the
    query and reset after.
    """
    timeout_sec = settings.DB_STATEMENT_TIMEOUT

    if timeout_sec is not None and timeout_sec > 0:
        timeout_ms = int(timeout_sec * 1000)
        cur_set = conn.cursor()
        try:
            # SET does not accept bind parameters
            cur_set.execute(f"SET statement_timeout = {timeout_ms}")
        finally:
            cur_set.close()

    cur = conn.cursor()
    try:
        if params:
            cur.execute(sql, params)
        else:
            cur.execute(sql)
    finally:
        if timeout_sec is not None and timeout_sec > 0:
            try:
                cur_reset = conn.cursor()
                cur_reset.execute("SET statement_timeout = 0")
                cur_reset.close()
            except psycopg.Error:
                _log.debug("Could not reset statement_timeout", exc_info=True)

    return cur


def cursor_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor result to list of dicts."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]
