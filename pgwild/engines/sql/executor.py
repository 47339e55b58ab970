"""
Run formatted SQL against PostgreSQL.

``Postgres`` is the pool-level handle: each ``query`` checks a connection
out, runs one statement and releases it. ``pick()`` returns a
``PostgresClient`` holding one connection, for explicit transactions:

    db = Postgres(auth).connect()
    rows = db.query("SELECT * FROM $$ WHERE id = $", "users", 1)

    with db.pick() as client:
        client.begin()
        client.query("INSERT INTO t $i", {"a": 1, "b": b"\\x00"})
        client.commit()

Results are normalized by ``parse_result``.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg

from pgwild.core.config import DatabaseAuth
from pgwild.core.pool import PoolManager, execute
from pgwild.engines.sql.formatter import format_sql
from pgwild.engines.sql.result import parse_result, result_from_cursor

_log = logging.getLogger(__name__)


def _first(result: Any) -> Any:
    if isinstance(result, list):
        return result[0] if result else None
    return result


def _run(conn: Any, sql: str, values: list[bytes], log: logging.Logger) -> Any:
    log.debug("Formatted SQL: %s (%d params)", sql, len(values))
    try:
        cur = execute(conn, sql, values)
    except psycopg.Error as e:
        log.error("SQL execution failed: %s", e, exc_info=True)
        raise
    try:
        return parse_result(result_from_cursor(cur))
    finally:
        cur.close()


class PostgresClient:
    """One checked-out connection; release it with ``close()``."""

    def __init__(self, client: Any, parent: "Postgres") -> None:
        self.client = client
        self.parent = parent
        self._closed = False

    def format(self, sql: str, *params: Any) -> tuple[str, list[bytes]]:
        return format_sql(sql, params)

    def query(self, sql: str, *params: Any) -> Any:
        if self._closed:
            raise RuntimeError("PostgresClient is closed; its connection went back to the pool")
        sql_formatted, values = format_sql(sql, params)
        return _run(self.client, sql_formatted, values, self.parent.log)

    def query_one(self, sql: str, *params: Any) -> Any:
        return _first(self.query(sql, *params))

    def begin(self) -> Any:
        return self.query("BEGIN")

    def commit(self) -> Any:
        return self.query("COMMIT")

    def rollback(self) -> Any:
        return self.query("ROLLBACK")

    def close(self, error: BaseException | bool | None = None) -> None:
        """Release the connection; a truthy *error* discards it instead."""
        if self._closed:
            return
        self._closed = True
        self.parent.pool.release(self.client, discard=bool(error))

    def __enter__(self) -> "PostgresClient":
        return self

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> None:
        if exc is not None and not self._closed:
            try:
                self.rollback()
            except psycopg.Error:
                self.parent.log.debug("Rollback before discard failed", exc_info=True)
        self.close(exc)


class Postgres:
    """Pool-level access to one PostgreSQL database."""

    def __init__(
        self,
        auth: DatabaseAuth | None = None,
        *,
        name: str | None = None,
        logger: logging.Logger | None = None,
        pool: PoolManager | None = None,
    ) -> None:
        self.auth = auth or DatabaseAuth.from_settings()
        self.name = name
        self.user = self.auth.user
        self.log = logger or (logging.getLogger(f"{__name__}.{name}") if name else _log)
        self.pool = pool or PoolManager(self.auth)

    @contextmanager
    def _checkout(self) -> Iterator[Any]:
        conn = self.pool.acquire()
        discard = False
        try:
            yield conn
        except psycopg.Error:
            discard = True
            raise
        finally:
            self.pool.release(conn, discard=discard)

    def connect(self) -> "Postgres":
        """Check one connection out and log the server client encoding."""
        with self._checkout() as conn:
            cur = execute(conn, "SHOW CLIENT_ENCODING")
            try:
                row = cur.fetchone()
            finally:
                cur.close()
        encoding = row[0] if row else None
        self.log.debug("Connected to database: user=%s, encoding=%s", self.user, encoding)
        return self

    def disconnect(self) -> None:
        self.pool.dispose()
        self.log.debug("Disconnected from database: user=%s", self.user)

    def format(self, sql: str, *params: Any) -> tuple[str, list[bytes]]:
        return format_sql(sql, params)

    def pick(self) -> PostgresClient:
        return PostgresClient(self.pool.acquire(), self)

    def query(self, sql: str, *params: Any) -> Any:
        sql_formatted, values = format_sql(sql, params)
        with self._checkout() as conn:
            return _run(conn, sql_formatted, values, self.log)

    def query_one(self, sql: str, *params: Any) -> Any:
        return _first(self.query(sql, *params))

    def __enter__(self) -> "Postgres":
        return self.connect()

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> None:
        self.disconnect()
