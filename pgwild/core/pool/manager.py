"""
Connection pool for one PostgreSQL database.

At most ``max_size`` connections are checked out at once (``acquire`` blocks
until one is released). Idle connections are reused, with health-check of
long-idle connections on checkout and max-age eviction.
"""

import logging
import threading
import time
from typing import Any, NamedTuple

import psycopg

from pgwild.core.config import DatabaseAuth, settings

from .connect import connect
from .health import health_check

_log = logging.getLogger(__name__)

_PING_IDLE_THRESHOLD = 30.0  # only ping connections idle longer than this (seconds)


class _PoolEntry(NamedTuple):
    conn: Any
    created_at: float  # time.monotonic() when the connection was opened
    last_used: float   # time.monotonic() when last returned to pool


class PoolManager:
    """Bounded connection pool with health-check and max-age."""

    def __init__(
        self,
        auth: DatabaseAuth,
        *,
        max_size: int | None = None,
        max_age: float | None = None,
    ) -> None:
        self._auth = auth
        self._max_size: int = max_size or auth.max
        self._max_age: float = float(
            max_age if max_age is not None else settings.DB_POOL_MAX_AGE_SEC
        )
        self._idle: list[_PoolEntry] = []
        self._created: dict[int, float] = {}  # id(conn) -> created_at, for checked-out conns
        self._lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(self._max_size)
        self._closed = False

    def acquire(self, timeout: float | None = None) -> Any:
        """Check out a healthy connection (from pool or freshly opened)."""
        if self._closed:
            raise RuntimeError("Connection pool has been disposed")
        if not self._slots.acquire(timeout=timeout):
            raise TimeoutError(
                f"No connection available within {timeout}s (max {self._max_size})"
            )
        try:
            entry = self._checkout_idle()
            if entry is None:
                conn = connect(self._auth)
                created_at = time.monotonic()
                _log.debug("Opened connection to %s/%s", self._auth.host, self._auth.database)
            else:
                conn, created_at = entry.conn, entry.created_at
        except BaseException:
            self._slots.release()
            raise
        with self._lock:
            self._created[id(conn)] = created_at
        return conn

    def release(self, conn: Any, *, discard: bool = False) -> None:
        """Return a connection to the pool, or close it when *discard* is set."""
        with self._lock:
            created_at = self._created.pop(id(conn), time.monotonic())
        try:
            if discard or self._closed:
                self._close_quiet(conn)
                return
            try:
                conn.rollback()
            except psycopg.Error:
                self._close_quiet(conn)
                return
            with self._lock:
                pooled = not self._closed
                if pooled:
                    self._idle.append(
                        _PoolEntry(conn=conn, created_at=created_at, last_used=time.monotonic())
                    )
            if not pooled:
                self._close_quiet(conn)
        finally:
            self._slots.release()

    def dispose(self) -> None:
        """Close idle connections and end the pool.

        Connections still checked out are closed when released; ``acquire`` raises.
        """
        with self._lock:
            self._closed = True
            entries = self._idle
            self._idle = []
        for e in entries:
            self._close_quiet(e.conn)

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        with self._lock:
            return {
                "max_size": self._max_size,
                "idle_connections": len(self._idle),
                "in_use": len(self._created),
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _checkout_idle(self) -> _PoolEntry | None:
        while True:
            with self._lock:
                if not self._idle:
                    return None
                entry = self._idle.pop()
            now = time.monotonic()
            if self._is_expired(entry, now):
                self._close_quiet(entry.conn)
                continue
            if now - entry.last_used > _PING_IDLE_THRESHOLD and not health_check(entry.conn):
                self._close_quiet(entry.conn)
                continue
            return entry

    def _is_expired(self, entry: _PoolEntry, now: float) -> bool:
        return (now - entry.created_at) > self._max_age

    @staticmethod
    def _close_quiet(conn: Any) -> None:
        try:
            conn.close()
        except psycopg.Error:
            _log.debug("Error closing connection", exc_info=True)
