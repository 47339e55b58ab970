"""Unit tests for core.pool.manager.PoolManager (connect is mocked)."""

from unittest.mock import MagicMock, patch

import psycopg
import pytest

from pgwild.core.config import DatabaseAuth
from pgwild.core.pool import PoolManager


def _auth(max_size: int = 3) -> DatabaseAuth:
    return DatabaseAuth(host="localhost", database="db", user="u", max=max_size)


@patch("pgwild.core.pool.manager.connect")
def test_acquire_opens_then_reuses(mock_connect: MagicMock) -> None:
    conn = MagicMock()
    mock_connect.return_value = conn
    pm = PoolManager(_auth())

    c1 = pm.acquire()
    pm.release(c1)
    c2 = pm.acquire()

    assert c1 is conn and c2 is conn
    mock_connect.assert_called_once()
    conn.rollback.assert_called_once()


@patch("pgwild.core.pool.manager.connect")
def test_max_size_bounds_checkout(mock_connect: MagicMock) -> None:
    mock_connect.side_effect = lambda auth: MagicMock()
    pm = PoolManager(_auth(), max_size=1)

    c1 = pm.acquire()
    with pytest.raises(TimeoutError):
        pm.acquire(timeout=0.01)

    pm.release(c1)
    assert pm.acquire(timeout=0.01) is c1


@patch("pgwild.core.pool.manager.connect")
def test_max_size_defaults_to_auth(mock_connect: MagicMock) -> None:
    pm = PoolManager(_auth(max_size=2))
    assert pm.stats()["max_size"] == 2


@patch("pgwild.core.pool.manager.connect")
def test_release_discard_closes(mock_connect: MagicMock) -> None:
    first, second = MagicMock(), MagicMock()
    mock_connect.side_effect = [first, second]
    pm = PoolManager(_auth())

    pm.release(pm.acquire(), discard=True)
    first.close.assert_called_once()
    assert pm.acquire() is second


@patch("pgwild.core.pool.manager.connect")
def test_failed_rollback_closes(mock_connect: MagicMock) -> None:
    conn = MagicMock()
    conn.rollback.side_effect = psycopg.OperationalError("gone")
    mock_connect.return_value = conn
    pm = PoolManager(_auth())

    pm.release(pm.acquire())

    conn.close.assert_called_once()
    assert pm.stats()["idle_connections"] == 0


@patch("pgwild.core.pool.manager.connect")
def test_expired_connection_replaced(mock_connect: MagicMock) -> None:
    old, new = MagicMock(), MagicMock()
    mock_connect.side_effect = [old, new]
    pm = PoolManager(_auth(), max_age=-1)

    pm.release(pm.acquire())
    assert pm.acquire() is new
    old.close.assert_called_once()


@patch("pgwild.core.pool.manager.connect")
def test_connect_failure_frees_slot(mock_connect: MagicMock) -> None:
    conn = MagicMock()
    mock_connect.side_effect = [psycopg.OperationalError("refused"), conn]
    pm = PoolManager(_auth(), max_size=1)

    with pytest.raises(psycopg.OperationalError):
        pm.acquire()
    assert pm.acquire(timeout=0.01) is conn


@patch("pgwild.core.pool.manager.connect")
def test_stats_and_dispose(mock_connect: MagicMock) -> None:
    mock_connect.side_effect = lambda auth: MagicMock()
    pm = PoolManager(_auth())

    c1 = pm.acquire()
    c2 = pm.acquire()
    pm.release(c1)
    assert pm.stats() == {"max_size": 3, "idle_connections": 1, "in_use": 1}

    pm.dispose()
    c1.close.assert_called_once()
    assert pm.stats()["idle_connections"] == 0

    pm.release(c2)
    c2.close.assert_called_once()
    assert pm.stats() == {"max_size": 3, "idle_connections": 0, "in_use": 0}


@patch("pgwild.core.pool.manager.connect")
def test_acquire_after_dispose_raises(mock_connect: MagicMock) -> None:
    pm = PoolManager(_auth())
    pm.release(pm.acquire())
    pm.dispose()

    with pytest.raises(RuntimeError, match="disposed"):
        pm.acquire()
    assert mock_connect.call_count == 1


@patch("pgwild.core.pool.manager._PING_IDLE_THRESHOLD", -1.0)
@patch("pgwild.core.pool.manager.health_check")
@patch("pgwild.core.pool.manager.connect")
def test_idle_connection_failing_health_check_replaced(
    mock_connect: MagicMock, mock_health: MagicMock
) -> None:
    stale, fresh = MagicMock(), MagicMock()
    mock_connect.side_effect = [stale, fresh]
    mock_health.return_value = False
    pm = PoolManager(_auth())

    pm.release(pm.acquire())
    assert pm.acquire() is fresh

    mock_health.assert_called_once_with(stale)
    stale.close.assert_called_once()


@patch("pgwild.core.pool.manager._PING_IDLE_THRESHOLD", -1.0)
@patch("pgwild.core.pool.manager.health_check")
@patch("pgwild.core.pool.manager.connect")
def test_idle_connection_passing_health_check_reused(
    mock_connect: MagicMock, mock_health: MagicMock
) -> None:
    conn = MagicMock()
    mock_connect.return_value = conn
    mock_health.return_value = True
    pm = PoolManager(_auth())

    pm.release(pm.acquire())
    assert pm.acquire() is conn
    mock_connect.assert_called_once()
