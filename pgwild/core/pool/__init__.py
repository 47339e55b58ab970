"""
PostgreSQL connection helpers and connection pool (psycopg).
"""

from .connect import connect, cursor_to_dicts, execute
from .health import health_check
from .manager import PoolManager

__all__ = [
    "connect",
    "execute",
    "cursor_to_dicts",
    "health_check",
    "PoolManager",
]
