"""
Connection health check.
"""

from typing import Any

import psycopg

from .connect import execute


def health_check(conn: Any) -> bool:
    """
    Run SELECT 1 and return True if no driver error.
    """
    cur = None
    try:
        cur = execute(conn, "SELECT 1")
        cur.fetchone()
        return True
    except psycopg.Error:
        return False
    finally:
        if cur is not None:
            cur.close()
