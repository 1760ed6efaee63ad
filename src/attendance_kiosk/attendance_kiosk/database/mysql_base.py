from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Optional

import mysql.connector

from ..common.datetime_utils import parse_hhmm
from ..core.exceptions import ConcurrentScanError, StoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (connection, cursor) inside one transaction.

    Connector errors are re-raised as ``StoreError``; a duplicate key becomes
    ``ConcurrentScanError`` so callers can re-read and decide again.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StoreError(f"Database unavailable: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        raise ConcurrentScanError(str(e)) from e
    except mysql.connector.Error as e:
        conn.rollback()
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize stored schedule times.

    Settings may be kept as TIME columns (returned as ``time`` or
    ``timedelta`` depending on the connector) or as "HH:MM" strings.
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    if isinstance(value, timedelta):
        total_minutes = (int(value.total_seconds()) % 86400) // 60
        return time(hour=total_minutes // 60, minute=total_minutes % 60)

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")

    if isinstance(value, str):
        return parse_hhmm(value)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
