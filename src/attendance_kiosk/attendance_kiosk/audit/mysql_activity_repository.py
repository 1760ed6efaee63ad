from __future__ import annotations

import json

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import ActivityAction, ActivityEntry
from .repository import ActivityLogRepository


class MySQLActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, entry: ActivityEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(employee_id, employee_name, action, description, severity, metadata, scan_photo)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.employee_id,
                    entry.employee_name,
                    entry.action.value,
                    entry.description,
                    entry.severity.value,
                    json.dumps(entry.metadata, default=str) if entry.metadata else None,
                    entry.scan_photo,
                ),
            )
            return int(cur.lastrowid)

    def attach_scan_photo(self, *, employee_id: str, action: ActivityAction, photo_ref: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE activity_logs
                SET scan_photo=%s
                WHERE employee_id=%s AND action=%s
                ORDER BY created_at DESC, log_id DESC
                LIMIT 1
                """,
                (photo_ref, employee_id, action.value),
            )
            return cur.rowcount > 0
