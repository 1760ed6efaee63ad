from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_GRACE_MINUTES, DEFAULT_LATE_THRESHOLD_MINUTES
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import DEFAULT_SCHEDULE, ScheduleConfig
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[ScheduleConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT am_start_time, am_end_time, pm_start_time, pm_end_time,
                       night_start_time, night_end_time,
                       am_grace_period, pm_grace_period, night_grace_period, late_threshold
                FROM schedule_settings
                ORDER BY settings_id
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return ScheduleConfig(
                am_start=normalize_mysql_time(r["am_start_time"]),
                am_end=normalize_mysql_time(r["am_end_time"]),
                pm_start=normalize_mysql_time(r["pm_start_time"]),
                pm_end=normalize_mysql_time(r["pm_end_time"]),
                night_start=normalize_mysql_time(r.get("night_start_time")) or DEFAULT_SCHEDULE.night_start,
                night_end=normalize_mysql_time(r.get("night_end_time")) or DEFAULT_SCHEDULE.night_end,
                am_grace_minutes=_minutes(r.get("am_grace_period"), DEFAULT_GRACE_MINUTES),
                pm_grace_minutes=_minutes(r.get("pm_grace_period"), DEFAULT_GRACE_MINUTES),
                night_grace_minutes=_minutes(r.get("night_grace_period"), DEFAULT_GRACE_MINUTES),
                late_threshold_minutes=_minutes(r.get("late_threshold"), DEFAULT_LATE_THRESHOLD_MINUTES),
            )


def _minutes(value, default: int) -> int:
    return default if value is None else int(value)
