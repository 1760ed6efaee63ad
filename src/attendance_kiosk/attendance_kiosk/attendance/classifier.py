"""Time-window classification.

Pure functions, no I/O. Session boundaries are compared as whole minutes
since midnight so that a boundary minute is never split by float rounding.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import minutes_since_midnight
from ..core.constants import HALF_DAY_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus, Period
from ..schedules.model import ScheduleConfig


@dataclass(frozen=True)
class Lateness:
    is_late: bool
    is_half_day: bool
    minutes_late: int


def classify_period(now: datetime, schedule: ScheduleConfig) -> Period:
    """Place ``now`` in the day schedule using half-open intervals.

    MORNING is before am_end, LUNCH_GAP is [am_end, pm_start), AFTERNOON is
    pm_start onwards.
    """

    current = minutes_since_midnight(now)
    if current < minutes_since_midnight(schedule.am_end):
        return Period.MORNING
    if current < minutes_since_midnight(schedule.pm_start):
        return Period.LUNCH_GAP
    return Period.AFTERNOON


def in_night_window(now: datetime, schedule: ScheduleConfig) -> bool:
    """Whether ``now`` falls in [night_start, night_end), wrapping midnight."""
    current = minutes_since_midnight(now)
    start = minutes_since_midnight(schedule.night_start)
    end = minutes_since_midnight(schedule.night_end)
    if start <= end:
        return start <= current < end
    return current >= start or current < end


def check_lateness(arrival: datetime, session_start: time, grace_minutes: int) -> Lateness:
    # Always the arrival's own calendar day, also for night shifts.
    scheduled_start = datetime.combine(arrival.date(), session_start)
    grace_deadline = scheduled_start + timedelta(minutes=int(grace_minutes))

    # Minutes inside the grace period are not counted as late.
    if arrival <= grace_deadline:
        return Lateness(is_late=False, is_half_day=False, minutes_late=0)

    minutes_late = int((arrival - scheduled_start).total_seconds() // 60)
    return Lateness(
        is_late=True,
        is_half_day=minutes_late >= HALF_DAY_THRESHOLD_MINUTES,
        minutes_late=minutes_late,
    )


def status_for_lateness(lateness: Lateness) -> AttendanceStatus:
    if lateness.is_half_day:
        return AttendanceStatus.HALF_DAY
    if lateness.is_late:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def status_note(status: AttendanceStatus) -> Optional[str]:
    """Short suffix shown next to a punch, e.g. "(Late)"."""
    return {
        AttendanceStatus.LATE: "Late",
        AttendanceStatus.HALF_DAY: "Half Day",
    }.get(status)
