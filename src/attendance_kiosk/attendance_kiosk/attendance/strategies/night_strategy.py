from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import hours_between, round_hours
from ...core.enums import Period, ScanAction, ShiftType
from ...schedules.model import ScheduleConfig
from ..classifier import check_lateness, classify_period, in_night_window, status_for_lateness, status_note
from ..model import AttendanceRecord
from .base import ScanDecision, ShiftStrategy


class NightShiftStrategy(ShiftStrategy):
    """Night-in then night-out.

    The record passed in is already anchored to the night the shift started,
    so a night-out after midnight lands on the right record.
    """

    shift_type = ShiftType.NIGHT

    def decide(self, *, now: datetime, record: Optional[AttendanceRecord], schedule: ScheduleConfig) -> ScanDecision:
        inside = in_night_window(now, schedule)
        period = Period.NIGHT_WINDOW if inside else classify_period(now, schedule)
        window = {"period": period.value, "in_night_window": inside}

        if record is None or not record.night_in:
            lateness = check_lateness(now, schedule.night_start, schedule.night_grace_minutes)
            status = status_for_lateness(lateness)
            return ScanDecision(
                action=ScanAction.NIGHT_IN,
                status=status,
                note=status_note(status),
                metadata={**window, "minutes_late": lateness.minutes_late},
            )

        if not record.night_out:
            return ScanDecision(
                action=ScanAction.NIGHT_OUT,
                status=record.status,
                work_hours=round_hours(hours_between(record.night_in, now)),
                metadata=window,
            )

        return ScanDecision.completed()
