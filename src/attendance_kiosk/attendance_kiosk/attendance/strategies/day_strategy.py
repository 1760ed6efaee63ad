from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import hours_between, round_hours
from ...core.enums import AttendanceStatus, Period, ScanAction, ShiftType, worst_status
from ...schedules.model import ScheduleConfig
from ..classifier import check_lateness, classify_period, status_for_lateness, status_note
from ..model import AttendanceRecord
from .base import ScanDecision, ShiftStrategy

MORNING_MISSED = "Morning session missed - Half Day"
MORNING_MISSED_LATE_PM = "Morning missed + Late PM arrival - Half Day"


class DayShiftStrategy(ShiftStrategy):
    """AM-in, AM-out, PM-in, PM-out.

    Which punch a scan fills depends on the punches already on the record and
    on the period of the day. Missing the morning session caps the day at
    HALF_DAY; status never improves once worsened.
    """

    shift_type = ShiftType.DAY

    def decide(self, *, now: datetime, record: Optional[AttendanceRecord], schedule: ScheduleConfig) -> ScanDecision:
        period = classify_period(now, schedule)

        if record is None:
            return self._first_punch(now=now, period=period, schedule=schedule, current=None)

        if record.am_in and not record.am_out and not record.pm_in and not record.pm_out:
            if period is Period.AFTERNOON:
                # AM-out was skipped; it is never back-filled.
                return ScanDecision(
                    action=ScanAction.PM_IN,
                    status=record.status,
                    metadata={"period": period.value, "am_out_skipped": True},
                )
            return ScanDecision(action=ScanAction.AM_OUT, status=record.status, metadata={"period": period.value})

        if record.am_in and record.am_out and not record.pm_in and not record.pm_out:
            lateness = check_lateness(now, schedule.pm_start, schedule.pm_grace_minutes)
            status = record.status
            note = None
            if lateness.is_late:
                # Only an on-time morning is escalated; LATE and HALF_DAY stay as they are.
                status = worst_status(record.status, AttendanceStatus.LATE)
                note = "Late from lunch"
            return ScanDecision(
                action=ScanAction.PM_IN,
                status=status,
                note=note,
                metadata={
                    "period": period.value,
                    "late_for_pm": lateness.is_late,
                    "minutes_late": lateness.minutes_late,
                },
            )

        if record.pm_in and not record.pm_out:
            total = 0.0
            if record.am_in and record.am_out:
                total += hours_between(record.am_in, record.am_out)
            total += hours_between(record.pm_in, now)
            return ScanDecision(
                action=ScanAction.PM_OUT,
                status=record.status,
                work_hours=round_hours(total),
                metadata={"period": period.value},
            )

        if not record.am_in and not record.pm_in:
            # Record exists without punches (created by hand): fill it in place.
            return self._first_punch(now=now, period=period, schedule=schedule, current=record.status)

        return ScanDecision.completed()

    def _first_punch(
        self,
        *,
        now: datetime,
        period: Period,
        schedule: ScheduleConfig,
        current: Optional[AttendanceStatus],
    ) -> ScanDecision:
        if period is Period.MORNING:
            lateness = check_lateness(now, schedule.am_start, schedule.am_grace_minutes)
            status = status_for_lateness(lateness)
            if current is not None and current is not AttendanceStatus.ABSENT:
                status = worst_status(current, status)
            return ScanDecision(
                action=ScanAction.AM_IN,
                status=status,
                note=status_note(status),
                metadata={"period": period.value, "minutes_late": lateness.minutes_late},
            )

        metadata = {"period": period.value, "morning_missed": True}
        note = MORNING_MISSED
        if period is Period.AFTERNOON:
            lateness = check_lateness(now, schedule.pm_start, schedule.pm_grace_minutes)
            metadata["late_for_pm"] = lateness.is_late
            metadata["minutes_late"] = lateness.minutes_late
            if lateness.is_late:
                note = MORNING_MISSED_LATE_PM

        return ScanDecision(action=ScanAction.PM_IN, status=AttendanceStatus.HALF_DAY, note=note, metadata=metadata)
