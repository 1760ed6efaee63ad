from __future__ import annotations

from enum import Enum


class ShiftType(str, Enum):
    """Kind of shift a scan belongs to."""

    DAY = "DAY"
    NIGHT = "NIGHT"


class AttendanceStatus(str, Enum):
    """Attendance status stored with each record.

    Declaration order is severity order: a record's status only ever moves
    towards the end of this list (see ``worst_status``).
    """

    PRESENT = "PRESENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"
    ABSENT = "ABSENT"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {status: rank for rank, status in enumerate(AttendanceStatus)}


def worst_status(*statuses: AttendanceStatus) -> AttendanceStatus:
    return max(statuses, key=lambda s: s.severity)


class Period(str, Enum):
    """Where a wall-clock moment falls in the day schedule."""

    MORNING = "MORNING"
    LUNCH_GAP = "LUNCH_GAP"
    AFTERNOON = "AFTERNOON"
    NIGHT_WINDOW = "NIGHT_WINDOW"


class ScanAction(str, Enum):
    AM_IN = "am-in"
    AM_OUT = "am-out"
    PM_IN = "pm-in"
    PM_OUT = "pm-out"
    NIGHT_IN = "night-in"
    NIGHT_OUT = "night-out"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def field(self) -> str:
        """Record field filled by this punch."""
        return self.value.replace("-", "_")

    @property
    def photo_field(self) -> str:
        return f"{self.field}_photo"

    @property
    def next_action(self) -> str:
        return _NEXT[self]


_LABELS = {
    ScanAction.AM_IN: "AM In",
    ScanAction.AM_OUT: "AM Out",
    ScanAction.PM_IN: "PM In",
    ScanAction.PM_OUT: "PM Out",
    ScanAction.NIGHT_IN: "Night In",
    ScanAction.NIGHT_OUT: "Night Out",
}

NEXT_ACTION_COMPLETE = "complete"

_NEXT = {
    ScanAction.AM_IN: ScanAction.AM_OUT.value,
    ScanAction.AM_OUT: ScanAction.PM_IN.value,
    ScanAction.PM_IN: ScanAction.PM_OUT.value,
    ScanAction.PM_OUT: NEXT_ACTION_COMPLETE,
    ScanAction.NIGHT_IN: ScanAction.NIGHT_OUT.value,
    ScanAction.NIGHT_OUT: NEXT_ACTION_COMPLETE,
}


class Severity(str, Enum):
    """Severity of an activity log entry."""

    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
