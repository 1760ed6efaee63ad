from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import NEXT_ACTION_COMPLETE, AttendanceStatus, ScanAction, ShiftType

PUNCH_FIELDS = {
    ShiftType.DAY: ("am_in", "am_out", "pm_in", "pm_out"),
    ShiftType.NIGHT: ("night_in", "night_out"),
}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one date and shift type.

    (employee_id, work_date, shift_type) is unique. A night record is dated
    with the day its shift started, even when it is closed after midnight.
    Each punch may carry a photo reference, attached after the punch.
    """

    record_id: int
    employee_id: str
    work_date: date
    shift_type: ShiftType
    status: AttendanceStatus = AttendanceStatus.PRESENT
    am_in: Optional[datetime] = None
    am_out: Optional[datetime] = None
    pm_in: Optional[datetime] = None
    pm_out: Optional[datetime] = None
    night_in: Optional[datetime] = None
    night_out: Optional[datetime] = None
    work_hours: Optional[float] = None
    notes: Optional[str] = None
    am_in_photo: Optional[str] = None
    am_out_photo: Optional[str] = None
    pm_in_photo: Optional[str] = None
    pm_out_photo: Optional[str] = None
    night_in_photo: Optional[str] = None
    night_out_photo: Optional[str] = None

    @property
    def punch_fields(self) -> tuple[str, ...]:
        return PUNCH_FIELDS[self.shift_type]

    def punches(self) -> dict[str, Optional[datetime]]:
        return {name: getattr(self, name) for name in self.punch_fields}

    def photos(self) -> dict[str, Optional[str]]:
        return {f"{name}_photo": getattr(self, f"{name}_photo") for name in self.punch_fields}

    def last_punch(self) -> Optional[datetime]:
        filled = [value for value in self.punches().values() if value is not None]
        return max(filled) if filled else None

    def next_action(self) -> str:
        """First empty slot after the latest filled one.

        Slots the shift already moved past (a missed morning, a skipped
        AM-out) are never expected again.
        """

        names = list(self.punch_fields)
        filled = [i for i, name in enumerate(names) if getattr(self, name) is not None]
        start = filled[-1] + 1 if filled else 0
        for name in names[start:]:
            if getattr(self, name) is None:
                return name.replace("_", "-")
        return NEXT_ACTION_COMPLETE

    def to_dict(self) -> dict:
        def iso(value: Optional[datetime]) -> Optional[str]:
            return value.isoformat() if value else None

        return {
            "record_id": self.record_id,
            "employee_id": self.employee_id,
            "work_date": self.work_date.strftime("%Y-%m-%d"),
            "shift_type": self.shift_type.value,
            "status": self.status.value,
            **{name: iso(value) for name, value in self.punches().items()},
            **self.photos(),
            "work_hours": self.work_hours,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class ScanRequest:
    identifier: str
    shift_type: ShiftType = ShiftType.DAY
    timestamp: Optional[datetime] = None
    scan_photo: Optional[str] = None


@dataclass(frozen=True)
class ScanResult:
    """What the kiosk shows after a scan.

    Rejections (cooldown, shift complete) are results too, never exceptions.
    """

    success: bool
    message: str
    record_id: Optional[int] = None
    action: Optional[ScanAction] = None
    timestamp: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    next_action: Optional[str] = None
    work_hours: Optional[float] = None
    employee: dict = field(default_factory=dict)
    cooldown: bool = False
    wait_seconds: Optional[int] = None

    @classmethod
    def cooling_down(cls, wait_seconds: int) -> "ScanResult":
        return cls(
            success=False,
            message=f"Please wait {wait_seconds} seconds before scanning again.",
            cooldown=True,
            wait_seconds=wait_seconds,
        )

    @classmethod
    def completed(cls, message: str) -> "ScanResult":
        return cls(success=False, message=message, next_action=NEXT_ACTION_COMPLETE)

    def to_dict(self) -> dict:
        if self.cooldown:
            return {
                "success": False,
                "cooldown": True,
                "wait_seconds": self.wait_seconds,
                "message": self.message,
            }
        if not self.success:
            return {"success": False, "next_action": self.next_action, "message": self.message}

        out = {
            "success": True,
            "record_id": self.record_id,
            "action": self.action.label if self.action else None,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "status": self.status.value if self.status else None,
            "message": self.message,
            "next_action": self.next_action,
            "employee": self.employee,
        }
        if self.work_hours is not None:
            out["work_hours"] = self.work_hours
        return out
