from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol

from ..core.enums import AttendanceStatus, ScanAction, ShiftType
from .model import AttendanceRecord

# Columns a scan or a photo attachment may write.
PHOTO_FIELDS = frozenset(action.photo_field for action in ScanAction)
WRITABLE_FIELDS = frozenset(
    {"am_in", "am_out", "pm_in", "pm_out", "night_in", "night_out", "status", "work_hours", "notes"}
) | PHOTO_FIELDS


class AttendanceRepository(Protocol):
    """Attendance store keyed uniquely by (employee_id, work_date, shift_type)."""

    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_for_period(self, *, employee_id: str, work_date: date, shift_type: ShiftType) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_night(self, *, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        """Night record of ``work_date`` with night_in set and night_out unset."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        work_date: date,
        shift_type: ShiftType,
        status: AttendanceStatus,
        punches: Mapping[str, datetime],
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert a new record.

        Raises ConcurrentScanError if a record for the same key already exists.
        """

        raise NotImplementedError

    def update(self, record_id: int, fields: Mapping[str, Any], *, guard_field: str) -> AttendanceRecord:
        """Write ``fields`` only if ``guard_field`` is still empty.

        Raises ConcurrentScanError when the guard no longer holds.
        """

        raise NotImplementedError

    def attach_photo(self, record_id: int, action: ScanAction, photo_ref: str) -> AttendanceRecord:
        """Store ``photo_ref`` in the photo column of ``action``.

        Raises RecordNotFoundError if the record does not exist.
        """

        raise NotImplementedError
