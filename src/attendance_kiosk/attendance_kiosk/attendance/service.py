from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from typing import Callable, Iterator, Optional

from ..audit.model import ActivityAction
from ..audit.service import ActivityLogger
from ..common.datetime_utils import format_clock, now_local
from ..common.validators import require_non_empty
from ..core.constants import NIGHT_CONTINUATION_CUTOFF_HOUR, SCAN_COOLDOWN_SECONDS
from ..core.enums import ScanAction, Severity, ShiftType
from ..core.exceptions import ConcurrentScanError, RecordNotFoundError, ValidationError
from ..schedules.model import ScheduleConfig
from ..schedules.service import ScheduleService
from ..users.model import Employee
from ..users.service import EmployeeDirectory
from .cooldown import cooldown_remaining
from .factory import ShiftStrategyFactory
from .model import AttendanceRecord, ScanRequest, ScanResult
from .repository import AttendanceRepository
from .strategies.base import ScanDecision, ShiftStrategy

logger = logging.getLogger(__name__)

# One retry after a lost write race; the re-read normally hits the cooldown.
MAX_WRITE_ATTEMPTS = 2

_GREETINGS = {
    ScanAction.AM_IN: "Good morning, {name}! AM In recorded at {time}.",
    ScanAction.AM_OUT: "See you later, {name}! AM Out recorded at {time}.",
    ScanAction.PM_IN: "Welcome back, {name}! PM In recorded at {time}.",
    ScanAction.PM_OUT: "Goodbye, {name}! PM Out recorded at {time}. Have a great evening!",
    ScanAction.NIGHT_IN: "Good evening, {name}! Night In recorded at {time}.",
    ScanAction.NIGHT_OUT: "Good morning, {name}! Night Out recorded at {time}. Rest well!",
}
_FIRST_PM_GREETING = "Good afternoon, {name}! PM In recorded at {time}."


class AttendanceService:
    """Turn one kiosk scan into at most one attendance punch.

    resolve employee -> read schedule -> anchor the work date -> load record
    -> cooldown guard -> shift strategy decides -> create/update -> audit.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: EmployeeDirectory,
        schedules: ScheduleService,
        activity: ActivityLogger,
        *,
        strategy_factory: ShiftStrategyFactory | None = None,
        cooldown_seconds: int = SCAN_COOLDOWN_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._directory = directory
        self._schedules = schedules
        self._activity = activity
        self._factory = strategy_factory or ShiftStrategyFactory()
        self._cooldown_seconds = int(cooldown_seconds)
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def record_scan(self, scan: ScanRequest) -> ScanResult:
        employee = self._directory.resolve(scan.identifier)
        now = scan.timestamp or self._clock()
        schedule = self._schedules.get_active_schedule()
        strategy = self._factory.for_shift(scan.shift_type)

        logger.info("Scan employee=%s shift=%s at %s", employee.employee_id, scan.shift_type.value, now.isoformat())

        attempt = 1
        with self._employee_lock(employee.employee_id):
            while True:
                try:
                    return self._apply(scan, employee, now, schedule, strategy)
                except ConcurrentScanError:
                    if attempt >= MAX_WRITE_ATTEMPTS:
                        raise
                    attempt += 1
                    logger.warning("Concurrent scan for employee=%s, re-reading record", employee.employee_id)

    def get_status(self, identifier: str, shift_type: ShiftType, *, now: Optional[datetime] = None) -> dict:
        """Current record and next expected action, without recording anything."""
        employee = self._directory.resolve(identifier)
        now = now or self._clock()
        work_date = self.resolve_work_date(employee.employee_id, shift_type, now)
        record = self._attendance.find_for_period(
            employee_id=employee.employee_id, work_date=work_date, shift_type=shift_type
        )

        if record is None:
            next_action = ScanAction.NIGHT_IN.value if shift_type is ShiftType.NIGHT else ScanAction.AM_IN.value
        else:
            next_action = record.next_action()

        return {
            "record": record.to_dict() if record else None,
            "next_action": next_action,
            "shift_type": shift_type.value,
            "employee": employee.display(),
        }

    def attach_photo(self, record_id: int, action: ScanAction, photo_ref: str) -> AttendanceRecord:
        """Attach the kiosk photo taken for an already recorded punch.

        Sent by the kiosk after the scan result, so it never delays the punch.
        The newest matching activity entry gets the same photo.
        """

        photo_ref = require_non_empty(photo_ref, "Photo")
        record = self._attendance.get(record_id)
        if record is None:
            raise RecordNotFoundError("Attendance record not found")
        if action.field not in record.punch_fields or getattr(record, action.field) is None:
            raise ValidationError(f"No {action.label} punch on this record")

        saved = self._attendance.attach_photo(record_id, action, photo_ref)
        logger.info("Photo attached to record=%s action=%s", record_id, action.value)

        try:
            self._activity.attach_photo(
                employee_id=saved.employee_id,
                action=ActivityAction.for_scan(action),
                photo_ref=photo_ref,
            )
        except Exception:
            logger.exception("Activity photo update failed for record %s", record_id)
        return saved

    def resolve_work_date(self, employee_id: str, shift_type: ShiftType, now: datetime) -> date:
        """Date the scan belongs to.

        An early-morning night scan continues last night's shift while that
        record is still open; the record stays dated with the night it began.
        """

        today = now.date()
        if shift_type is not ShiftType.NIGHT or now.hour >= NIGHT_CONTINUATION_CUTOFF_HOUR:
            return today

        yesterday = today - timedelta(days=1)
        if self._attendance.find_open_night(employee_id=employee_id, work_date=yesterday):
            return yesterday
        return today

    def _apply(
        self,
        scan: ScanRequest,
        employee: Employee,
        now: datetime,
        schedule: ScheduleConfig,
        strategy: ShiftStrategy,
    ) -> ScanResult:
        work_date = self.resolve_work_date(employee.employee_id, scan.shift_type, now)
        record = self._attendance.find_for_period(
            employee_id=employee.employee_id, work_date=work_date, shift_type=scan.shift_type
        )

        wait = cooldown_remaining(record, now, cooldown_seconds=self._cooldown_seconds)
        if wait is not None:
            logger.info("Cooldown employee=%s wait=%ss", employee.employee_id, wait)
            return ScanResult.cooling_down(wait)

        decision = strategy.decide(now=now, record=record, schedule=schedule)
        if decision.complete or (record is not None and getattr(record, decision.action.field) is not None):
            return ScanResult.completed(self._completed_message(employee, scan.shift_type))

        if record is None:
            saved = self._attendance.create(
                employee_id=employee.employee_id,
                work_date=work_date,
                shift_type=scan.shift_type,
                status=decision.status,
                punches={decision.action.field: now},
                notes=decision.note,
            )
        else:
            saved = self._attendance.update(
                record.record_id,
                self._update_fields(record, decision, now),
                guard_field=decision.action.field,
            )

        self._audit(employee, decision, saved, now, scan.scan_photo)

        return ScanResult(
            success=True,
            message=self._message(employee, decision, now),
            record_id=saved.record_id,
            action=decision.action,
            timestamp=now,
            status=saved.status,
            next_action=decision.action.next_action,
            work_hours=saved.work_hours,
            employee=employee.display(),
        )

    @staticmethod
    def _update_fields(record: AttendanceRecord, decision: ScanDecision, now: datetime) -> dict:
        fields = {decision.action.field: now, "status": decision.status}
        if decision.work_hours is not None:
            fields["work_hours"] = decision.work_hours
        if decision.note:
            fields["notes"] = f"{record.notes}; {decision.note}" if record.notes else decision.note
        return fields

    def _audit(
        self,
        employee: Employee,
        decision: ScanDecision,
        record: AttendanceRecord,
        now: datetime,
        scan_photo: Optional[str],
    ) -> None:
        suffix = f" ({decision.note})" if decision.note else ""
        try:
            self._activity.record(
                ActivityAction.for_scan(decision.action),
                f"{employee.full_name} scanned {decision.action.label} at {format_clock(now)}{suffix}",
                Severity.SUCCESS,
                {
                    "record_id": record.record_id,
                    "shift_type": record.shift_type.value,
                    "work_date": record.work_date.isoformat(),
                    "status": record.status.value,
                    "time": now.isoformat(),
                    "department": employee.department,
                    "position": employee.position,
                    **decision.metadata,
                },
                employee_id=employee.employee_id,
                employee_name=employee.full_name,
                scan_photo=scan_photo,
            )
        except Exception:
            # The punch is already stored; the activity log is best effort.
            logger.exception("Activity log failed for record %s", record.record_id)

    @staticmethod
    def _message(employee: Employee, decision: ScanDecision, now: datetime) -> str:
        template = _GREETINGS[decision.action]
        if decision.metadata.get("morning_missed"):
            template = _FIRST_PM_GREETING
        message = template.format(name=employee.full_name, time=format_clock(now))
        if decision.note:
            message += f" ({decision.note})"
        return message

    @staticmethod
    def _completed_message(employee: Employee, shift_type: ShiftType) -> str:
        period = "tonight's shift" if shift_type is ShiftType.NIGHT else "today"
        return f"{employee.full_name} has already completed all attendance for {period}."

    @contextmanager
    def _employee_lock(self, employee_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(employee_id, threading.Lock())
        with lock:
            yield
