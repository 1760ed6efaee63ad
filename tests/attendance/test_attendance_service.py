from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.attendance_kiosk.attendance_kiosk.attendance.factory import ShiftStrategyFactory
from src.attendance_kiosk.attendance_kiosk.attendance.model import AttendanceRecord, ScanRequest
from src.attendance_kiosk.attendance_kiosk.attendance.service import AttendanceService
from src.attendance_kiosk.attendance_kiosk.attendance.strategies.base import ScanDecision, ShiftStrategy
from src.attendance_kiosk.attendance_kiosk.audit.model import ActivityAction
from src.attendance_kiosk.attendance_kiosk.audit.service import ActivityLogger
from src.attendance_kiosk.attendance_kiosk.core.enums import AttendanceStatus, ScanAction, Severity, ShiftType
from src.attendance_kiosk.attendance_kiosk.core.exceptions import (
    ConcurrentScanError,
    EmployeeNotFoundError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)
from src.attendance_kiosk.attendance_kiosk.schedules.service import ScheduleService
from src.attendance_kiosk.attendance_kiosk.users.model import Employee
from src.attendance_kiosk.attendance_kiosk.users.service import EmployeeDirectory

JANE = Employee(
    employee_id="EMP-001",
    email="jane@example.com",
    full_name="Jane Doe",
    department="Engineering",
    position="Developer",
)


@dataclass
class InMemoryEmployees:
    employees: list[Employee]

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.email == email), None)

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.employee_id == employee_id), None)


class NoStoredSchedule:
    def get_active(self):
        return None


class BrokenSchedules:
    def get_active(self):
        raise StoreError("settings table unreachable")


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[tuple[str, date, ShiftType], AttendanceRecord] = {}
        self.fail_writes = False
        self._id = 0

    def get(self, record_id):
        return next((r for r in self.records.values() if r.record_id == record_id), None)

    def find_for_period(self, *, employee_id, work_date, shift_type):
        return self.records.get((employee_id, work_date, shift_type))

    def find_open_night(self, *, employee_id, work_date):
        rec = self.records.get((employee_id, work_date, ShiftType.NIGHT))
        if rec and rec.night_in and not rec.night_out:
            return rec
        return None

    def create(self, *, employee_id, work_date, shift_type, status, punches, notes=None):
        if self.fail_writes:
            raise StoreError("write failed")
        key = (employee_id, work_date, shift_type)
        if key in self.records:
            raise ConcurrentScanError("duplicate record")
        self._id += 1
        rec = AttendanceRecord(
            record_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            shift_type=shift_type,
            status=status,
            notes=notes,
            **punches,
        )
        self.records[key] = rec
        return rec

    def update(self, record_id, fields, *, guard_field):
        if self.fail_writes:
            raise StoreError("write failed")
        for key, rec in self.records.items():
            if rec.record_id == record_id:
                if getattr(rec, guard_field) is not None:
                    raise ConcurrentScanError(f"{guard_field} already set")
                self.records[key] = replace(rec, **fields)
                return self.records[key]
        raise StoreError(f"record {record_id} not found")

    def attach_photo(self, record_id, action, photo_ref):
        for key, rec in self.records.items():
            if rec.record_id == record_id:
                self.records[key] = replace(rec, **{action.photo_field: photo_ref})
                return self.records[key]
        raise RecordNotFoundError(f"record {record_id} not found")


class RecordingActivity:
    def __init__(self):
        self.entries = []

    def create(self, entry):
        self.entries.append(entry)
        return len(self.entries)

    def attach_scan_photo(self, *, employee_id, action, photo_ref):
        for i in reversed(range(len(self.entries))):
            entry = self.entries[i]
            if entry.employee_id == employee_id and entry.action == action:
                self.entries[i] = replace(entry, scan_photo=photo_ref)
                return True
        return False


class ExplodingActivityLogger:
    def record(self, *args, **kwargs):
        raise RuntimeError("audit pipeline down")

    def attach_photo(self, **kwargs):
        raise RuntimeError("audit pipeline down")


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def activity():
    return RecordingActivity()


def build_service(attendance, activity_repo=None, *, schedules=None, activity_logger=None, strategy_factory=None):
    return AttendanceService(
        attendance,
        EmployeeDirectory(InMemoryEmployees([JANE])),
        ScheduleService(schedules or NoStoredSchedule()),
        activity_logger or ActivityLogger(activity_repo or RecordingActivity()),
        strategy_factory=strategy_factory,
        clock=lambda: datetime(2026, 2, 2, 9, 0),
    )


def scan(at: datetime, shift_type=ShiftType.DAY, identifier="jane@example.com", **kw) -> ScanRequest:
    return ScanRequest(identifier=identifier, shift_type=shift_type, timestamp=at, **kw)


def day(hour, minute, second=0):
    return datetime(2026, 2, 2, hour, minute, second)


def test_full_day_cycle(attendance, activity):
    service = build_service(attendance, activity)

    first = service.record_scan(scan(day(7, 58)))
    assert first.success
    assert first.action == ScanAction.AM_IN
    assert first.status == AttendanceStatus.PRESENT
    assert first.next_action == "am-out"
    assert first.message == "Good morning, Jane Doe! AM In recorded at 07:58:00 AM."

    assert service.record_scan(scan(day(12, 1))).action == ScanAction.AM_OUT
    assert service.record_scan(scan(day(13, 5))).action == ScanAction.PM_IN

    last = service.record_scan(scan(day(17, 10)))
    assert last.action == ScanAction.PM_OUT
    assert last.work_hours == 8.13
    assert last.next_action == "complete"
    assert last.message.startswith("Goodbye, Jane Doe! PM Out recorded at 05:10:00 PM.")

    rec = attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)]
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.work_hours == 8.13
    assert [e.action for e in activity.entries] == [
        ActivityAction.SCAN_AM_IN,
        ActivityAction.SCAN_AM_OUT,
        ActivityAction.SCAN_PM_IN,
        ActivityAction.SCAN_PM_OUT,
    ]


def test_scan_after_completed_day_changes_nothing(attendance, activity):
    service = build_service(attendance, activity)
    for moment in (day(7, 58), day(12, 1), day(13, 5), day(17, 10)):
        service.record_scan(scan(moment))
    before = attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)]

    result = service.record_scan(scan(day(17, 30)))

    assert not result.success
    assert result.next_action == "complete"
    assert result.message == "Jane Doe has already completed all attendance for today."
    assert attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)] == before
    assert len(activity.entries) == 4


def test_repeat_scan_inside_cooldown_is_rejected(attendance, activity):
    service = build_service(attendance, activity)
    service.record_scan(scan(day(8, 0, 0)))

    result = service.record_scan(scan(day(8, 0, 2)))

    assert not result.success
    assert result.cooldown
    assert result.wait_seconds == 1
    assert result.to_dict() == {
        "success": False,
        "cooldown": True,
        "wait_seconds": 1,
        "message": "Please wait 1 seconds before scanning again.",
    }
    rec = attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)]
    assert rec.am_out is None
    assert len(activity.entries) == 1


def test_scan_after_cooldown_is_accepted(attendance):
    service = build_service(attendance)
    service.record_scan(scan(day(8, 0, 0)))

    result = service.record_scan(scan(day(8, 0, 3)))

    assert result.success
    assert result.action == ScanAction.AM_OUT


def test_first_scan_during_lunch_is_half_day(attendance):
    service = build_service(attendance)

    result = service.record_scan(scan(day(12, 30)))

    assert result.action == ScanAction.PM_IN
    assert result.status == AttendanceStatus.HALF_DAY
    assert result.message == (
        "Good afternoon, Jane Doe! PM In recorded at 12:30:00 PM. (Morning session missed - Half Day)"
    )
    rec = attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)]
    assert rec.notes == "Morning session missed - Half Day"


def test_late_morning_and_late_lunch_keep_worst_status(attendance):
    service = build_service(attendance)

    assert service.record_scan(scan(day(8, 30))).status == AttendanceStatus.LATE
    service.record_scan(scan(day(12, 0)))
    result = service.record_scan(scan(day(13, 45)))

    assert result.status == AttendanceStatus.LATE
    rec = attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)]
    assert rec.notes == "Late; Late from lunch"


def test_night_shift_is_anchored_to_start_date(attendance):
    service = build_service(attendance)

    night_in = service.record_scan(scan(datetime(2026, 2, 2, 22, 5), ShiftType.NIGHT))
    night_out = service.record_scan(scan(datetime(2026, 2, 3, 6, 2), ShiftType.NIGHT))

    assert night_in.action == ScanAction.NIGHT_IN
    assert night_out.action == ScanAction.NIGHT_OUT
    assert night_out.work_hours == 7.95
    assert list(attendance.records) == [("EMP-001", date(2026, 2, 2), ShiftType.NIGHT)]


def test_early_night_scan_without_open_shift_starts_today(attendance):
    service = build_service(attendance)

    result = service.record_scan(scan(datetime(2026, 2, 3, 1, 0), ShiftType.NIGHT))

    assert result.action == ScanAction.NIGHT_IN
    assert result.status == AttendanceStatus.PRESENT
    assert list(attendance.records) == [("EMP-001", date(2026, 2, 3), ShiftType.NIGHT)]


def test_closed_night_is_not_continued_next_morning(attendance):
    service = build_service(attendance)
    service.record_scan(scan(datetime(2026, 2, 2, 22, 0), ShiftType.NIGHT))
    service.record_scan(scan(datetime(2026, 2, 3, 6, 0), ShiftType.NIGHT))

    assert service.resolve_work_date("EMP-001", ShiftType.NIGHT, datetime(2026, 2, 3, 7, 0)) == date(2026, 2, 3)


def test_day_and_night_records_are_separate(attendance):
    service = build_service(attendance)

    service.record_scan(scan(day(8, 0)))
    result = service.record_scan(scan(day(22, 0), ShiftType.NIGHT))

    assert result.action == ScanAction.NIGHT_IN
    assert len(attendance.records) == 2


def test_employee_can_be_found_by_id(attendance):
    service = build_service(attendance)

    result = service.record_scan(scan(day(8, 0), identifier="EMP-001"))

    assert result.success
    assert result.employee["name"] == "Jane Doe"


def test_unknown_employee(attendance):
    service = build_service(attendance)

    with pytest.raises(EmployeeNotFoundError):
        service.record_scan(scan(day(8, 0), identifier="ghost@example.com"))
    assert attendance.records == {}


def test_blank_identifier(attendance):
    service = build_service(attendance)

    with pytest.raises(ValidationError):
        service.record_scan(scan(day(8, 0), identifier="   "))


def test_unreadable_schedule_falls_back_to_defaults(attendance):
    service = build_service(attendance, schedules=BrokenSchedules())

    result = service.record_scan(scan(day(8, 20)))

    assert result.success
    assert result.status == AttendanceStatus.LATE


def test_failing_audit_does_not_fail_the_scan(attendance):
    service = build_service(attendance, activity_logger=ExplodingActivityLogger())

    result = service.record_scan(scan(day(8, 0)))

    assert result.success
    assert ("EMP-001", date(2026, 2, 2), ShiftType.DAY) in attendance.records


def test_store_failure_propagates_and_is_not_audited(attendance, activity):
    attendance.fail_writes = True
    service = build_service(attendance, activity)

    with pytest.raises(StoreError):
        service.record_scan(scan(day(8, 0)))
    assert activity.entries == []


class LosingRaceAttendance(InMemoryAttendance):
    """Another kiosk inserts the same punch just before our first write."""

    def __init__(self, rival_time: datetime, races: int = 1):
        super().__init__()
        self._rival_time = rival_time
        self._races = races

    def create(self, **kwargs):
        if self._races > 0:
            self._races -= 1
            super().create(**{**kwargs, "punches": {"am_in": self._rival_time}})
            raise ConcurrentScanError("duplicate record")
        return super().create(**kwargs)


def test_lost_race_is_reread_and_hits_cooldown(activity):
    attendance = LosingRaceAttendance(rival_time=day(8, 0, 0))
    service = build_service(attendance, activity)

    result = service.record_scan(scan(day(8, 0, 1)))

    assert result.cooldown
    assert result.wait_seconds == 2
    assert len(attendance.records) == 1
    assert activity.entries == []


def test_repeated_conflicts_are_raised():
    class AlwaysConflicting(InMemoryAttendance):
        def create(self, **kwargs):
            raise ConcurrentScanError("duplicate record")

    service = build_service(AlwaysConflicting())

    with pytest.raises(ConcurrentScanError):
        service.record_scan(scan(day(8, 0)))


def test_simultaneous_scans_produce_one_punch(attendance, activity):
    service = build_service(attendance, activity)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: service.record_scan(scan(day(8, 0))), range(6)))

    assert sum(r.success for r in results) == 1
    assert sum(r.cooldown for r in results) == 5
    assert len(activity.entries) == 1


def test_audit_entry_carries_scan_details(attendance, activity):
    service = build_service(attendance, activity)

    service.record_scan(scan(day(8, 20), scan_photo="data:image/jpeg;base64,AAAA"))

    (entry,) = activity.entries
    assert entry.action == ActivityAction.SCAN_AM_IN
    assert entry.severity == Severity.SUCCESS
    assert entry.employee_id == "EMP-001"
    assert entry.employee_name == "Jane Doe"
    assert entry.scan_photo == "data:image/jpeg;base64,AAAA"
    assert entry.description == "Jane Doe scanned AM In at 08:20:00 AM (Late)"
    assert entry.metadata["status"] == "LATE"
    assert entry.metadata["minutes_late"] == 20
    assert entry.metadata["work_date"] == "2026-02-02"


def test_timestamp_defaults_to_clock(attendance):
    service = build_service(attendance)

    result = service.record_scan(ScanRequest(identifier="jane@example.com"))

    assert result.timestamp == datetime(2026, 2, 2, 9, 0)


def test_status_before_any_scan(attendance):
    service = build_service(attendance)

    status = service.get_status("jane@example.com", ShiftType.DAY, now=day(7, 0))

    assert status["record"] is None
    assert status["next_action"] == "am-in"
    assert status["employee"]["department"] == "Engineering"
    assert service.get_status("EMP-001", ShiftType.NIGHT, now=day(7, 0))["next_action"] == "night-in"


def test_status_follows_recorded_punches(attendance):
    service = build_service(attendance)
    service.record_scan(scan(day(7, 58)))
    service.record_scan(scan(day(12, 1)))

    status = service.get_status("jane@example.com", ShiftType.DAY, now=day(12, 30))

    assert status["next_action"] == "pm-in"
    assert status["record"]["am_in"] == "2026-02-02T07:58:00"
    assert status["record"]["status"] == "PRESENT"


def test_status_of_open_night_after_midnight(attendance):
    service = build_service(attendance)
    service.record_scan(scan(datetime(2026, 2, 2, 22, 0), ShiftType.NIGHT))

    status = service.get_status("jane@example.com", ShiftType.NIGHT, now=datetime(2026, 2, 3, 3, 0))

    assert status["next_action"] == "night-out"
    assert status["record"]["work_date"] == "2026-02-02"


class RepeatingAmInStrategy(ShiftStrategy):
    """Always asks for AM-in, even when the record already has one."""

    shift_type = ShiftType.DAY

    def decide(self, *, now, record, schedule):
        return ScanDecision(action=ScanAction.AM_IN, status=AttendanceStatus.PRESENT)


def test_decision_for_a_filled_slot_is_rejected_as_complete(attendance, activity):
    build_service(attendance, activity).record_scan(scan(day(7, 58)))
    before = dict(attendance.records)
    service = build_service(
        attendance,
        activity,
        strategy_factory=ShiftStrategyFactory(_strategies={ShiftType.DAY: RepeatingAmInStrategy()}),
    )

    result = service.record_scan(scan(day(9, 0)))

    assert not result.success
    assert result.next_action == "complete"
    assert result.message == "Jane Doe has already completed all attendance for today."
    assert attendance.records == before
    assert len(activity.entries) == 1


def test_status_after_lunch_first_scan_expects_pm_out(attendance):
    service = build_service(attendance)
    service.record_scan(scan(day(13, 30)))

    status = service.get_status("jane@example.com", ShiftType.DAY, now=day(15, 0))
    result = service.record_scan(scan(day(17, 0)))

    assert status["next_action"] == "pm-out"
    assert result.action == ScanAction.PM_OUT


def test_status_after_skipped_am_out_expects_pm_out(attendance):
    service = build_service(attendance)
    service.record_scan(scan(day(8, 0)))
    service.record_scan(scan(day(13, 5)))

    status = service.get_status("jane@example.com", ShiftType.DAY, now=day(15, 0))

    assert status["next_action"] == "pm-out"
    assert status["record"]["am_out"] is None


def test_attach_photo_to_recorded_punch(attendance, activity):
    service = build_service(attendance, activity)
    first = service.record_scan(scan(day(7, 58)))
    service.record_scan(scan(day(12, 1)))

    rec = service.attach_photo(first.record_id, ScanAction.AM_IN, "/api/files/17")

    assert rec.am_in_photo == "/api/files/17"
    assert rec.am_out_photo is None
    assert attendance.records[("EMP-001", date(2026, 2, 2), ShiftType.DAY)].am_in_photo == "/api/files/17"
    am_in_entry, am_out_entry = activity.entries
    assert am_in_entry.scan_photo == "/api/files/17"
    assert am_out_entry.scan_photo is None


def test_attach_photo_updates_newest_matching_entry_only(attendance, activity):
    service = build_service(attendance, activity)
    yesterday = service.record_scan(scan(datetime(2026, 2, 1, 7, 55)))
    today = service.record_scan(scan(day(7, 58)))

    service.attach_photo(today.record_id, ScanAction.AM_IN, "data:image/jpeg;base64,BBBB")

    assert yesterday.record_id != today.record_id
    assert [e.scan_photo for e in activity.entries] == [None, "data:image/jpeg;base64,BBBB"]


def test_attach_photo_unknown_record(attendance):
    service = build_service(attendance)

    with pytest.raises(RecordNotFoundError):
        service.attach_photo(99, ScanAction.AM_IN, "/api/files/1")


def test_attach_photo_requires_the_punch(attendance):
    service = build_service(attendance)
    first = service.record_scan(scan(day(7, 58)))

    with pytest.raises(ValidationError, match="No PM Out punch"):
        service.attach_photo(first.record_id, ScanAction.PM_OUT, "/api/files/1")
    with pytest.raises(ValidationError, match="No Night In punch"):
        service.attach_photo(first.record_id, ScanAction.NIGHT_IN, "/api/files/1")


def test_attach_photo_requires_a_photo(attendance):
    service = build_service(attendance)
    first = service.record_scan(scan(day(7, 58)))

    with pytest.raises(ValidationError, match="Photo is required"):
        service.attach_photo(first.record_id, ScanAction.AM_IN, " ")


def test_attach_photo_survives_activity_failure(attendance):
    service = build_service(attendance)
    first = service.record_scan(scan(day(7, 58)))
    failing = build_service(attendance, activity_logger=ExplodingActivityLogger())

    rec = failing.attach_photo(first.record_id, ScanAction.AM_IN, "/api/files/3")

    assert rec.am_in_photo == "/api/files/3"
