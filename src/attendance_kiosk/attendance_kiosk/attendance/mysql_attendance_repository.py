from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..core.enums import AttendanceStatus, ScanAction, ShiftType
from ..core.exceptions import ConcurrentScanError, RecordNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceRecord
from .repository import PHOTO_FIELDS, WRITABLE_FIELDS, AttendanceRepository

_COLUMNS = """
    record_id, employee_id, work_date, shift_type, status,
    am_in, am_out, pm_in, pm_out, night_in, night_out, work_hours, notes,
    am_in_photo, am_out_photo, pm_in_photo, pm_out_photo, night_in_photo, night_out_photo
"""


def _to_record(r: dict) -> AttendanceRecord:
    work_hours = r.get("work_hours")
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        shift_type=ShiftType(r["shift_type"]),
        status=AttendanceStatus(r["status"]),
        am_in=r.get("am_in"),
        am_out=r.get("am_out"),
        pm_in=r.get("pm_in"),
        pm_out=r.get("pm_out"),
        night_in=r.get("night_in"),
        night_out=r.get("night_out"),
        work_hours=float(work_hours) if work_hours is not None else None,
        notes=r.get("notes"),
        **{name: r.get(name) for name in PHOTO_FIELDS},
    )


def _check_columns(names) -> None:
    unknown = set(names) - WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown attendance columns: {sorted(unknown)}")


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_for_period(self, *, employee_id: str, work_date: date, shift_type: ShiftType) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s AND shift_type=%s
                """,
                (employee_id, work_date, shift_type.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_open_night(self, *, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s AND shift_type='NIGHT'
                  AND night_in IS NOT NULL AND night_out IS NULL
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        _check_columns(punches)
        columns = ["employee_id", "work_date", "shift_type", "status", "notes", *punches]
        values = [employee_id, work_date, shift_type.value, status.value, notes, *punches.values()]

        # The unique key on (employee_id, work_date, shift_type) turns a racing
        # insert into ConcurrentScanError (see db_cursor).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records({", ".join(columns)})
                VALUES({", ".join(["%s"] * len(values))})
                """,
                tuple(values),
            )
            record_id = int(cur.lastrowid)

        return AttendanceRecord(
            record_id=record_id,
            employee_id=employee_id,
            work_date=work_date,
            shift_type=shift_type,
            status=status,
            notes=notes,
            **dict(punches),
        )

    def update(self, record_id: int, fields: Mapping[str, Any], *, guard_field: str) -> AttendanceRecord:
        _check_columns([*fields, guard_field])
        values = [v.value if isinstance(v, AttendanceStatus) else v for v in fields.values()]
        assignments = ", ".join(f"{name}=%s" for name in fields)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {assignments}
                WHERE record_id=%s AND {guard_field} IS NULL
                """,
                (*values, int(record_id)),
            )
            if cur.rowcount == 0:
                raise ConcurrentScanError(f"{guard_field} of record {record_id} was already set")

            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return _to_record(fetchone(cur))

    def attach_photo(self, record_id: int, action: ScanAction, photo_ref: str) -> AttendanceRecord:
        column = action.photo_field
        _check_columns([column])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {column}=%s WHERE record_id=%s",
                (photo_ref, int(record_id)),
            )
            # rowcount is 0 both for a missing row and an unchanged value; re-read to tell them apart.
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            if not r:
                raise RecordNotFoundError(f"Attendance record {record_id} not found")
            return _to_record(r)
