from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .attendance.factory import ShiftStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_activity_repository import MySQLActivityLogRepository
from .audit.service import ActivityLogger
from .core.constants import DEFAULT_AUDIT_WORKERS, SCAN_COOLDOWN_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.service import EmployeeDirectory


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    schedules_repo: MySQLScheduleRepository
    attendance_repo: MySQLAttendanceRepository
    activity_repo: MySQLActivityLogRepository

    employee_directory: EmployeeDirectory
    schedule_service: ScheduleService
    activity_logger: ActivityLogger
    attendance_service: AttendanceService

    audit_executor: Optional[ThreadPoolExecutor] = None


def build_container(
    *,
    db_config: dict,
    audit_workers: int = DEFAULT_AUDIT_WORKERS,
    cooldown_seconds: int = SCAN_COOLDOWN_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    activity_repo = MySQLActivityLogRepository(conn)

    # Activity log writes run off the request thread (0 workers = inline).
    audit_executor = (
        ThreadPoolExecutor(max_workers=int(audit_workers), thread_name_prefix="activity-log")
        if int(audit_workers) > 0
        else None
    )

    employee_directory = EmployeeDirectory(employees_repo)
    schedule_service = ScheduleService(schedules_repo)
    activity_logger = ActivityLogger(activity_repo, executor=audit_executor)
    attendance_service = AttendanceService(
        attendance_repo,
        employee_directory,
        schedule_service,
        activity_logger,
        strategy_factory=ShiftStrategyFactory(),
        cooldown_seconds=cooldown_seconds,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        activity_repo=activity_repo,
        employee_directory=employee_directory,
        schedule_service=schedule_service,
        activity_logger=activity_logger,
        attendance_service=attendance_service,
        audit_executor=audit_executor,
    )
