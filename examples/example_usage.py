"""Example: record a scan through the service layer (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_kiosk.attendance_kiosk.attendance.model import ScanRequest
from src.attendance_kiosk.attendance_kiosk.container import build_container
from src.attendance_kiosk.attendance_kiosk.core.enums import ShiftType


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, audit_workers=0)

    result = container.attendance_service.record_scan(
        ScanRequest(identifier="employee@example.com", shift_type=ShiftType.DAY)
    )
    print(result.to_dict())
    print(container.attendance_service.get_status("employee@example.com", ShiftType.DAY))


if __name__ == "__main__":
    main()
