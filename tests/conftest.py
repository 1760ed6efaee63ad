from __future__ import annotations

import pytest

from src.attendance_kiosk.attendance_kiosk.schedules.model import DEFAULT_SCHEDULE


@pytest.fixture
def schedule():
    # 08:00-12:00 / 13:00-17:00, night 22:00-06:00, 15 minutes grace everywhere
    return DEFAULT_SCHEDULE
