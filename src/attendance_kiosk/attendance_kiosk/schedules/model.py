from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import DEFAULT_GRACE_MINUTES, DEFAULT_LATE_THRESHOLD_MINUTES


@dataclass(frozen=True)
class ScheduleConfig:
    """Shift-time configuration used to classify scans.

    All boundaries are times of day. ``night_end`` is earlier than
    ``night_start`` and belongs to the following calendar day.
    """

    am_start: time
    am_end: time
    pm_start: time
    pm_end: time
    night_start: time
    night_end: time
    am_grace_minutes: int = DEFAULT_GRACE_MINUTES
    pm_grace_minutes: int = DEFAULT_GRACE_MINUTES
    night_grace_minutes: int = DEFAULT_GRACE_MINUTES
    # Legacy setting kept for compatibility; per-session grace periods are used instead.
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES


DEFAULT_SCHEDULE = ScheduleConfig(
    am_start=time(8, 0),
    am_end=time(12, 0),
    pm_start=time(13, 0),
    pm_end=time(17, 0),
    night_start=time(22, 0),
    night_end=time(6, 0),
)
