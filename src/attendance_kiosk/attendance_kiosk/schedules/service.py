from __future__ import annotations

import logging

from .model import DEFAULT_SCHEDULE, ScheduleConfig
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Read side of the schedule configuration.

    A missing or unreadable configuration never fails a scan: the built-in
    default schedule is used instead.
    """

    def __init__(self, schedules: ScheduleRepository, *, default: ScheduleConfig = DEFAULT_SCHEDULE):
        self._schedules = schedules
        self._default = default

    def get_active_schedule(self) -> ScheduleConfig:
        try:
            schedule = self._schedules.get_active()
        except Exception:
            logger.exception("Could not read schedule settings, using defaults")
            return self._default

        if schedule is None:
            logger.info("No schedule settings stored, using defaults")
            return self._default
        return schedule
