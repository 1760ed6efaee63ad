from __future__ import annotations

from typing import Optional, Protocol

from .model import ScheduleConfig


class ScheduleRepository(Protocol):
    def get_active(self) -> Optional[ScheduleConfig]:
        """Return the current schedule configuration, or None if none is stored."""

        raise NotImplementedError
