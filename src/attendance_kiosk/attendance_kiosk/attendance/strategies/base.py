from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ...core.enums import AttendanceStatus, ScanAction, ShiftType
from ...schedules.model import ScheduleConfig
from ..model import AttendanceRecord


@dataclass(frozen=True)
class ScanDecision:
    """Which punch a scan fills and the record status that results.

    ``action`` is None when the shift is already complete.
    """

    action: Optional[ScanAction]
    status: Optional[AttendanceStatus] = None
    work_hours: Optional[float] = None
    note: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return self.action is None

    @classmethod
    def completed(cls) -> "ScanDecision":
        return cls(action=None)


class ShiftStrategy(ABC):
    """Strategy Pattern: the punch cycle of one shift type."""

    shift_type: ShiftType

    @abstractmethod
    def decide(self, *, now: datetime, record: Optional[AttendanceRecord], schedule: ScheduleConfig) -> ScanDecision:
        raise NotImplementedError
