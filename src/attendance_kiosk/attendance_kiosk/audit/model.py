from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..core.enums import ScanAction, Severity


class ActivityAction(str, Enum):
    SCAN_AM_IN = "SCAN_AM_IN"
    SCAN_AM_OUT = "SCAN_AM_OUT"
    SCAN_PM_IN = "SCAN_PM_IN"
    SCAN_PM_OUT = "SCAN_PM_OUT"
    SCAN_NIGHT_IN = "SCAN_NIGHT_IN"
    SCAN_NIGHT_OUT = "SCAN_NIGHT_OUT"
    SYSTEM_ERROR = "SYSTEM_ERROR"

    @classmethod
    def for_scan(cls, action: ScanAction) -> "ActivityAction":
        return cls("SCAN_" + action.field.upper())


@dataclass(frozen=True)
class ActivityEntry:
    """One human-readable line of the activity log."""

    action: ActivityAction
    description: str
    severity: Severity = Severity.INFO
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    scan_photo: Optional[str] = None
