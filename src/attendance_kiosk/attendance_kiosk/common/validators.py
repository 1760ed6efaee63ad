from __future__ import annotations

from typing import Optional

from ..core.enums import ScanAction, ShiftType
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def parse_shift_type(value: Optional[str]) -> ShiftType:
    """Default to DAY when no shift type was sent."""
    if value is None or not str(value).strip():
        return ShiftType.DAY
    try:
        return ShiftType(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown shift type: {value}") from None


def parse_scan_action(value: Optional[str]) -> ScanAction:
    """Accept the kiosk's action names ("am-in") and field names ("am_in")."""
    text = require_non_empty(value, "Action").lower().replace("_", "-")
    try:
        return ScanAction(text)
    except ValueError:
        raise ValidationError(f"Invalid action: {value}") from None
