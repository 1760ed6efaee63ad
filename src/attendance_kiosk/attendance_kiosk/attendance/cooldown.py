from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from ..core.constants import SCAN_COOLDOWN_SECONDS
from .model import AttendanceRecord


def cooldown_remaining(
    record: Optional[AttendanceRecord],
    now: datetime,
    *,
    cooldown_seconds: int = SCAN_COOLDOWN_SECONDS,
) -> Optional[int]:
    """Seconds to wait before ``record`` accepts another punch, or None.

    Measured from the record's latest punch of its own shift.
    """

    last = record.last_punch() if record else None
    if last is None:
        return None

    elapsed = (now - last).total_seconds()
    if elapsed >= cooldown_seconds:
        return None
    return min(cooldown_seconds, math.ceil(cooldown_seconds - elapsed))
