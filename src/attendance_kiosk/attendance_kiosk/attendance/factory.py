from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import ShiftType
from .strategies.base import ShiftStrategy
from .strategies.day_strategy import DayShiftStrategy
from .strategies.night_strategy import NightShiftStrategy


@dataclass
class ShiftStrategyFactory:
    """Factory Pattern: choose the punch cycle for a shift type."""

    _strategies: dict[ShiftType, ShiftStrategy] = field(
        default_factory=lambda: {
            ShiftType.DAY: DayShiftStrategy(),
            ShiftType.NIGHT: NightShiftStrategy(),
        }
    )

    def for_shift(self, shift_type: ShiftType) -> ShiftStrategy:
        return self._strategies[ShiftType(shift_type)]
