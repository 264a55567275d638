from __future__ import annotations

from dataclasses import dataclass

from .model import AttendanceRepresentation, LegacyFields, PunchList
from .strategies.base import HoursStrategy
from .strategies.legacy_strategy import AppliedAdjustmentStrategy, LegacyFieldsStrategy
from .strategies.punch_list_strategy import PunchListStrategy


@dataclass
class HoursStrategyFactory:
    """Factory Pattern: choose the hours strategy for a record's representation."""

    def for_representation(self, representation: AttendanceRepresentation) -> HoursStrategy:
        if isinstance(representation, PunchList):
            return PunchListStrategy()
        if isinstance(representation, LegacyFields):
            return LegacyFieldsStrategy()
        raise TypeError(f"Unsupported attendance representation: {type(representation)!r}")

    def for_applied_adjustment(self) -> HoursStrategy:
        return AppliedAdjustmentStrategy()
