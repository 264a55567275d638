from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.constants import (
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_WORKING_HOURS_PER_DAY,
    DEFAULT_WORKING_WEEKDAYS,
)


@dataclass(frozen=True)
class WorkingCalendarPolicy:
    """Per-tenant working calendar used for break deduction and expected hours."""

    tenant_id: str
    working_hours_per_day: float = DEFAULT_WORKING_HOURS_PER_DAY
    break_duration_minutes: int = DEFAULT_BREAK_DURATION_MINUTES
    working_weekdays: frozenset[int] = DEFAULT_WORKING_WEEKDAYS

    def is_working_day(self, day: date) -> bool:
        return day.weekday() in self.working_weekdays
