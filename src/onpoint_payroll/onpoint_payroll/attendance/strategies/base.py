from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..model import DailyAttendanceRecord


@dataclass(frozen=True)
class SessionTally:
    """Raw worked time for one record, before break deduction and gating."""

    worked: timedelta
    sessions: int
    multi_session: bool
    provisional: bool = False
    irregularities: tuple[str, ...] = ()

    @property
    def is_single_session(self) -> bool:
        return self.sessions == 1 and not self.multi_session


class HoursStrategy(ABC):
    """Strategy Pattern: how raw clock data of one representation becomes worked time."""

    # Legacy entries must land within the OK window to count; punch lists need not.
    uses_tolerance_gate: bool = False

    @abstractmethod
    def tally(self, record: DailyAttendanceRecord, *, now: Optional[datetime] = None) -> SessionTally:
        raise NotImplementedError


def session_length(
    start: Optional[datetime],
    end: Optional[datetime],
    *,
    label: str,
) -> tuple[timedelta, Optional[str]]:
    """Length of one in/out session, or zero plus an irregularity note."""
    if start is None or end is None:
        return timedelta(0), f"{label}: missing timestamp"
    if end <= start:
        return timedelta(0), f"{label}: out ({end:%H:%M}) not after in ({start:%H:%M})"
    return end - start, None


def still_open(record: DailyAttendanceRecord, since: Optional[datetime], now: Optional[datetime]) -> bool:
    """An unclosed session only counts (provisionally) on its own day, for live views."""
    if now is None or since is None:
        return False
    return record.work_date == now.date() and now > since
