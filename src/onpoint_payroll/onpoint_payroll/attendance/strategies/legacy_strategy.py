from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..model import DailyAttendanceRecord, LegacyFields
from .base import HoursStrategy, SessionTally, session_length, still_open


class LegacyFieldsStrategy(HoursStrategy):
    """primary_in/out plus the optional secondary pair of the old schema."""

    uses_tolerance_gate = True

    def fields(self, record: DailyAttendanceRecord) -> LegacyFields:
        return record.legacy

    def tally(self, record: DailyAttendanceRecord, *, now: Optional[datetime] = None) -> SessionTally:
        f = self.fields(record)
        worked = timedelta(0)
        sessions = 0
        provisional = False
        notes: list[str] = []

        pairs = [("session 1", f.primary_in, f.primary_out)]
        if f.has_secondary:
            pairs.append(("session 2", f.secondary_in, f.secondary_out))

        for label, start, end in pairs:
            if end is None and still_open(record, start, now):
                worked += now - start
                sessions += 1
                provisional = True
                continue

            length, problem = session_length(start, end, label=label)
            if problem:
                notes.append(problem)
                continue
            worked += length
            sessions += 1

        return SessionTally(
            worked=worked,
            sessions=sessions,
            multi_session=f.has_secondary,
            provisional=provisional,
            irregularities=tuple(notes),
        )


class AppliedAdjustmentStrategy(LegacyFieldsStrategy):
    """Approved and applied correction: the overlay's times are the only source for the day."""

    uses_tolerance_gate = False

    def fields(self, record: DailyAttendanceRecord) -> LegacyFields:
        return record.effective_fields()

    def tally(self, record: DailyAttendanceRecord, *, now: Optional[datetime] = None) -> SessionTally:
        # Approved times are final; never extended to "now".
        return super().tally(record, now=None)
