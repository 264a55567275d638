from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...core.enums import PunchKind
from ..model import DailyAttendanceRecord
from .base import HoursStrategy, SessionTally, session_length, still_open


class PunchListStrategy(HoursStrategy):
    """Pairs punches strictly as In immediately followed by Out; everything else is orphaned."""

    uses_tolerance_gate = False

    def tally(self, record: DailyAttendanceRecord, *, now: Optional[datetime] = None) -> SessionTally:
        punches = record.punches
        worked = timedelta(0)
        sessions = 0
        provisional = False
        notes: list[str] = []

        i = 0
        while i < len(punches):
            punch = punches[i]
            nxt = punches[i + 1] if i + 1 < len(punches) else None

            if punch.kind == PunchKind.IN and nxt is not None and nxt.kind == PunchKind.OUT:
                length, problem = session_length(punch.timestamp, nxt.timestamp, label=f"punches {i + 1}-{i + 2}")
                if problem:
                    notes.append(problem)
                else:
                    worked += length
                    sessions += 1
                i += 2
                continue

            is_open_tail = punch.kind == PunchKind.IN and nxt is None
            if is_open_tail and still_open(record, punch.timestamp, now):
                worked += now - punch.timestamp
                sessions += 1
                provisional = True
            else:
                kind = punch.kind.value if punch.kind else "unknown"
                notes.append(f"punch {i + 1}: orphaned '{kind}'")
            i += 1

        return SessionTally(
            worked=worked,
            sessions=sessions,
            multi_session=sessions > 1,
            provisional=provisional,
            irregularities=tuple(notes),
        )
