from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyAttendanceRecord, Punch


class AttendanceRepository(Protocol):
    """Punch store interface.

    Read methods raise AttendanceFetchError when the store is unreachable;
    an empty sequence always means "confirmed no rows".
    """

    def get_daily_records(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[DailyAttendanceRecord]:
        raise NotImplementedError

    def list_for_tenant(
        self,
        *,
        tenant_id: str,
        start_date: date,
        end_date: date,
    ) -> Sequence[DailyAttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, *, work_date: date) -> Sequence[DailyAttendanceRecord]:
        """All tenants' rows for one day (auto-close job)."""

        raise NotImplementedError

    def create_record(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        work_date: date,
        punches: Sequence[Punch],
    ) -> int:
        raise NotImplementedError

    def replace_punches(self, *, record_id: int, punches: Sequence[Punch]) -> bool:
        """Persist the day's punch list after an append (append-only at the domain level)."""

        raise NotImplementedError
