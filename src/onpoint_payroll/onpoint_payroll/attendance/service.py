from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import now_utc, to_naive_utc
from ..common.validators import require_date_range, require_non_empty
from ..core.constants import AUTO_CLOSE_HOUR, AUTO_CLOSE_LOCATION
from ..core.enums import PunchKind
from ..core.exceptions import ValidationError
from ..policies.repository import PolicyRepository
from .model import DayHours, Punch
from .reconciliation import HoursReconciliationEngine
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        policies: PolicyRepository,
        *,
        engine: Optional[HoursReconciliationEngine] = None,
        auto_close_hour: int = AUTO_CLOSE_HOUR,
    ):
        self._attendance = attendance
        self._policies = policies
        self._engine = engine or HoursReconciliationEngine()
        self._auto_close_hour = int(auto_close_hour)

    @staticmethod
    def _parse_kind(value) -> PunchKind:
        if isinstance(value, PunchKind):
            return value
        text = str(value or "").strip().lower()
        # Older clients send clock_in / clock_out.
        text = {"clock_in": "in", "clock_out": "out"}.get(text, text)
        try:
            return PunchKind(text)
        except ValueError:
            raise ValidationError("Punch type must be 'in' or 'out'")

    def record_punch(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        kind,
        at: Optional[datetime] = None,
        location: Optional[str] = None,
        photo_ref: Optional[str] = None,
    ) -> int:
        """Append a punch to today's record, creating the record on the first punch."""
        employee_id = require_non_empty(employee_id, "employeeId")
        tenant_id = require_non_empty(tenant_id, "tenantId")
        kind = self._parse_kind(kind)
        at = to_naive_utc(at) if at else now_utc()
        work_date = at.date()

        records = self._attendance.get_daily_records(
            employee_id=employee_id,
            tenant_id=tenant_id,
            start_date=work_date,
            end_date=work_date,
        )
        current = records[-1] if records else None
        history = current.punch_history() if current else ()
        last = history[-1] if history else None
        is_open = last is not None and last.kind == PunchKind.IN

        if kind == PunchKind.IN and is_open:
            raise ValidationError("Already clocked in. Clock out first.")
        if kind == PunchKind.OUT and not is_open:
            raise ValidationError("Not clocked in today.")

        punch = Punch(kind=kind, timestamp=at, location=location, photo_ref=photo_ref)

        if current is None or current.record_id is None:
            return self._attendance.create_record(
                employee_id=employee_id,
                tenant_id=tenant_id,
                work_date=work_date,
                punches=[punch],
            )

        if not self._attendance.replace_punches(record_id=current.record_id, punches=history + (punch,)):
            raise ValidationError("Failed to save punch")
        return current.record_id

    def get_daily_hours(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> list[DayHours]:
        """Live view: an open session today is counted up to `now` and marked provisional."""
        require_date_range(start, end)
        now = to_naive_utc(now) if now else now_utc()

        policy = self._policies.get_working_calendar_policy(tenant_id)
        records = self._attendance.get_daily_records(
            employee_id=employee_id,
            tenant_id=tenant_id,
            start_date=start,
            end_date=end,
        )
        return self._engine.reconcile_period(records, policy, start=start, end=end, now=now)

    def auto_close_open_days(self, *, now: Optional[datetime] = None) -> int:
        """Close every session still open at the auto-close hour; returns how many were closed."""
        now = to_naive_utc(now) if now else now_utc()
        if now.hour < self._auto_close_hour:
            return 0

        close_at = datetime.combine(now.date(), time(hour=self._auto_close_hour))
        closed = 0
        for record in self._attendance.list_for_date(work_date=now.date()):
            history = record.punch_history()
            last = history[-1] if history else None
            if last is None or last.kind != PunchKind.IN or record.record_id is None:
                continue

            out_at = close_at if last.timestamp is None or last.timestamp < close_at else now
            auto_punch = Punch(
                kind=PunchKind.OUT,
                timestamp=out_at,
                location=AUTO_CLOSE_LOCATION,
                auto_closed=True,
            )
            if self._attendance.replace_punches(record_id=record.record_id, punches=history + (auto_punch,)):
                closed += 1
                logger.info("Auto-closed open session employee=%s date=%s", record.employee_id, record.work_date)

        return closed
