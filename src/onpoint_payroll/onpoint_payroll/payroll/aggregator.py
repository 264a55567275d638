from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import DailyAttendanceRecord
from ..attendance.reconciliation import HoursReconciliationEngine
from ..common.datetime_utils import iter_days
from ..common.validators import require_date_range
from ..core.enums import ReasonCode
from ..policies.model import WorkingCalendarPolicy
from .model import PayPeriod, PeriodTotals

logger = logging.getLogger(__name__)


def count_working_days(start: date, end: date, policy: WorkingCalendarPolicy) -> int:
    """Days in [start, end] whose weekday is in the policy's working set (holidays not considered)."""
    return sum(1 for day in iter_days(start, end) if policy.is_working_day(day))


class PeriodAggregator:
    def __init__(self, *, engine: Optional[HoursReconciliationEngine] = None):
        self._engine = engine or HoursReconciliationEngine()

    def aggregate(
        self,
        records: Sequence[DailyAttendanceRecord],
        period: PayPeriod,
        policy: WorkingCalendarPolicy,
    ) -> PeriodTotals:
        """Sum reconciled daily hours over the period.

        Payroll never counts a still-open session, so reconciliation runs
        without `now`.
        """
        require_date_range(period.period_start, period.period_end)

        in_period = [
            r
            for r in records
            if r.employee_id == period.employee_id and period.period_start <= r.work_date <= period.period_end
        ]
        days = self._engine.reconcile_period(
            in_period,
            policy,
            start=period.period_start,
            end=period.period_end,
        )

        working_days = count_working_days(period.period_start, period.period_end, policy)
        expected_hours = working_days * float(policy.working_hours_per_day)
        missing = tuple(
            d.work_date for d in days if d.reason == ReasonCode.NO_RECORD and policy.is_working_day(d.work_date)
        )

        if not in_period:
            logger.info(
                "No attendance rows for employee=%s in %s; full-salary mode",
                period.employee_id,
                period.key,
            )
            actual: Optional[float] = None
        else:
            actual = sum(d.hours for d in days)

        return PeriodTotals(
            actual_hours_worked=actual,
            expected_hours=expected_hours,
            working_days=working_days,
            days=tuple(days),
            missing_days=missing,
        )
