"""Hours reconciliation: raw daily attendance rows -> one authoritative hours value per day.

Per day:
1. drop content-identical duplicate rows;
2. an applied adjustment supersedes every other row of the day;
3. otherwise Pending/Cancelled rows contribute nothing;
4. sessions are summed by the strategy for the row's representation;
5. single-session days of at least BREAK_THRESHOLD_HOURS lose the break;
6. legacy rows only count inside the OK window around working_hours_per_day.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import iter_days, to_naive_utc
from ..core.constants import BREAK_THRESHOLD_HOURS, OK_ENTRY_TOLERANCE_MINUTES
from ..core.enums import AdjustmentStatus, ReasonCode
from ..policies.model import WorkingCalendarPolicy
from .factory import HoursStrategyFactory
from .model import DailyAttendanceRecord, DayHours
from .strategies.base import SessionTally

logger = logging.getLogger(__name__)


def deduplicate(records: Iterable[DailyAttendanceRecord]) -> tuple[list[DailyAttendanceRecord], int]:
    """Keep the first row of each distinct content; return (unique rows, number dropped)."""
    seen: set[tuple] = set()
    unique: list[DailyAttendanceRecord] = []
    dropped = 0
    for record in records:
        key = record.content_key()
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(record)
    return unique, dropped


class HoursReconciliationEngine:
    def __init__(self, *, strategy_factory: Optional[HoursStrategyFactory] = None):
        self._factory = strategy_factory or HoursStrategyFactory()

    def reconcile_period(
        self,
        records: Sequence[DailyAttendanceRecord],
        policy: WorkingCalendarPolicy,
        *,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> list[DayHours]:
        """One DayHours per calendar day in [start, end].

        `now` enables provisional hours for a still-open session today; leave it
        None when the result feeds a payslip.
        """
        by_day: dict[date, list[DailyAttendanceRecord]] = defaultdict(list)
        for record in records:
            if start <= record.work_date <= end:
                by_day[record.work_date].append(record)

        return [self.reconcile_day(day, by_day.get(day, []), policy, now=now) for day in iter_days(start, end)]

    def reconcile_day(
        self,
        work_date: date,
        records: Sequence[DailyAttendanceRecord],
        policy: WorkingCalendarPolicy,
        *,
        now: Optional[datetime] = None,
    ) -> DayHours:
        if not records:
            return DayHours(work_date=work_date, hours=0.0, reason=ReasonCode.NO_RECORD)

        now = to_naive_utc(now)

        unique, dropped = deduplicate(records)
        if dropped:
            logger.warning(
                "Dropped %d duplicate attendance row(s) for employee=%s date=%s",
                dropped,
                unique[0].employee_id,
                work_date,
            )

        applied = [r for r in unique if r.is_adjustment_applied]
        if applied:
            if len(unique) > 1:
                logger.info(
                    "Applied adjustment supersedes %d other row(s) for employee=%s date=%s",
                    len(unique) - 1,
                    applied[0].employee_id,
                    work_date,
                )
            result = self._evaluate_applied(applied[0], policy)
            return replace(result, duplicates_dropped=dropped, conflicting_rows=len(applied) > 1)

        results = [self._evaluate(record, policy, now=now) for record in unique]
        if len(results) == 1:
            return replace(results[0], duplicates_dropped=dropped)

        logger.warning(
            "Employee=%s has %d distinct attendance rows on %s; summing them, flagged for review",
            unique[0].employee_id,
            len(results),
            work_date,
        )
        counted = [r for r in results if r.reason.is_counted]
        return DayHours(
            work_date=work_date,
            hours=sum(r.hours for r in results),
            reason=(counted or results)[0].reason,
            provisional=any(r.provisional for r in results),
            irregularities=tuple(note for r in results for note in r.irregularities),
            duplicates_dropped=dropped,
            conflicting_rows=True,
        )

    def _evaluate_applied(self, record: DailyAttendanceRecord, policy: WorkingCalendarPolicy) -> DayHours:
        tally = self._factory.for_applied_adjustment().tally(record)
        self._log_irregularities(record, tally)
        worked = self._deduct_break(tally, policy)
        return DayHours(
            work_date=record.work_date,
            hours=_hours(worked),
            reason=ReasonCode.APPROVED_ADJUSTMENT,
            irregularities=tally.irregularities,
        )

    def _evaluate(
        self,
        record: DailyAttendanceRecord,
        policy: WorkingCalendarPolicy,
        *,
        now: Optional[datetime],
    ) -> DayHours:
        status = record.adjustment_status
        if status == AdjustmentStatus.PENDING:
            return DayHours(work_date=record.work_date, hours=0.0, reason=ReasonCode.PENDING)
        if status == AdjustmentStatus.CANCELLED:
            return DayHours(work_date=record.work_date, hours=0.0, reason=ReasonCode.CANCELLED)

        strategy = self._factory.for_representation(record.representation)
        tally = strategy.tally(record, now=now)
        self._log_irregularities(record, tally)
        worked = self._deduct_break(tally, policy)

        def zero(reason: ReasonCode) -> DayHours:
            return DayHours(
                work_date=record.work_date,
                hours=0.0,
                reason=reason,
                irregularities=tally.irregularities,
            )

        if worked <= timedelta(0):
            return zero(ReasonCode.INCOMPLETE)

        if tally.provisional:
            reason = ReasonCode.PROVISIONAL
        elif not strategy.uses_tolerance_gate:
            reason = ReasonCode.VALID_PUNCHES
        elif self.within_tolerance(worked, policy):
            reason = ReasonCode.OK_ENTRY
        else:
            return zero(ReasonCode.OUT_OF_TOLERANCE)

        return DayHours(
            work_date=record.work_date,
            hours=_hours(worked),
            reason=reason,
            provisional=tally.provisional,
            irregularities=tally.irregularities,
        )

    @staticmethod
    def within_tolerance(worked: timedelta, policy: WorkingCalendarPolicy) -> bool:
        expected = timedelta(hours=policy.working_hours_per_day)
        return abs(worked - expected) <= timedelta(minutes=OK_ENTRY_TOLERANCE_MINUTES)

    @staticmethod
    def _deduct_break(tally: SessionTally, policy: WorkingCalendarPolicy) -> timedelta:
        worked = tally.worked
        if tally.is_single_session and worked >= timedelta(hours=BREAK_THRESHOLD_HOURS):
            worked = max(timedelta(0), worked - timedelta(minutes=policy.break_duration_minutes))
        return worked

    @staticmethod
    def _log_irregularities(record: DailyAttendanceRecord, tally: SessionTally) -> None:
        for note in tally.irregularities:
            logger.warning(
                "Attendance irregularity employee=%s date=%s: %s",
                record.employee_id,
                record.work_date,
                note,
            )


def _hours(worked: timedelta) -> float:
    return worked.total_seconds() / 3600
