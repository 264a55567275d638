from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import DailyAttendanceRecord
from ..attendance.reconciliation import HoursReconciliationEngine
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_date_range
from ..core.constants import MONTHS_PER_YEAR
from ..core.enums import ReasonCode, ReportType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, SalaryNotConfiguredError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..policies.repository import PolicyRepository
from .aggregator import PeriodAggregator
from .cache import PayslipCache
from .calculator.base import PayCalculator
from .calculator.standard_calculator import StandardPayCalculator
from .history import PayrollHistoryEntry, deductions_from_history
from .model import PayPeriod, PaySlip
from .repository import PayrollHistoryRepository

logger = logging.getLogger(__name__)


class PayslipService:
    """Fetch inputs, aggregate hours, compute the slip; optionally memoize it."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        policies: PolicyRepository,
        history: Optional[PayrollHistoryRepository] = None,
        *,
        aggregator: Optional[PeriodAggregator] = None,
        calculator: Optional[PayCalculator] = None,
        cache: Optional[PayslipCache] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._policies = policies
        self._history = history
        self._aggregator = aggregator or PeriodAggregator()
        self._calculator = calculator or StandardPayCalculator()
        self._cache = cache

    def get_employee(self, *, employee_id: str, tenant_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.tenant_id != tenant_id:
            raise NotFoundError("Employee not found")
        return employee

    def get_payslip(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        pay_date: date,
        force_refresh: bool = False,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> PaySlip:
        employee = self.get_employee(employee_id=employee_id, tenant_id=tenant_id)
        if employee.basic_salary <= 0:
            raise SalaryNotConfiguredError(employee.employee_id)

        if period_start is not None or period_end is not None:
            if period_start is None or period_end is None:
                raise ValidationError("Both period start and end are required for a custom pay period")
            require_date_range(period_start, period_end)
            period = PayPeriod(
                employee_id=employee.employee_id,
                tenant_id=tenant_id,
                period_start=period_start,
                period_end=period_end,
            )
        else:
            period = PayPeriod.for_pay_date(employee_id=employee.employee_id, tenant_id=tenant_id, pay_date=pay_date)

        cache_key = f"{period.key}@{pay_date.isoformat()}"
        if self._cache is not None:
            if force_refresh:
                logger.debug("Forced payslip refresh employee=%s key=%s", employee_id, cache_key)
            else:
                cached = self._cache.get(employee.employee_id, cache_key)
                if cached is not None:
                    return cached

        slip = self.compute_payslip(employee, period, pay_date=pay_date)

        if self._cache is not None:
            self._cache.put(employee.employee_id, cache_key, slip)
        return slip

    def compute_payslip(self, employee: Employee, period: PayPeriod, *, pay_date: date) -> PaySlip:
        records, policy, history = self._fetch_inputs(period, pay_date)

        totals = self._aggregator.aggregate(records, period, policy)
        if totals.missing_days:
            logger.info(
                "employee=%s has %d working day(s) without attendance in %s",
                employee.employee_id,
                len(totals.missing_days),
                period.key,
            )

        slip = self._calculator.compute_pay(
            basic_salary=employee.basic_salary,
            expected_hours=totals.expected_hours,
            actual_hours_worked=totals.actual_hours_worked,
            other_deductions=deductions_from_history(history),
        )
        return replace(
            slip,
            employee_id=employee.employee_id,
            tenant_id=period.tenant_id,
            period_start=period.period_start,
            period_end=period.period_end,
            pay_date=pay_date,
        )

    def _fetch_inputs(self, period: PayPeriod, pay_date: date):
        # Independent reads; a failure in any of them propagates from .result().
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="payslip-fetch") as pool:
            records_future = pool.submit(
                self._attendance.get_daily_records,
                employee_id=period.employee_id,
                tenant_id=period.tenant_id,
                start_date=period.period_start,
                end_date=period.period_end,
            )
            policy_future = pool.submit(self._policies.get_working_calendar_policy, period.tenant_id)
            history_future = pool.submit(self._history_for, period, pay_date)

            return records_future.result(), policy_future.result(), history_future.result()

    def _history_for(self, period: PayPeriod, pay_date: date) -> Sequence[PayrollHistoryEntry]:
        if self._history is None:
            return []
        return self._history.list_for_month(
            employee_id=period.employee_id,
            tenant_id=period.tenant_id,
            year=pay_date.year,
            month=pay_date.month,
        )


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _hhmm(hours: float) -> str:
    minutes = int(round(hours * 60))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        policies: PolicyRepository,
        payslips: PayslipService,
        *,
        engine: Optional[HoursReconciliationEngine] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policies = policies
        self._payslips = payslips
        self._engine = engine or HoursReconciliationEngine()

    def build_attendance_report(
        self,
        *,
        tenant_id: str,
        start: date,
        end: date,
        employee_id: Optional[str] = None,
    ) -> ReportData:
        require_date_range(start, end)
        policy = self._policies.get_working_calendar_policy(tenant_id)
        records = self._attendance.list_for_tenant(tenant_id=tenant_id, start_date=start, end_date=end)

        by_employee: dict[str, list[DailyAttendanceRecord]] = defaultdict(list)
        for r in records:
            if employee_id is None or r.employee_id == employee_id:
                by_employee[r.employee_id].append(r)

        names = {e.employee_id: e.name for e in self._employees.list_for_tenant(tenant_id)}

        out_rows: list[dict] = []
        totals: list[tuple[float, dict]] = []
        for emp_id in sorted(by_employee):
            days = self._engine.reconcile_period(by_employee[emp_id], policy, start=start, end=end)
            total_hours = 0.0
            for d in days:
                if d.reason == ReasonCode.NO_RECORD:
                    continue
                total_hours += d.hours
                out_rows.append(
                    {
                        "employee_id": emp_id,
                        "name": names.get(emp_id, "-"),
                        "work_date": d.work_date.strftime("%Y-%m-%d"),
                        "worked_hours": _hhmm(d.hours),
                        "reason": d.reason.value,
                        "needs_adjustment": d.needs_adjustment,
                        "flagged": d.conflicting_rows or bool(d.irregularities),
                    }
                )
            summary_row = {
                "employee_id": emp_id,
                "name": names.get(emp_id, "-"),
                "total_hours": _hhmm(total_hours),
            }
            totals.append((total_hours, summary_row))

        # Sort on the float; "HH:MM" text misorders totals of 100 hours or more.
        totals.sort(key=lambda item: item[0], reverse=True)
        return ReportData(rows=out_rows, summary=[row for _, row in totals])

    def build_statutory_report(
        self,
        *,
        report_type: ReportType,
        tenant_id: str,
        pay_date: date,
        current_role: Role,
        current_employee_id: Optional[str] = None,
    ) -> list[dict]:
        """SSNIT or PAYE rows for the tenant's employees; non-privileged roles only see themselves."""
        employees = list(self._employees.list_for_tenant(tenant_id))
        if not current_role.has_full_report_access:
            if not current_employee_id:
                raise AuthorizationError("You do not have permission to view this report")
            employees = [e for e in employees if e.employee_id == current_employee_id]

        rows: list[dict] = []
        for employee in employees:
            if employee.basic_salary <= 0:
                logger.info("Skipping employee=%s in %s report: salary not set", employee.employee_id, report_type.value)
                continue

            slip = self._payslips.get_payslip(
                employee_id=employee.employee_id,
                tenant_id=tenant_id,
                pay_date=pay_date,
            )
            row = {
                "employee_id": employee.employee_id,
                "name": employee.name,
                "gross_pay": float(slip.gross_pay),
            }
            if report_type == ReportType.SSNIT:
                row.update(
                    {
                        "ssnit_employee": float(slip.ssnit_employee),
                        "ssnit_employer": float(slip.ssnit_employer),
                        "ssnit_tier1": float(slip.ssnit_tier1),
                        "ssnit_tier2": float(slip.ssnit_tier2),
                        "total_ssnit": float(slip.ssnit_employee + slip.ssnit_employer),
                    }
                )
            else:
                row.update(
                    {
                        "annual_gross": float(slip.gross_pay * MONTHS_PER_YEAR),
                        "paye": float(slip.paye),
                    }
                )
            rows.append(row)

        return rows
