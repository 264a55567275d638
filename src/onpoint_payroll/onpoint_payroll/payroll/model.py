from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.model import DayHours
from ..common.datetime_utils import month_bounds
from .tax import BandTax


@dataclass(frozen=True)
class PayPeriod:
    employee_id: str
    tenant_id: str
    period_start: date
    period_end: date

    @classmethod
    def for_pay_date(cls, *, employee_id: str, tenant_id: str, pay_date: date) -> "PayPeriod":
        """Default period: the calendar month containing the pay date."""
        start, end = month_bounds(pay_date)
        return cls(employee_id=employee_id, tenant_id=tenant_id, period_start=start, period_end=end)

    @property
    def key(self) -> str:
        return f"{self.period_start.isoformat()}:{self.period_end.isoformat()}"


@dataclass(frozen=True)
class PeriodTotals:
    """Aggregated hours for a pay period.

    `actual_hours_worked` is None when the employee has no attendance rows at
    all in the period ("no data"), which is different from 0.0 hours.
    """

    actual_hours_worked: Optional[float]
    expected_hours: float
    working_days: int
    days: tuple[DayHours, ...] = ()
    missing_days: tuple[date, ...] = ()

    @property
    def has_data(self) -> bool:
        return self.actual_hours_worked is not None


@dataclass(frozen=True)
class Deduction:
    description: str
    amount: Decimal
    # Informational lines are shown on the slip but never subtracted.
    informational: bool = False

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": float(self.amount),
            "informational": self.informational,
        }


@dataclass(frozen=True)
class PaySlip:
    """Derived payslip. Monetary fields are already rounded to 2 decimal places."""

    basic_salary: Decimal
    expected_hours: float
    actual_hours_worked: Optional[float]
    hourly_rate: Decimal
    gross_pay: Decimal
    ssnit_employee: Decimal
    paye: Decimal
    other_deductions: tuple[Deduction, ...]
    total_deductions: Decimal
    net_pay: Decimal
    ssnit_employer: Decimal
    ssnit_tier1: Decimal
    ssnit_tier2: Decimal
    paye_breakdown: tuple[BandTax, ...] = ()
    employee_id: Optional[str] = None
    tenant_id: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    pay_date: Optional[date] = None

    @property
    def full_salary_mode(self) -> bool:
        return self.actual_hours_worked is None

    def to_dict(self) -> dict:
        def iso(value: Optional[date]) -> Optional[str]:
            return value.isoformat() if value else None

        return {
            "id": f"{self.employee_id}_{iso(self.pay_date)}" if self.employee_id else None,
            "userId": self.employee_id,
            "tenantId": self.tenant_id,
            "payPeriodStart": iso(self.period_start),
            "payPeriodEnd": iso(self.period_end),
            "payDate": iso(self.pay_date),
            "basicSalary": float(self.basic_salary),
            "expectedHoursThisMonth": round(self.expected_hours, 2),
            "actualHoursWorked": None if self.actual_hours_worked is None else round(self.actual_hours_worked, 2),
            "fullSalaryMode": self.full_salary_mode,
            "hourlyRate": float(self.hourly_rate),
            "grossPay": float(self.gross_pay),
            "ssnitEmployee": float(self.ssnit_employee),
            "paye": float(self.paye),
            "payeBreakdown": [band.to_dict() for band in self.paye_breakdown],
            "otherDeductions": [d.to_dict() for d in self.other_deductions],
            "totalDeductions": float(self.total_deductions),
            "netPay": float(self.net_pay),
            "ssnitEmployer": float(self.ssnit_employer),
            "ssnitTier1": float(self.ssnit_tier1),
            "ssnitTier2": float(self.ssnit_tier2),
        }
