from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.onpoint_payroll.onpoint_payroll.core.exceptions import (
    AttendanceFetchError,
    ConfigurationError,
    NotFoundError,
    SalaryNotConfiguredError,
    ValidationError,
)
from src.onpoint_payroll.onpoint_payroll.employees.model import Employee
from src.onpoint_payroll.onpoint_payroll.payroll.cache import PayslipCache
from src.onpoint_payroll.onpoint_payroll.payroll.history import PayrollHistoryEntry
from src.onpoint_payroll.onpoint_payroll.payroll.service import PayslipService
from src.onpoint_payroll.onpoint_payroll.policies.model import WorkingCalendarPolicy

PAY_DATE = date(2026, 1, 31)


@pytest.fixture
def cache() -> PayslipCache:
    return PayslipCache()


@pytest.fixture
def service(employees_repo, attendance_repo, policies_repo, history_repo, cache) -> PayslipService:
    return PayslipService(employees_repo, attendance_repo, policies_repo, history_repo, cache=cache)


@pytest.fixture
def two_full_days(attendance_repo, punch_record):
    for day in (5, 6):
        attendance_repo.records.append(
            punch_record(date(2026, 1, day), ("in", "08:00"), ("out", "12:00"), ("in", "13:00"), ("out", "17:00"))
        )


def test_no_attendance_gives_full_salary(service):
    slip = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert slip.actual_hours_worked is None
    assert slip.gross_pay == Decimal("5200.00")
    assert slip.paye == Decimal("723.63")
    assert slip.net_pay == Decimal("4190.38")
    assert slip.period_start == date(2026, 1, 1)
    assert slip.to_dict()["id"] == "emp-1_2026-01-31"


def test_gross_is_prorated_from_attendance(service, two_full_days):
    slip = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert slip.actual_hours_worked == pytest.approx(16.0)
    assert slip.expected_hours == pytest.approx(176.0)
    assert slip.gross_pay == Decimal("472.73")


def test_second_request_is_served_from_cache(service, attendance_repo, two_full_days):
    first = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)
    second = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert second is first
    assert attendance_repo.calls == 1


def test_force_refresh_recomputes_and_replaces_entry(service, attendance_repo, cache, two_full_days, punch_record):
    service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)
    attendance_repo.records.append(
        punch_record(date(2026, 1, 7), ("in", "08:00"), ("out", "12:00"), ("in", "13:00"), ("out", "17:00"))
    )

    stale = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)
    fresh = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE, force_refresh=True)
    after = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert stale.actual_hours_worked == pytest.approx(16.0)
    assert fresh.actual_hours_worked == pytest.approx(24.0)
    assert after is fresh
    assert attendance_repo.calls == 2


def test_result_is_identical_with_or_without_cache(employees_repo, attendance_repo, policies_repo, two_full_days):
    cached = PayslipService(employees_repo, attendance_repo, policies_repo, cache=PayslipCache())
    uncached = PayslipService(employees_repo, attendance_repo, policies_repo)

    a = cached.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)
    b = uncached.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert a.to_dict() == b.to_dict()


def test_missing_salary_is_reported_before_any_fetch(service, employees_repo, attendance_repo):
    employees_repo.add(Employee(employee_id="emp-9", tenant_id="acme", name="No Salary", basic_salary=Decimal("0")))

    with pytest.raises(SalaryNotConfiguredError) as exc:
        service.get_payslip(employee_id="emp-9", tenant_id="acme", pay_date=PAY_DATE)

    assert exc.value.employee_id == "emp-9"
    assert attendance_repo.calls == 0


@pytest.mark.parametrize("employee_id, tenant_id", [("nobody", "acme"), ("emp-1", "other-tenant")])
def test_unknown_employee_or_foreign_tenant(service, employee_id, tenant_id):
    with pytest.raises(NotFoundError):
        service.get_payslip(employee_id=employee_id, tenant_id=tenant_id, pay_date=PAY_DATE)


def test_fetch_failure_is_not_treated_as_no_data(service, attendance_repo, cache):
    attendance_repo.fail = True

    with pytest.raises(AttendanceFetchError):
        service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert len(cache) == 0


def test_zero_working_days_with_attendance_is_configuration_error(service, policies_repo, two_full_days):
    policies_repo.policy = WorkingCalendarPolicy(tenant_id="acme", working_weekdays=frozenset())

    with pytest.raises(ConfigurationError):
        service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)


def test_history_deductions_are_subtracted(service, history_repo):
    history_repo.entries = [
        PayrollHistoryEntry(employee_id="emp-1", tenant_id="acme", amount=Decimal("-100"), reason="Loan repayment"),
        PayrollHistoryEntry(employee_id="emp-1", tenant_id="acme", amount=Decimal("50"), reason="Uniform deduction"),
        PayrollHistoryEntry(employee_id="emp-1", tenant_id="acme", amount=Decimal("300"), reason="Bonus"),
    ]

    slip = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE)

    assert [d.amount for d in slip.other_deductions] == [Decimal("100"), Decimal("50")]
    assert slip.total_deductions == Decimal("1159.63")
    assert slip.net_pay == Decimal("4040.38")


def test_custom_pay_period(service, two_full_days):
    slip = service.get_payslip(
        employee_id="emp-1",
        tenant_id="acme",
        pay_date=PAY_DATE,
        period_start=date(2026, 1, 5),
        period_end=date(2026, 1, 9),
    )

    assert slip.expected_hours == pytest.approx(40.0)
    assert slip.actual_hours_worked == pytest.approx(16.0)
    assert slip.gross_pay == Decimal("2080.00")


def test_custom_pay_period_needs_both_bounds(service):
    with pytest.raises(ValidationError):
        service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=PAY_DATE, period_start=date(2026, 1, 5))
