from datetime import date

import pytest

from src.onpoint_payroll.onpoint_payroll.payroll.aggregator import PeriodAggregator, count_working_days
from src.onpoint_payroll.onpoint_payroll.payroll.model import PayPeriod
from src.onpoint_payroll.onpoint_payroll.policies.model import WorkingCalendarPolicy

JANUARY = PayPeriod.for_pay_date(employee_id="emp-1", tenant_id="acme", pay_date=date(2026, 1, 31))


def test_pay_period_defaults_to_calendar_month():
    assert JANUARY.period_start == date(2026, 1, 1)
    assert JANUARY.period_end == date(2026, 1, 31)
    assert JANUARY.key == "2026-01-01:2026-01-31"


def test_count_working_days_mon_to_fri(policy):
    assert count_working_days(date(2026, 1, 1), date(2026, 1, 31), policy) == 22


def test_count_working_days_custom_week():
    six_day_week = WorkingCalendarPolicy(tenant_id="acme", working_weekdays=frozenset(range(6)))

    assert count_working_days(date(2026, 1, 1), date(2026, 1, 31), six_day_week) == 27


def test_no_records_means_no_data_not_zero(policy):
    totals = PeriodAggregator().aggregate([], JANUARY, policy)

    assert totals.actual_hours_worked is None
    assert not totals.has_data
    assert totals.expected_hours == pytest.approx(176.0)
    assert len(totals.missing_days) == 22


def test_actual_hours_sum_reconciled_days(policy, legacy_record, punch_record):
    records = [
        legacy_record(date(2026, 1, 5), ("08:00", "17:00")),
        punch_record(date(2026, 1, 6), ("in", "08:00"), ("out", "12:00")),
    ]

    totals = PeriodAggregator().aggregate(records, JANUARY, policy)

    assert totals.actual_hours_worked == pytest.approx(12.0)
    assert len(totals.days) == 31
    assert date(2026, 1, 5) not in totals.missing_days
    assert len(totals.missing_days) == 20


def test_excluded_days_still_count_as_data(policy, legacy_record):
    records = [legacy_record(date(2026, 1, 5), ("08:00", "12:00"), ("13:00", "15:00"))]

    totals = PeriodAggregator().aggregate(records, JANUARY, policy)

    # Out-of-tolerance day contributes zero, but the employee has data.
    assert totals.actual_hours_worked == 0.0


def test_rows_of_other_employees_or_dates_are_ignored(policy, legacy_record):
    records = [
        legacy_record(date(2026, 1, 5), ("08:00", "17:00"), employee_id="emp-2"),
        legacy_record(date(2026, 2, 2), ("08:00", "17:00")),
    ]

    totals = PeriodAggregator().aggregate(records, JANUARY, policy)

    assert totals.actual_hours_worked is None


def test_expected_hours_follow_policy_hours_per_day(legacy_record):
    short_days = WorkingCalendarPolicy(tenant_id="acme", working_hours_per_day=7.5)

    totals = PeriodAggregator().aggregate([], JANUARY, short_days)

    assert totals.expected_hours == pytest.approx(165.0)
