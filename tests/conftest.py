from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.onpoint_payroll.onpoint_payroll.attendance.model import (
    Adjustment,
    DailyAttendanceRecord,
    LegacyFields,
    Punch,
)
from src.onpoint_payroll.onpoint_payroll.core.enums import PunchKind, Role
from src.onpoint_payroll.onpoint_payroll.core.exceptions import AttendanceFetchError
from src.onpoint_payroll.onpoint_payroll.employees.model import Employee
from src.onpoint_payroll.onpoint_payroll.policies.model import WorkingCalendarPolicy

TENANT = "acme"


def at(day: date, hhmm: str) -> datetime:
    hour, minute = (int(x) for x in hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hour, minute)


class InMemoryAttendance:
    def __init__(self, records=None):
        self.records: list[DailyAttendanceRecord] = list(records or [])
        self.fail = False
        self.calls = 0
        self._id = 100

    def get_daily_records(self, *, employee_id, tenant_id, start_date=None, end_date=None):
        self.calls += 1
        if self.fail:
            raise AttendanceFetchError("Attendance store is unavailable")
        return [
            r
            for r in self.records
            if r.employee_id == employee_id
            and r.tenant_id == tenant_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]

    def list_for_tenant(self, *, tenant_id, start_date, end_date):
        return [r for r in self.records if r.tenant_id == tenant_id and start_date <= r.work_date <= end_date]

    def list_for_date(self, *, work_date):
        return [r for r in self.records if r.work_date == work_date]

    def create_record(self, *, employee_id, tenant_id, work_date, punches):
        self._id += 1
        self.records.append(
            DailyAttendanceRecord(
                employee_id=employee_id,
                tenant_id=tenant_id,
                work_date=work_date,
                punches=tuple(punches),
                record_id=self._id,
            )
        )
        return self._id

    def replace_punches(self, *, record_id, punches):
        for i, r in enumerate(self.records):
            if r.record_id == record_id:
                self.records[i] = DailyAttendanceRecord(
                    employee_id=r.employee_id,
                    tenant_id=r.tenant_id,
                    work_date=r.work_date,
                    punches=tuple(punches),
                    legacy=r.legacy,
                    adjustment=r.adjustment,
                    record_id=r.record_id,
                )
                return True
        return False


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.employee_id] = employee

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_for_tenant(self, tenant_id: str):
        return [e for e in self._by_id.values() if e.tenant_id == tenant_id]


class InMemoryPolicies:
    def __init__(self, policy: Optional[WorkingCalendarPolicy] = None):
        self.policy = policy

    def get_working_calendar_policy(self, tenant_id: str) -> WorkingCalendarPolicy:
        return self.policy or WorkingCalendarPolicy(tenant_id=tenant_id)


class InMemoryHistory:
    def __init__(self, entries=None):
        self.entries = list(entries or [])

    def list_for_month(self, *, employee_id, tenant_id, year, month):
        return [e for e in self.entries if e.employee_id == employee_id and e.tenant_id == tenant_id]


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday afternoon.
    return datetime(2026, 1, 14, 15, 30)


@pytest.fixture
def policy() -> WorkingCalendarPolicy:
    return WorkingCalendarPolicy(tenant_id=TENANT)


@pytest.fixture
def legacy_record():
    """legacy_record(day, ("08:00", "17:00"), [("13:00", "17:00")], adjustment=...)"""

    def _make(day: date, first=None, second=None, *, adjustment: Optional[Adjustment] = None, employee_id="emp-1"):
        first = first or (None, None)
        second = second or (None, None)

        def ts(value):
            return at(day, value) if value else None

        return DailyAttendanceRecord(
            employee_id=employee_id,
            tenant_id=TENANT,
            work_date=day,
            legacy=LegacyFields(
                primary_in=ts(first[0]),
                primary_out=ts(first[1]),
                secondary_in=ts(second[0]),
                secondary_out=ts(second[1]),
            ),
            adjustment=adjustment,
        )

    return _make


@pytest.fixture
def punch_record():
    """punch_record(day, ("in", "08:00"), ("out", "12:00"), ...)"""

    def _make(day: date, *events, employee_id="emp-1", record_id=None):
        return DailyAttendanceRecord(
            employee_id=employee_id,
            tenant_id=TENANT,
            work_date=day,
            punches=tuple(Punch(kind=PunchKind(kind), timestamp=at(day, hhmm)) for kind, hhmm in events),
            record_id=record_id,
        )

    return _make


@pytest.fixture
def employee() -> Employee:
    return Employee(employee_id="emp-1", tenant_id=TENANT, name="Ama Mensah", basic_salary=Decimal("5200"))


@pytest.fixture
def admin() -> Employee:
    return Employee(
        employee_id="emp-admin",
        tenant_id=TENANT,
        name="Kofi Admin",
        basic_salary=Decimal("7000"),
        role=Role.ADMIN,
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def employees_repo(employee, admin) -> InMemoryEmployees:
    return InMemoryEmployees(employee, admin)


@pytest.fixture
def policies_repo() -> InMemoryPolicies:
    return InMemoryPolicies()


@pytest.fixture
def history_repo() -> InMemoryHistory:
    return InMemoryHistory()
