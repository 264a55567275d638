"""Example: compute a payslip with the service layer directly (no Flask, no database).

In-memory repositories stand in for MySQL so the example runs anywhere.
"""

from datetime import date, datetime
from decimal import Decimal

from src.onpoint_payroll.onpoint_payroll.attendance.model import DailyAttendanceRecord, LegacyFields
from src.onpoint_payroll.onpoint_payroll.employees.model import Employee
from src.onpoint_payroll.onpoint_payroll.payroll.cache import PayslipCache
from src.onpoint_payroll.onpoint_payroll.payroll.service import PayslipService
from src.onpoint_payroll.onpoint_payroll.policies.model import WorkingCalendarPolicy


class Employees:
    def __init__(self, *employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(employee_id)

    def list_for_tenant(self, tenant_id):
        return [e for e in self._by_id.values() if e.tenant_id == tenant_id]


class Attendance:
    def __init__(self, records):
        self._records = records

    def get_daily_records(self, *, employee_id, tenant_id, start_date=None, end_date=None):
        return [
            r
            for r in self._records
            if r.employee_id == employee_id
            and r.tenant_id == tenant_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]


class Policies:
    def get_working_calendar_policy(self, tenant_id):
        return WorkingCalendarPolicy(tenant_id=tenant_id)


def main():
    employee = Employee(employee_id="emp-1", tenant_id="acme", name="Ama Mensah", basic_salary=Decimal("5200"))
    records = [
        DailyAttendanceRecord(
            employee_id="emp-1",
            tenant_id="acme",
            work_date=date(2026, 1, day),
            legacy=LegacyFields(
                primary_in=datetime(2026, 1, day, 8, 0),
                primary_out=datetime(2026, 1, day, 17, 0),
            ),
        )
        for day in (5, 6, 7)
    ]

    service = PayslipService(Employees(employee), Attendance(records), Policies(), cache=PayslipCache())
    slip = service.get_payslip(employee_id="emp-1", tenant_id="acme", pay_date=date(2026, 1, 31))
    for key, value in slip.to_dict().items():
        print(f"{key}: {value}")


if __name__ == "__main__":
    main()
