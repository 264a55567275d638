from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.onpoint_payroll.onpoint_payroll.attendance.service import AttendanceService
from src.onpoint_payroll.onpoint_payroll.container import Container
from src.onpoint_payroll.onpoint_payroll.employees.model import Employee
from src.onpoint_payroll.onpoint_payroll.main import create_app
from src.onpoint_payroll.onpoint_payroll.payroll.cache import PayslipCache
from src.onpoint_payroll.onpoint_payroll.payroll.service import PayrollReportService, PayslipService
from src.onpoint_payroll.onpoint_payroll.policies.model import WorkingCalendarPolicy

TENANT = {"X-Tenant-Id": "acme"}


@pytest.fixture
def client(monkeypatch, attendance_repo, employees_repo, policies_repo, history_repo):
    monkeypatch.setenv("APP_ENV", "testing")

    cache = PayslipCache()
    payslips = PayslipService(employees_repo, attendance_repo, policies_repo, history_repo, cache=cache)
    container = Container(
        attendance_service=AttendanceService(attendance_repo, policies_repo),
        payslip_service=payslips,
        payroll_report_service=PayrollReportService(attendance_repo, employees_repo, policies_repo, payslips),
        payslip_cache=cache,
    )
    app = create_app(container=container)
    return app.test_client()


def test_get_payslip(client):
    resp = client.get("/api/payslips/emp-1/2026-01-31", headers=TENANT)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    data = body["data"]
    assert data["fullSalaryMode"] is True
    assert data["grossPay"] == 5200.0
    assert data["paye"] == 723.63
    assert data["netPay"] == 4190.38
    assert data["payPeriodStart"] == "2026-01-01"
    assert len(data["payeBreakdown"]) == 5


def test_payslip_accepts_full_iso_timestamp(client):
    resp = client.get("/api/payslips/emp-1/2026-01-31T00:00:00Z", headers=TENANT)

    assert resp.status_code == 200


def test_payslip_requires_tenant(client):
    resp = client.get("/api/payslips/emp-1/2026-01-31")

    assert resp.status_code == 400


def test_payslip_rejects_bad_date(client):
    resp = client.get("/api/payslips/emp-1/31-01-2026", headers=TENANT)

    assert resp.status_code == 400


def test_salary_not_set_is_a_distinct_400(client, employees_repo):
    employees_repo.add(Employee(employee_id="emp-9", tenant_id="acme", name="No Salary", basic_salary=Decimal("0")))

    resp = client.get("/api/payslips/emp-9/2026-01-31", headers=TENANT)

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["requiresSalarySetup"] is True
    assert "salary not set" in body["error"]


def test_unknown_employee_is_404(client):
    resp = client.get("/api/payslips/nobody/2026-01-31", headers=TENANT)

    assert resp.status_code == 404


def test_store_outage_is_503(client, attendance_repo):
    attendance_repo.fail = True

    resp = client.get("/api/payslips/emp-1/2026-01-31", headers=TENANT)

    assert resp.status_code == 503


def test_force_refresh_bypasses_cache(client, attendance_repo):
    client.get("/api/payslips/emp-1/2026-01-31", headers=TENANT)
    client.get("/api/payslips/emp-1/2026-01-31", headers=TENANT)
    client.get("/api/payslips/emp-1/2026-01-31?forceRefresh=true", headers=TENANT)

    assert attendance_repo.calls == 2


def test_ssnit_report_for_admin(client):
    resp = client.get(
        "/api/reports/ssnit?payDate=2026-01-31",
        headers={**TENANT, "X-User-Id": "emp-admin", "X-User-Role": "Admin"},
    )

    assert resp.status_code == 200
    assert len(resp.get_json()["data"]) == 2


def test_statutory_report_surfaces_configuration_error(client, policies_repo, attendance_repo, legacy_record):
    policies_repo.policy = WorkingCalendarPolicy(tenant_id="acme", working_hours_per_day=0.0)
    attendance_repo.records.append(legacy_record(date(2026, 1, 12), ("08:00", "17:00")))

    resp = client.get(
        "/api/reports/ssnit?payDate=2026-01-31",
        headers={**TENANT, "X-User-Id": "emp-admin", "X-User-Role": "Admin"},
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["requiresConfiguration"] is True


def test_report_for_employee_role_is_scoped(client):
    resp = client.get(
        "/api/reports/paye?payDate=2026-01-31",
        headers={**TENANT, "X-User-Id": "emp-1", "X-User-Role": "Employee"},
    )

    rows = resp.get_json()["data"]
    assert [r["employee_id"] for r in rows] == ["emp-1"]


def test_unknown_report_type(client):
    resp = client.get("/api/reports/bonus", headers=TENANT)

    assert resp.status_code == 400


def test_attendance_report_requires_range(client):
    resp = client.get("/api/reports/attendance", headers={**TENANT, "X-User-Role": "Admin"})

    assert resp.status_code == 400


def test_record_punch_and_read_hours(client):
    created = client.post(
        "/api/time-punches",
        json={"employeeId": "emp-1", "type": "in", "timestamp": "2026-01-12T08:00:00"},
        headers=TENANT,
    )
    client.post(
        "/api/time-punches",
        json={"employeeId": "emp-1", "type": "out", "timestamp": "2026-01-12T12:00:00"},
        headers=TENANT,
    )
    hours = client.get("/api/attendance/emp-1/hours?start=2026-01-12&end=2026-01-12", headers=TENANT)

    assert created.status_code == 201
    data = hours.get_json()["data"]
    assert data["totalHours"] == 4.0
    assert data["days"][0]["reason"] == "VALID_PUNCHES"


def test_double_clock_in_is_400(client):
    payload = {"employeeId": "emp-1", "type": "in", "timestamp": "2026-01-12T08:00:00"}
    client.post("/api/time-punches", json=payload, headers=TENANT)

    resp = client.post("/api/time-punches", json=payload, headers=TENANT)

    assert resp.status_code == 400
    assert "Already clocked in" in resp.get_json()["error"]
