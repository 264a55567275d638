from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciliation import HoursReconciliationEngine
from .attendance.service import AttendanceService
from .core.constants import AUTO_CLOSE_HOUR, PAYSLIP_CACHE_TTL_SECONDS
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .payroll.aggregator import PeriodAggregator
from .payroll.cache import PayslipCache
from .payroll.calculator.standard_calculator import StandardPayCalculator
from .payroll.mysql_payroll_history_repository import MySQLPayrollHistoryRepository
from .payroll.service import PayrollReportService, PayslipService
from .policies.mysql_policy_repository import MySQLPolicyRepository


@dataclass(frozen=True)
class Container:
    attendance_service: AttendanceService
    payslip_service: PayslipService
    payroll_report_service: PayrollReportService
    payslip_cache: PayslipCache


def build_container(
    *,
    db_config: dict,
    cache_ttl_seconds: float = PAYSLIP_CACHE_TTL_SECONDS,
    auto_close_hour: int = AUTO_CLOSE_HOUR,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    policies_repo = MySQLPolicyRepository(conn)
    history_repo = MySQLPayrollHistoryRepository(conn)

    engine = HoursReconciliationEngine()
    payslip_cache = PayslipCache(ttl_seconds=cache_ttl_seconds)

    attendance_service = AttendanceService(
        attendance_repo,
        policies_repo,
        engine=engine,
        auto_close_hour=auto_close_hour,
    )
    payslip_service = PayslipService(
        employees_repo,
        attendance_repo,
        policies_repo,
        history_repo,
        aggregator=PeriodAggregator(engine=engine),
        calculator=StandardPayCalculator(),
        cache=payslip_cache,
    )
    payroll_report_service = PayrollReportService(
        attendance_repo,
        employees_repo,
        policies_repo,
        payslip_service,
        engine=engine,
    )

    return Container(
        attendance_service=attendance_service,
        payslip_service=payslip_service,
        payroll_report_service=payroll_report_service,
        payslip_cache=payslip_cache,
    )
