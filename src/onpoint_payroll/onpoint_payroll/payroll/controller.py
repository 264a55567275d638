from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.enums import ReportType, Role
from ..core.exceptions import (
    AttendanceFetchError,
    AuthorizationError,
    ConfigurationError,
    NotFoundError,
    SalaryNotConfiguredError,
    ValidationError,
)
from ..container import Container

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


def _error(message: str, status: int, **extra):
    body = {"success": False, "error": message}
    body.update(extra)
    return jsonify(body), status


def _optional_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: expected YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payslips/<employee_id>/<pay_date>", methods=["GET"], endpoint="get_payslip")
    def get_payslip(employee_id: str, pay_date: str):
        tenant_id = request.headers.get("X-Tenant-Id", "").strip()
        if not tenant_id:
            return _error("Tenant ID required", 400)

        try:
            parsed_pay_date = parse_iso_date(pay_date)
        except ValueError:
            return _error("Invalid pay date: expected YYYY-MM-DD", 400)

        force_refresh = request.args.get("forceRefresh", "").strip().lower() in _TRUTHY

        try:
            slip = container.payslip_service.get_payslip(
                employee_id=employee_id,
                tenant_id=tenant_id,
                pay_date=parsed_pay_date,
                force_refresh=force_refresh,
                period_start=_optional_date("periodStart"),
                period_end=_optional_date("periodEnd"),
            )
        except SalaryNotConfiguredError as e:
            return _error(str(e), 400, requiresSalarySetup=True)
        except ConfigurationError as e:
            return _error(str(e), 400, requiresConfiguration=True)
        except ValidationError as e:
            return _error(str(e), 400)
        except NotFoundError as e:
            return _error(str(e), 404)
        except AttendanceFetchError as e:
            return _error(str(e), 503)
        except Exception:
            logger.exception("Payslip generation failed employee=%s pay_date=%s", employee_id, pay_date)
            return _error("Failed to generate payslip", 500)

        return jsonify({"success": True, "data": slip.to_dict()}), 200

    @app.route("/api/reports/<report_type>", methods=["GET"], endpoint="get_report")
    def get_report(report_type: str):
        tenant_id = request.headers.get("X-Tenant-Id", "").strip()
        if not tenant_id:
            return _error("Tenant ID required", 400)

        try:
            role = Role(request.headers.get("X-User-Role", Role.EMPLOYEE.value))
        except ValueError:
            role = Role.EMPLOYEE
        current_user = request.headers.get("X-User-Id") or None

        try:
            if report_type == "attendance":
                start = _optional_date("start")
                end = _optional_date("end")
                if not start or not end:
                    return _error("start and end are required", 400)
                employee_id = request.args.get("employeeId") or None
                if not role.has_full_report_access:
                    if not current_user:
                        raise AuthorizationError("You do not have permission to view this report")
                    employee_id = current_user
                data = container.payroll_report_service.build_attendance_report(
                    tenant_id=tenant_id, start=start, end=end, employee_id=employee_id
                )
                return jsonify({"success": True, "data": {"rows": data.rows, "summary": data.summary}}), 200

            try:
                kind = ReportType(report_type)
            except ValueError:
                return _error("Invalid report type. Supported types: ssnit, paye, attendance", 400)

            pay_date = _optional_date("payDate") or date.today()
            rows = container.payroll_report_service.build_statutory_report(
                report_type=kind,
                tenant_id=tenant_id,
                pay_date=pay_date,
                current_role=role,
                current_employee_id=current_user,
            )
        except SalaryNotConfiguredError as e:
            return _error(str(e), 400, requiresSalarySetup=True)
        except ConfigurationError as e:
            return _error(str(e), 400, requiresConfiguration=True)
        except ValidationError as e:
            return _error(str(e), 400)
        except AuthorizationError as e:
            return _error(str(e), 403)
        except NotFoundError as e:
            return _error(str(e), 404)
        except AttendanceFetchError as e:
            return _error(str(e), 503)
        except Exception:
            logger.exception("Report generation failed type=%s tenant=%s", report_type, tenant_id)
            return _error("Failed to generate report", 500)

        return jsonify({"success": True, "data": rows}), 200
