from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_timestamp
from ..core.exceptions import AttendanceFetchError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _day_to_dict(day) -> dict:
    return {
        "date": day.work_date.isoformat(),
        "hours": round(day.hours, 2),
        "reason": day.reason.value,
        "provisional": day.provisional,
        "needsAdjustment": day.needs_adjustment,
        "conflictingRows": day.conflicting_rows,
        "duplicatesDropped": day.duplicates_dropped,
        "irregularities": list(day.irregularities),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-punches", methods=["POST"], endpoint="record_punch")
    def record_punch():
        tenant_id = request.headers.get("X-Tenant-Id", "").strip()
        if not tenant_id:
            return _error("Tenant ID required", 400)

        data = request.get_json(silent=True) or {}
        employee_id = str(data.get("employeeId") or "")

        at = None
        if data.get("timestamp"):
            at = parse_timestamp(data["timestamp"])
            if at is None:
                return _error("Invalid timestamp", 400)

        try:
            record_id = container.attendance_service.record_punch(
                employee_id=employee_id,
                tenant_id=tenant_id,
                kind=data.get("type"),
                at=at,
                location=data.get("location"),
                photo_ref=data.get("photoUrl"),
            )
        except ValidationError as e:
            return _error(str(e), 400)
        except AttendanceFetchError as e:
            return _error(str(e), 503)
        except Exception:
            logger.exception("Recording punch failed employee=%s", employee_id)
            return _error("Failed to record punch", 500)

        return jsonify({"success": True, "data": {"recordId": record_id}}), 201

    @app.route("/api/attendance/<employee_id>/hours", methods=["GET"], endpoint="daily_hours")
    def daily_hours(employee_id: str):
        tenant_id = request.headers.get("X-Tenant-Id", "").strip()
        if not tenant_id:
            return _error("Tenant ID required", 400)

        try:
            start = parse_iso_date(request.args.get("start", ""))
            end = parse_iso_date(request.args.get("end", ""))
        except ValueError:
            return _error("start and end must be YYYY-MM-DD", 400)

        try:
            days = container.attendance_service.get_daily_hours(
                employee_id=employee_id,
                tenant_id=tenant_id,
                start=start,
                end=end,
            )
        except ValidationError as e:
            return _error(str(e), 400)
        except AttendanceFetchError as e:
            return _error(str(e), 503)

        total = sum(d.hours for d in days)
        return jsonify(
            {
                "success": True,
                "data": {"days": [_day_to_dict(d) for d in days], "totalHours": round(total, 2)},
            }
        ), 200
