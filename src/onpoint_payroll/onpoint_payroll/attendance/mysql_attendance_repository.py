from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import parse_timestamp
from ..core.enums import AdjustmentStatus, PunchKind
from ..core.exceptions import AttendanceFetchError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, load_json_column
from .model import Adjustment, DailyAttendanceRecord, LegacyFields, Punch
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    log_id, tenant_id, employee_id, work_date,
    clock_in, clock_out, clock_in_2, clock_out_2, punches,
    adjustment_status, adjustment_applied, adjustment_reason,
    requested_clock_in, requested_clock_out, requested_clock_in_2, requested_clock_out_2
"""


def _parse_punch(raw: Any, *, log_id: int) -> Punch:
    if not isinstance(raw, dict):
        logger.warning("clock_logs.log_id=%s: unusable punch entry %r", log_id, raw)
        return Punch(kind=None, timestamp=None)

    kind_text = str(raw.get("type") or "").strip().lower()
    try:
        kind: Optional[PunchKind] = PunchKind(kind_text)
    except ValueError:
        logger.warning("clock_logs.log_id=%s: unknown punch type %r", log_id, raw.get("type"))
        kind = None

    timestamp = parse_timestamp(raw.get("time"))
    if timestamp is None:
        logger.warning("clock_logs.log_id=%s: unparseable punch time %r", log_id, raw.get("time"))

    return Punch(
        kind=kind,
        timestamp=timestamp,
        location=raw.get("location"),
        photo_ref=raw.get("photo"),
        auto_closed=bool(raw.get("auto_closed", False)),
    )


def _dump_punches(punches: Sequence[Punch]) -> str:
    return json.dumps(
        [
            {
                "type": p.kind.value if p.kind else None,
                "time": p.timestamp.isoformat() if p.timestamp else None,
                "location": p.location,
                "photo": p.photo_ref,
                "auto_closed": p.auto_closed,
            }
            for p in punches
        ]
    )


def _to_adjustment(r: dict) -> Optional[Adjustment]:
    applied = bool(r.get("adjustment_applied") or False)
    status_text = r.get("adjustment_status")
    if not status_text and not applied:
        return None

    try:
        status = AdjustmentStatus(status_text) if status_text else AdjustmentStatus.APPROVED
    except ValueError:
        logger.warning("clock_logs.log_id=%s: unknown adjustment status %r", r.get("log_id"), status_text)
        return None

    return Adjustment(
        status=status,
        requested_in=parse_timestamp(r.get("requested_clock_in")),
        requested_out=parse_timestamp(r.get("requested_clock_out")),
        requested_in_2=parse_timestamp(r.get("requested_clock_in_2")),
        requested_out_2=parse_timestamp(r.get("requested_clock_out_2")),
        reason=r.get("adjustment_reason"),
        applied_to_record=applied,
    )


def _to_record(r: dict) -> DailyAttendanceRecord:
    log_id = int(r["log_id"])
    try:
        raw_punches = load_json_column(r.get("punches")) or []
    except (TypeError, ValueError):
        logger.warning("clock_logs.log_id=%s: punches column is not valid JSON", log_id)
        raw_punches = []
    if not isinstance(raw_punches, list):
        raw_punches = []

    return DailyAttendanceRecord(
        record_id=log_id,
        employee_id=str(r["employee_id"]),
        tenant_id=str(r["tenant_id"]),
        work_date=r["work_date"],
        punches=tuple(_parse_punch(p, log_id=log_id) for p in raw_punches),
        legacy=LegacyFields(
            primary_in=parse_timestamp(r.get("clock_in")),
            primary_out=parse_timestamp(r.get("clock_out")),
            secondary_in=parse_timestamp(r.get("clock_in_2")),
            secondary_out=parse_timestamp(r.get("clock_out_2")),
        ),
        adjustment=_to_adjustment(r),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple) -> list[DailyAttendanceRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM clock_logs
                    WHERE {where}
                    ORDER BY work_date ASC, log_id ASC
                    """,
                    params,
                )
                rows = fetchall(cur)
        except mysql.connector.Error as exc:
            logger.error("Attendance fetch failed: %s", exc)
            raise AttendanceFetchError("Attendance store is unavailable") from exc
        return [_to_record(r) for r in rows]

    def get_daily_records(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[DailyAttendanceRecord]:
        clauses = ["employee_id=%s", "tenant_id=%s"]
        params: list[object] = [employee_id, tenant_id]

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        return self._select(" AND ".join(clauses), tuple(params))

    def list_for_tenant(self, *, tenant_id: str, start_date: date, end_date: date) -> Sequence[DailyAttendanceRecord]:
        return self._select("tenant_id=%s AND work_date BETWEEN %s AND %s", (tenant_id, start_date, end_date))

    def list_for_date(self, *, work_date: date) -> Sequence[DailyAttendanceRecord]:
        return self._select("work_date=%s", (work_date,))

    def create_record(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        work_date: date,
        punches: Sequence[Punch],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO clock_logs(tenant_id, employee_id, work_date, punches)
                VALUES(%s,%s,%s,%s)
                """,
                (tenant_id, employee_id, work_date, _dump_punches(punches)),
            )
            return int(cur.lastrowid)

    def replace_punches(self, *, record_id: int, punches: Sequence[Punch]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE clock_logs SET punches=%s WHERE log_id=%s",
                (_dump_punches(punches), int(record_id)),
            )
            return cur.rowcount > 0
