from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Sequence

import mysql.connector

from ..core.exceptions import AttendanceFetchError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .history import PayrollHistoryEntry
from .repository import PayrollHistoryRepository

logger = logging.getLogger(__name__)


def _to_entry(row: dict) -> PayrollHistoryEntry:
    try:
        amount = Decimal(str(row.get("amount") or 0))
    except InvalidOperation:
        logger.warning("payroll_history.id=%s: unparseable amount %r", row.get("id"), row.get("amount"))
        amount = Decimal("0")

    return PayrollHistoryEntry(
        employee_id=str(row["employee_id"]),
        tenant_id=str(row["tenant_id"]),
        amount=amount,
        reason=row.get("reason"),
        status=row.get("status"),
    )


class MySQLPayrollHistoryRepository(PayrollHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_month(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        year: int,
        month: int,
    ) -> Sequence[PayrollHistoryEntry]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT id, employee_id, tenant_id, amount, reason, status
                    FROM payroll_history
                    WHERE employee_id=%s AND tenant_id=%s
                      AND YEAR(created_at)=%s AND MONTH(created_at)=%s
                    ORDER BY created_at ASC, id ASC
                    """,
                    (employee_id, tenant_id, int(year), int(month)),
                )
                rows = fetchall(cur)
        except mysql.connector.Error as exc:
            logger.error("Payroll history fetch failed: %s", exc)
            raise AttendanceFetchError("Payroll history store is unavailable") from exc
        return [_to_entry(r) for r in rows]
