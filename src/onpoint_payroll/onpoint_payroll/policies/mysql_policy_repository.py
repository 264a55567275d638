from __future__ import annotations

import logging

import mysql.connector

from ..core.constants import DEFAULT_WORKING_WEEKDAYS
from ..core.exceptions import AttendanceFetchError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import WorkingCalendarPolicy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


def _parse_weekdays(value) -> frozenset[int]:
    """'0,1,2,3,4' (Monday=0) -> frozenset; blank or invalid -> Mon..Fri."""
    if not value:
        return DEFAULT_WORKING_WEEKDAYS
    try:
        days = frozenset(int(part) for part in str(value).split(",") if part.strip())
    except ValueError:
        logger.warning("Invalid working_weekdays value %r, using Mon-Fri", value)
        return DEFAULT_WORKING_WEEKDAYS
    if not days or not days <= set(range(7)):
        return DEFAULT_WORKING_WEEKDAYS
    return days


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_working_calendar_policy(self, tenant_id: str) -> WorkingCalendarPolicy:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT tenant_id, working_hours_per_day, break_duration_minutes, working_weekdays
                    FROM tenant_settings
                    WHERE tenant_id=%s
                    """,
                    (tenant_id,),
                )
                row = fetchone(cur)
        except mysql.connector.Error as exc:
            logger.error("Policy fetch failed for tenant=%s: %s", tenant_id, exc)
            raise AttendanceFetchError("Tenant settings are unavailable") from exc

        if not row:
            return WorkingCalendarPolicy(tenant_id=str(tenant_id))

        defaults = WorkingCalendarPolicy(tenant_id=str(tenant_id))
        hours = row.get("working_hours_per_day")
        break_minutes = row.get("break_duration_minutes")
        return WorkingCalendarPolicy(
            tenant_id=str(row["tenant_id"]),
            working_hours_per_day=float(hours) if hours is not None else defaults.working_hours_per_day,
            break_duration_minutes=int(break_minutes) if break_minutes is not None else defaults.break_duration_minutes,
            working_weekdays=_parse_weekdays(row.get("working_weekdays")),
        )
