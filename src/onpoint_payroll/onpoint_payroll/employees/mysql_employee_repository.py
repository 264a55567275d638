from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def _to_salary(value) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        logger.warning("Unparseable basic_salary %r treated as unset", value)
        return Decimal("0")


def _to_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        return Role.EMPLOYEE


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=str(row["employee_id"]),
        tenant_id=str(row["tenant_id"]),
        name=row["name"],
        basic_salary=_to_salary(row.get("basic_salary")),
        role=_to_role(row.get("role")),
        mobile_money_number=row.get("mobile_money_number"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, tenant_id, name, basic_salary, role, mobile_money_number
                FROM employees
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return _to_employee(row)

    def list_for_tenant(self, tenant_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, tenant_id, name, basic_salary, role, mobile_money_number
                FROM employees
                WHERE tenant_id=%s
                ORDER BY name ASC
                """,
                (tenant_id,),
            )
            return [_to_employee(r) for r in fetchall(cur)]
