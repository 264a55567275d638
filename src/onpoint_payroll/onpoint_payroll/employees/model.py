from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as payroll sees it.

    Note: plain data object (no DB access code).
    """

    employee_id: str
    tenant_id: str
    name: str
    basic_salary: Decimal
    role: Role = Role.EMPLOYEE
    mobile_money_number: Optional[str] = None
