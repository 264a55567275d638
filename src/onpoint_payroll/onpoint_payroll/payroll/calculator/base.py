from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Sequence

from ..model import Deduction, PaySlip


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute_pay(
        self,
        *,
        basic_salary: Decimal,
        expected_hours: float,
        actual_hours_worked: Optional[float],
        other_deductions: Sequence[Deduction] = (),
    ) -> PaySlip:
        raise NotImplementedError
