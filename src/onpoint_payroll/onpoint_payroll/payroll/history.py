from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .model import Deduction


@dataclass(frozen=True)
class PayrollHistoryEntry:
    """One manual payroll adjustment (bonus, loan repayment, penalty...) for a pay month."""

    employee_id: str
    tenant_id: str
    amount: Decimal
    reason: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_deduction(self) -> bool:
        return self.amount < 0 or "deduction" in (self.reason or "").lower()


def deductions_from_history(entries: Iterable[PayrollHistoryEntry]) -> list[Deduction]:
    out: list[Deduction] = []
    for entry in entries:
        if not entry.is_deduction:
            continue
        out.append(Deduction(description=entry.reason or "Deduction", amount=abs(entry.amount)))
    return out
