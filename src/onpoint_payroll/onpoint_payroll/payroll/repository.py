from __future__ import annotations

from typing import Protocol, Sequence

from .history import PayrollHistoryEntry


class PayrollHistoryRepository(Protocol):
    def list_for_month(
        self,
        *,
        employee_id: str,
        tenant_id: str,
        year: int,
        month: int,
    ) -> Sequence[PayrollHistoryEntry]:
        raise NotImplementedError
