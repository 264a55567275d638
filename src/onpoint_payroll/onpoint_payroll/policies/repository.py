from __future__ import annotations

from typing import Protocol

from .model import WorkingCalendarPolicy


class PolicyRepository(Protocol):
    def get_working_calendar_policy(self, tenant_id: str) -> WorkingCalendarPolicy:
        """Tenant policy; implementations return defaults when the tenant has no settings."""

        raise NotImplementedError
