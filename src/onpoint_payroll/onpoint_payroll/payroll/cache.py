from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from ..core.constants import PAYSLIP_CACHE_TTL_SECONDS
from .model import PaySlip

logger = logging.getLogger(__name__)


class PayslipCache:
    """In-process TTL cache of computed payslips keyed by (employee_id, period_key).

    Purely an optimization: a miss (or a forced refresh) recomputes the same
    slip. Two requests racing on one key may both compute; the later put wins.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = PAYSLIP_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[float, PaySlip]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, employee_id: str, period_key: str) -> Optional[PaySlip]:
        key = (str(employee_id), period_key)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("Payslip cache miss %s", key)
                return None

            stored_at, slip = entry
            if self._clock() - stored_at >= self._ttl:
                del self._entries[key]
                logger.debug("Payslip cache expired %s", key)
                return None

        logger.debug("Payslip cache hit %s", key)
        return slip

    def put(self, employee_id: str, period_key: str, slip: PaySlip) -> None:
        with self._lock:
            self._entries[(str(employee_id), period_key)] = (self._clock(), slip)

    def invalidate(self, employee_id: str, period_key: Optional[str] = None) -> int:
        """Drop one entry, or every entry of the employee when no period is given."""
        employee_id = str(employee_id)
        with self._lock:
            if period_key is not None:
                return 1 if self._entries.pop((employee_id, period_key), None) else 0

            keys = [k for k in self._entries if k[0] == employee_id]
            for k in keys:
                del self._entries[k]
            return len(keys)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self._ttl]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
