from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import AdjustmentStatus, PunchKind, ReasonCode


@dataclass(frozen=True)
class Punch:
    """One clock event. `kind`/`timestamp` are None when the stored value was unusable."""

    kind: Optional[PunchKind]
    timestamp: Optional[datetime]
    location: Optional[str] = None
    photo_ref: Optional[str] = None
    auto_closed: bool = False


@dataclass(frozen=True)
class LegacyFields:
    """Old schema: one in/out pair, plus a second pair for lunch-broken days."""

    primary_in: Optional[datetime] = None
    primary_out: Optional[datetime] = None
    secondary_in: Optional[datetime] = None
    secondary_out: Optional[datetime] = None

    @property
    def has_secondary(self) -> bool:
        return self.secondary_in is not None or self.secondary_out is not None


@dataclass(frozen=True)
class PunchList:
    """New schema: append-only list of punches for the day."""

    punches: tuple[Punch, ...]


AttendanceRepresentation = Union[LegacyFields, PunchList]


@dataclass(frozen=True)
class Adjustment:
    """Time-adjustment request overlay stored on the attendance record."""

    status: AdjustmentStatus
    requested_in: Optional[datetime] = None
    requested_out: Optional[datetime] = None
    requested_in_2: Optional[datetime] = None
    requested_out_2: Optional[datetime] = None
    reason: Optional[str] = None
    applied_to_record: bool = False


@dataclass(frozen=True)
class DailyAttendanceRecord:
    """Domain entity: one employee's attendance for one civil date."""

    employee_id: str
    tenant_id: str
    work_date: date
    punches: tuple[Punch, ...] = ()
    legacy: LegacyFields = field(default_factory=LegacyFields)
    adjustment: Optional[Adjustment] = None
    record_id: Optional[int] = None

    @property
    def representation(self) -> AttendanceRepresentation:
        if self.punches:
            return PunchList(self.punches)
        return self.legacy

    @property
    def is_adjustment_applied(self) -> bool:
        return self.adjustment is not None and self.adjustment.applied_to_record

    @property
    def adjustment_status(self) -> Optional[AdjustmentStatus]:
        return self.adjustment.status if self.adjustment else None

    @property
    def last_punch(self) -> Optional[Punch]:
        return self.punches[-1] if self.punches else None

    def punch_history(self) -> tuple[Punch, ...]:
        """The day's punches; a legacy-only row reads as its equivalent in/out punches."""
        if self.punches:
            return self.punches
        f = self.legacy
        events = (
            (PunchKind.IN, f.primary_in),
            (PunchKind.OUT, f.primary_out),
            (PunchKind.IN, f.secondary_in),
            (PunchKind.OUT, f.secondary_out),
        )
        return tuple(Punch(kind=kind, timestamp=ts) for kind, ts in events if ts is not None)

    def effective_fields(self) -> LegacyFields:
        """In/out times after an applied adjustment: requested times win, gaps fall back to the record."""
        adj = self.adjustment
        if adj is None or not adj.applied_to_record:
            return self.legacy
        return LegacyFields(
            primary_in=adj.requested_in or self.legacy.primary_in,
            primary_out=adj.requested_out or self.legacy.primary_out,
            secondary_in=adj.requested_in_2 or self.legacy.secondary_in,
            secondary_out=adj.requested_out_2 or self.legacy.secondary_out,
        )

    def content_key(self) -> tuple:
        """Identity of the row's content, used to drop byte-for-byte duplicate rows."""
        if self.punches:
            body: tuple = ("punches",) + tuple((p.kind, p.timestamp) for p in self.punches)
        else:
            f = self.legacy
            body = ("legacy", f.primary_in, f.primary_out, f.secondary_in, f.secondary_out)

        adj = self.adjustment
        if adj is None:
            return body + (None,)
        return body + (
            (
                adj.status,
                adj.applied_to_record,
                adj.requested_in,
                adj.requested_out,
                adj.requested_in_2,
                adj.requested_out_2,
            ),
        )


@dataclass(frozen=True)
class DayHours:
    """Authoritative hours for one calendar day, with the audit reason."""

    work_date: date
    hours: float
    reason: ReasonCode
    provisional: bool = False
    irregularities: tuple[str, ...] = ()
    duplicates_dropped: int = 0
    conflicting_rows: bool = False

    @property
    def needs_adjustment(self) -> bool:
        if self.provisional:
            return False
        return self.reason in {ReasonCode.INCOMPLETE, ReasonCode.OUT_OF_TOLERANCE}
