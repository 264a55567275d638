from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee roles used for report access."""

    EMPLOYEE = "Employee"
    ADMIN = "Admin"
    PAYMENTS = "Payments"
    SUPER_ADMIN = "SuperAdmin"

    @property
    def has_full_report_access(self) -> bool:
        return self in {Role.ADMIN, Role.PAYMENTS, Role.SUPER_ADMIN}


class PunchKind(str, Enum):
    IN = "in"
    OUT = "out"


class AdjustmentStatus(str, Enum):
    """Workflow state of a time-adjustment request as stored on the record."""

    PENDING = "Pending"
    APPROVED = "Approved"
    CANCELLED = "Cancelled"


class ReasonCode(str, Enum):
    """Why a day contributed the hours it did (audit trail)."""

    APPROVED_ADJUSTMENT = "APPROVED_ADJUSTMENT"
    OK_ENTRY = "OK_ENTRY"
    VALID_PUNCHES = "VALID_PUNCHES"
    PROVISIONAL = "PROVISIONAL"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
    INCOMPLETE = "INCOMPLETE"
    OUT_OF_TOLERANCE = "OUT_OF_TOLERANCE"
    NO_RECORD = "NO_RECORD"

    @property
    def is_counted(self) -> bool:
        return self in {
            ReasonCode.APPROVED_ADJUSTMENT,
            ReasonCode.OK_ENTRY,
            ReasonCode.VALID_PUNCHES,
            ReasonCode.PROVISIONAL,
        }


class ReportType(str, Enum):
    SSNIT = "ssnit"
    PAYE = "paye"
