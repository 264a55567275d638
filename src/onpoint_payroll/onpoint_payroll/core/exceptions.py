from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced employee (or tenant) does not exist."""


class ConfigurationError(DomainError):
    """Raised when payroll cannot proceed until an administrator fixes settings."""


class SalaryNotConfiguredError(ConfigurationError):
    """Raised when an employee's basic salary is unset or not positive."""

    def __init__(self, employee_id: Optional[str] = None):
        super().__init__(
            "Employee salary not set. Please set a salary for this employee before generating payslip."
        )
        self.employee_id = employee_id


class AttendanceFetchError(DomainError):
    """Raised when the attendance store cannot be read (transient).

    Callers must not treat this as "no records": the payslip would silently
    fall back to full salary.
    """
