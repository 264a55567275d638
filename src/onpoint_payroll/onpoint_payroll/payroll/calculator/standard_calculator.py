from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ...core.constants import (
    CURRENCY_QUANT,
    MONTHS_PER_YEAR,
    SSNIT_EMPLOYEE_RATE,
    SSNIT_EMPLOYER_RATE,
    SSNIT_TIER1_RATE,
    SSNIT_TIER2_RATE,
    SSNIT_TIER_CEILING,
)
from ...core.exceptions import ConfigurationError, SalaryNotConfiguredError, ValidationError
from ..model import Deduction, PaySlip
from ..tax import GHANA_PAYE_BANDS_2024, BandTax, TaxBand, apply_marginal_bands, validate_bands
from .base import PayCalculator

_ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps the float's shortest repr instead of its binary expansion.
    return Decimal(str(value))


def money(value: Decimal) -> Decimal:
    return value.quantize(CURRENCY_QUANT, rounding=ROUND_HALF_UP)


class StandardPayCalculator(PayCalculator):
    """Standard rule: hours-prorated gross, SSNIT on gross, annualized PAYE bands.

    Everything is accumulated at full Decimal precision; each monetary output
    is rounded half-up to 2 places only when the slip is assembled.
    """

    def __init__(
        self,
        *,
        tax_bands: Sequence[TaxBand] = GHANA_PAYE_BANDS_2024,
        tier_ceiling: Decimal = SSNIT_TIER_CEILING,
        show_hours_shortfall: bool = True,
    ):
        validate_bands(tax_bands)
        self._bands = tuple(tax_bands)
        self._tier_ceiling = to_decimal(tier_ceiling)
        self._show_shortfall = show_hours_shortfall

    def compute_pay(
        self,
        *,
        basic_salary: Decimal,
        expected_hours: float,
        actual_hours_worked: Optional[float],
        other_deductions: Sequence[Deduction] = (),
    ) -> PaySlip:
        salary = to_decimal(basic_salary)
        if salary <= _ZERO:
            raise SalaryNotConfiguredError()

        expected = to_decimal(expected_hours)
        deductions = list(other_deductions)

        if actual_hours_worked is None:
            gross = salary
            hourly_rate = salary / expected if expected > _ZERO else _ZERO
        else:
            if expected <= _ZERO:
                raise ConfigurationError(
                    "Expected hours for the pay period is zero. Check the tenant's working days and hours per day."
                )
            actual = to_decimal(actual_hours_worked)
            if actual < _ZERO:
                raise ValidationError("Actual hours worked cannot be negative")

            hourly_rate = salary / expected
            gross = hourly_rate * actual

            if self._show_shortfall and actual < expected:
                shortfall = expected - actual
                deductions.append(
                    Deduction(
                        description=f"Hours shortfall ({shortfall.quantize(CURRENCY_QUANT)} h)",
                        amount=money(shortfall * hourly_rate),
                        informational=True,
                    )
                )

        ssnit_employee = gross * SSNIT_EMPLOYEE_RATE
        paye, breakdown = self.monthly_paye(gross)
        applied = sum((to_decimal(d.amount) for d in deductions if not d.informational), _ZERO)
        total = ssnit_employee + paye + applied
        net = max(_ZERO, gross - total)

        applicable = min(gross, self._tier_ceiling)

        return PaySlip(
            basic_salary=money(salary),
            expected_hours=float(expected),
            actual_hours_worked=actual_hours_worked,
            hourly_rate=money(hourly_rate),
            gross_pay=money(gross),
            ssnit_employee=money(ssnit_employee),
            paye=money(paye),
            other_deductions=tuple(deductions),
            total_deductions=money(total),
            net_pay=money(net),
            ssnit_employer=money(gross * SSNIT_EMPLOYER_RATE),
            ssnit_tier1=money(applicable * SSNIT_TIER1_RATE),
            ssnit_tier2=money(applicable * SSNIT_TIER2_RATE),
            paye_breakdown=breakdown,
        )

    def monthly_paye(self, gross: Decimal) -> tuple[Decimal, tuple[BandTax, ...]]:
        """Tax the annualized gross on the band table and bring it back to one month."""
        annual_tax, breakdown = apply_marginal_bands(gross * MONTHS_PER_YEAR, self._bands)
        return annual_tax / MONTHS_PER_YEAR, breakdown
