"""Progressive income tax as an ordered table of marginal bands."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from ..core.constants import CURRENCY_QUANT


@dataclass(frozen=True)
class TaxBand:
    upper_bound: Optional[Decimal]  # None: open-ended top band
    marginal_rate: Decimal


@dataclass(frozen=True)
class BandTax:
    """Audit line: how much of the income fell in one band and the tax on it."""

    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal
    taxable: Decimal
    tax: Decimal

    def to_dict(self) -> dict:
        return {
            "lower": float(self.lower),
            "upper": None if self.upper is None else float(self.upper),
            "rate": float(self.rate),
            "taxable": float(self.taxable.quantize(CURRENCY_QUANT)),
            "tax": float(self.tax.quantize(CURRENCY_QUANT)),
        }


# Ghana PAYE, 2024 annual schedule (GHS).
GHANA_PAYE_BANDS_2024: tuple[TaxBand, ...] = (
    TaxBand(Decimal("4380"), Decimal("0")),
    TaxBand(Decimal("6240"), Decimal("0.05")),
    TaxBand(Decimal("34380"), Decimal("0.10")),
    TaxBand(Decimal("50760"), Decimal("0.175")),
    TaxBand(Decimal("393360"), Decimal("0.25")),
    TaxBand(None, Decimal("0.30")),
)


def validate_bands(bands: Sequence[TaxBand]) -> None:
    """Upper bounds must strictly increase and only the last band may be open-ended."""
    if not bands:
        raise ValueError("Tax schedule has no bands")

    previous = Decimal("0")
    for index, band in enumerate(bands):
        is_last = index == len(bands) - 1
        if band.upper_bound is None:
            if not is_last:
                raise ValueError("Only the last tax band may be open-ended")
            continue
        if band.upper_bound <= previous:
            raise ValueError("Tax band upper bounds must strictly increase")
        previous = band.upper_bound


def apply_marginal_bands(amount: Decimal, bands: Sequence[TaxBand]) -> tuple[Decimal, tuple[BandTax, ...]]:
    """Sum of each band's rate applied only to the slice of `amount` inside that band.

    Income above the last bounded band is untaxed unless the schedule ends
    with an open-ended band. No rounding happens here.
    """
    total = Decimal("0")
    lines: list[BandTax] = []
    lower = Decimal("0")

    for band in bands:
        if amount <= lower:
            break
        top = amount if band.upper_bound is None else min(amount, band.upper_bound)
        taxable = top - lower
        tax = taxable * band.marginal_rate
        lines.append(BandTax(lower=lower, upper=band.upper_bound, rate=band.marginal_rate, taxable=taxable, tax=tax))
        total += tax
        if band.upper_bound is None:
            break
        lower = band.upper_bound

    return total, tuple(lines)
