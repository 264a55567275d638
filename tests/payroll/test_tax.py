from decimal import Decimal

import pytest

from src.onpoint_payroll.onpoint_payroll.payroll.tax import (
    GHANA_PAYE_BANDS_2024,
    TaxBand,
    apply_marginal_bands,
    validate_bands,
)


def test_annual_tax_for_62400_matches_band_by_band_sum():
    total, lines = apply_marginal_bands(Decimal("62400"), GHANA_PAYE_BANDS_2024)

    assert total == Decimal("8683.5")
    assert [line.tax for line in lines] == [
        Decimal("0"),
        Decimal("93"),
        Decimal("2814"),
        Decimal("2866.5"),
        Decimal("2910"),
    ]
    assert lines[-1].taxable == Decimal("11640")


def test_income_inside_first_band_is_untaxed():
    total, lines = apply_marginal_bands(Decimal("4000"), GHANA_PAYE_BANDS_2024)

    assert total == 0
    assert len(lines) == 1


def test_top_band_is_open_ended():
    total, lines = apply_marginal_bands(Decimal("400000"), GHANA_PAYE_BANDS_2024)

    assert lines[-1].upper is None
    assert lines[-1].taxable == Decimal("6640")
    assert lines[-1].tax == Decimal("1992.0")
    assert total == sum(line.tax for line in lines)


def test_zero_income_has_no_lines():
    total, lines = apply_marginal_bands(Decimal("0"), GHANA_PAYE_BANDS_2024)

    assert total == 0
    assert lines == ()


def test_schedule_without_open_band_leaves_excess_untaxed():
    bands = (TaxBand(Decimal("100"), Decimal("0")), TaxBand(Decimal("200"), Decimal("0.10")))

    total, _ = apply_marginal_bands(Decimal("1000"), bands)

    assert total == Decimal("10")


def test_validate_rejects_non_increasing_bounds():
    with pytest.raises(ValueError):
        validate_bands((TaxBand(Decimal("200"), Decimal("0")), TaxBand(Decimal("100"), Decimal("0.1"))))


def test_validate_rejects_open_band_before_last():
    with pytest.raises(ValueError):
        validate_bands((TaxBand(None, Decimal("0.1")), TaxBand(Decimal("100"), Decimal("0.2"))))


def test_ghana_schedule_is_valid():
    validate_bands(GHANA_PAYE_BANDS_2024)
