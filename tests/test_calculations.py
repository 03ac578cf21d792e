"""
Tests for financial calculation engine.
"""

import math

import pytest
from viability.calculations.numbers import parse_number, parse_optional_number
from viability.calculations.amortization import (
    calculate_monthly_payment,
    calculate_annual_debt_service,
    calculate_project_principal,
    estimate_monthly_expenses,
)
from viability.calculations.dscr import (
    DSCRTier,
    DSCRResult,
    calculate_dscr,
    classify_dscr,
    evaluate_dscr,
    get_dscr_message,
)


class TestParseNumber:
    """Test numeric input normalization."""

    def test_number_passes_through(self):
        assert parse_number(100) == 100
        assert parse_number(-2.75) == -2.75

    def test_decimal_point_string(self):
        assert parse_number("100.50") == 100.5

    def test_decimal_comma_string(self):
        assert parse_number("100,50") == 100.5
        assert parse_number("-2,5") == -2.5

    def test_missing_values_are_zero(self):
        assert parse_number(None) == 0
        assert parse_number("") == 0

    def test_unparseable_text_is_zero(self):
        assert parse_number("abc") == 0
        assert parse_number("   ") == 0
        assert parse_number(",") == 0

    def test_non_finite_is_zero(self):
        assert parse_number(float("nan")) == 0
        assert parse_number(float("inf")) == 0
        assert parse_number(float("-inf")) == 0
        assert parse_number("Infinity") == 0
        assert parse_number("1e999") == 0

    def test_leading_number_is_kept(self):
        """Trailing text after a number is ignored."""
        assert parse_number("12abc") == 12
        assert parse_number(" 3,5 ") == 3.5
        assert parse_number("1e3") == 1000
        assert parse_number(".5") == 0.5

    def test_only_first_comma_is_decimal_separator(self):
        # "1,234,5" reads as "1.234,5"
        assert parse_number("1,234,5") == 1.234
        # No thousands separator stripping
        assert parse_number("1,234.5") == 1.234

    def test_booleans_are_not_numbers(self):
        assert parse_number(True) == 0

    def test_only_ascii_digits_are_parsed(self):
        # Arabic-Indic and full-width digits
        assert parse_number("٣,٥") == 0
        assert parse_number("１２") == 0
        assert parse_number("12٣") == 12

    def test_unicode_leading_space_is_skipped(self):
        assert parse_number("\u00a012,5") == 12.5

    @pytest.mark.parametrize("value", [0, 1.5, -3, 250000, 1e-9])
    def test_idempotent_on_finite_numbers(self, value):
        assert parse_number(parse_number(value)) == parse_number(value)

    def test_optional_keeps_empty_fields_empty(self):
        assert parse_optional_number("") is None
        assert parse_optional_number(None) is None
        assert parse_optional_number("abc") == 0
        assert parse_optional_number("7,25") == 7.25


class TestMonthlyPayment:
    """Test loan payment calculation."""

    def test_reference_loan(self):
        """250,000 at 3.5% over 25 years."""
        payment = calculate_monthly_payment(250000, 3.5, 25)
        assert abs(payment - 1251.56) < 0.1

    def test_zero_interest_is_straight_line(self):
        payment = calculate_monthly_payment(250000, 0, 25)
        assert payment == 250000 / 300
        assert abs(payment - 833.33) < 0.01

    @pytest.mark.parametrize("rate", [-5, 0, 3.5, 12])
    def test_no_principal_means_no_payment(self, rate):
        assert calculate_monthly_payment(0, rate, 25) == 0
        assert calculate_monthly_payment(-1000, rate, 25) == 0

    @pytest.mark.parametrize("rate", [-5, 0, 3.5, 12])
    def test_no_duration_means_no_payment(self, rate):
        assert calculate_monthly_payment(250000, rate, 0) == 0
        assert calculate_monthly_payment(250000, rate, -10) == 0

    def test_payment_is_not_rounded(self):
        payment = calculate_monthly_payment(250000, 3.5, 25)
        assert payment != round(payment, 2)

    def test_fractional_years(self):
        payment = calculate_monthly_payment(120000, 0, 2.5)
        assert payment == 120000 / 30

    def test_negative_rate_is_well_defined(self):
        payment = calculate_monthly_payment(100000, -1, 20)
        assert math.isfinite(payment)
        # Less than straight-line repayment
        assert 0 < payment < 100000 / 240

    def test_degenerate_rates_do_not_raise(self):
        # Monthly rate of -200%: (1 + r) ** -n == 1
        assert math.isinf(calculate_monthly_payment(1000, -2400, 25))
        # Monthly rate of -100%
        assert calculate_monthly_payment(1000, -1200, 25) == 0
        # Negative base with a fractional exponent
        assert math.isnan(calculate_monthly_payment(1000, -3000, 25.05))

    def test_rate_lost_to_rounding(self):
        # 1 + r rounds to 1, so the annuity denominator is exactly 0
        assert math.isinf(calculate_monthly_payment(1000, 1e-15, 25))

    def test_increasing_in_principal(self):
        payments = [
            calculate_monthly_payment(principal, 4.2, 20)
            for principal in (1000, 50000, 100000, 250000, 1000000)
        ]
        assert payments == sorted(payments)
        assert len(set(payments)) == len(payments)

    def test_higher_rate_costs_more(self):
        assert calculate_monthly_payment(200000, 5, 25) > calculate_monthly_payment(
            200000, 3, 25
        )

    def test_annual_debt_service(self):
        assert calculate_annual_debt_service(1000) == 12000


class TestProjectFinancing:
    """Test figures derived from a project's costs."""

    def test_principal_sums_costs(self):
        assert calculate_project_principal(230000, 17000, 3000, 0) == 250000

    def test_principal_accepts_raw_values(self):
        assert calculate_project_principal("230000", "17000,5", None, "") == 247000.5

    def test_expenses_estimated_from_payment(self):
        assert estimate_monthly_expenses(1000, 450) == 100

    def test_expenses_use_custom_ratio(self):
        assert estimate_monthly_expenses(1000, None, expense_ratio=0.25) == 250

    def test_expenses_kept_without_payment(self):
        assert estimate_monthly_expenses(0, "450,5") == 450.5
        assert estimate_monthly_expenses(0, None) == 0


class TestDSCR:
    """Test debt service coverage ratio."""

    def test_calculate_dscr(self):
        # NOI 1,700/month against 1,000/month of debt
        assert abs(calculate_dscr(2000, 300, 1000) - 1.7) < 0.1

    @pytest.mark.parametrize("rent,expenses", [(2000, 300), (0, 0), (-5, 100)])
    def test_zero_debt_gives_zero(self, rent, expenses):
        assert calculate_dscr(rent, expenses, 0) == 0
        assert calculate_dscr(rent, expenses, -100) == 0

    def test_negative_noi_propagates(self):
        assert abs(calculate_dscr(1000, 2000, 500) - (-2)) < 0.1

    def test_decreasing_in_debt_payment(self):
        ratios = [
            calculate_dscr(2000, 300, debt) for debt in (100, 500, 1000, 1500, 3000)
        ]
        assert ratios == sorted(ratios, reverse=True)
        assert len(set(ratios)) == len(ratios)


class TestClassification:
    """Test DSCR tiers and their boundaries."""

    @pytest.mark.parametrize(
        "ratio,tier",
        [
            (-2, DSCRTier.danger),
            (0, DSCRTier.danger),
            (0.8, DSCRTier.danger),
            (0.9999, DSCRTier.danger),
            (1.0, DSCRTier.caution),
            (1.1, DSCRTier.caution),
            (1.1999, DSCRTier.caution),
            (1.2, DSCRTier.comfortable),
            (1.5, DSCRTier.comfortable),
        ],
    )
    def test_classify(self, ratio, tier):
        assert classify_dscr(ratio) == tier

    def test_messages(self):
        assert "DSCR < 1" in get_dscr_message(0.8)
        assert "thin" in get_dscr_message(1.1)
        assert "comfortable" in get_dscr_message(1.5)

    def test_evaluate_from_raw_inputs(self):
        result = evaluate_dscr("2000", "300,0", 1000)
        assert isinstance(result, DSCRResult)
        assert abs(result.ratio - 1.7) < 1e-9
        assert result.tier == DSCRTier.comfortable
        assert result.message == get_dscr_message(1.7)

    def test_evaluate_without_debt(self):
        result = evaluate_dscr("2000", "300", "")
        assert result.ratio == 0
        assert result.tier == DSCRTier.danger


class TestIntegration:
    """Payment feeding the coverage check."""

    def test_payment_then_dscr(self):
        principal = calculate_project_principal("230000", "17000", "3000", None)
        payment = calculate_monthly_payment(principal, parse_number("3,5"), 25)
        result = evaluate_dscr("1400", "150", payment)
        # NOI 1,250 against ~1,251.56 of debt
        assert result.tier == DSCRTier.danger
        assert 0.99 < result.ratio < 1.0
