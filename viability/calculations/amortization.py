"""
Loan Amortization Calculations

Fixed monthly payment for a fully amortizing loan, plus the financing
figures a project derives from it. No schedule table is produced.
"""

import math

from viability.calculations.numbers import NumericInput, parse_number


def _growth_factor(monthly_rate: float, periods: float) -> float:
    """(1 + monthly_rate) ** -periods, non-finite instead of raising."""
    base = 1 + monthly_rate
    if base == 0:
        return math.inf
    try:
        return math.pow(base, -periods)
    except OverflowError:
        return math.inf
    except ValueError:
        # Negative base with a fractional exponent
        return math.nan


def calculate_monthly_payment(
    principal: float, annual_rate_percent: float, years: float
) -> float:
    """
    Calculate the fixed monthly payment of a fully amortizing loan.

    Args:
        principal: Total borrowed amount (price plus acquisition costs)
        annual_rate_percent: Annual interest rate as a percentage (3.5 for 3.5%)
        years: Loan duration in years; fractional years are allowed

    Returns:
        Monthly payment, unrounded. 0 when there is no loan (principal or
        duration not positive).
    """
    if principal <= 0 or years <= 0:
        return 0.0

    monthly_rate = annual_rate_percent / 100 / 12
    n = years * 12

    if monthly_rate == 0:
        return principal / n

    denominator = 1 - _growth_factor(monthly_rate, n)
    if denominator == 0:
        # Monthly rate of -200%, or a rate so small that 1 + rate rounds to 1
        return math.copysign(math.inf, principal * monthly_rate)

    return principal * (monthly_rate / denominator)


def calculate_annual_debt_service(monthly_payment: float) -> float:
    """Annual debt service for a constant monthly payment."""
    return monthly_payment * 12


def calculate_project_principal(
    price: NumericInput,
    notary_fees: NumericInput = None,
    works: NumericInput = None,
    brokerage_fees: NumericInput = None,
) -> float:
    """
    Total amount to finance for an acquisition.

    Purchase price plus notary fees, works and brokerage fees. Insurance is a
    monthly cost and is not financed.
    """
    return (
        parse_number(price)
        + parse_number(notary_fees)
        + parse_number(works)
        + parse_number(brokerage_fees)
    )


def estimate_monthly_expenses(
    monthly_payment: float,
    current_expenses: NumericInput = None,
    expense_ratio: float = 0.10,
) -> float:
    """
    Default monthly operating expenses for a project.

    While a loan payment is known, expenses are estimated as a share of it;
    otherwise whatever the user entered is kept.
    """
    if monthly_payment > 0:
        return monthly_payment * expense_ratio
    return parse_number(current_expenses)
