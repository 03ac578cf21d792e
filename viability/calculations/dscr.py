"""
Debt Service Coverage Ratio

DSCR = Annual NOI / Annual Debt Service, and its reading as a risk tier.
"""

import enum
from dataclasses import dataclass

from viability.calculations.numbers import NumericInput, parse_number

# Lower bounds of the CAUTION and COMFORTABLE tiers (inclusive)
CAUTION_THRESHOLD = 1.0
COMFORTABLE_THRESHOLD = 1.2


class DSCRTier(str, enum.Enum):
    """Risk tier of a coverage ratio."""

    danger = "danger"
    caution = "caution"
    comfortable = "comfortable"


DSCR_MESSAGES = {
    DSCRTier.danger: (
        "DSCR < 1: the project does not cover its loan payments. "
        "This is tight, even risky."
    ),
    DSCRTier.caution: (
        "1 ≤ DSCR < 1.2: the project passes, but the safety margin is thin."
    ),
    DSCRTier.comfortable: (
        "DSCR ≥ 1.2: the project is comfortable on debt repayment capacity."
    ),
}


@dataclass(frozen=True)
class DSCRResult:
    """Coverage ratio together with its tier and explanation."""

    ratio: float
    tier: DSCRTier
    message: str


def calculate_dscr(
    monthly_rent: float, monthly_expenses: float, monthly_debt_payment: float
) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        monthly_rent: Monthly rental income
        monthly_expenses: Monthly operating expenses, excluding debt service
        monthly_debt_payment: Monthly loan payment (principal + interest)

    Returns:
        DSCR ratio. Negative when expenses exceed rent. 0 when there is no
        positive debt payment, which callers must not read as "no risk".
    """
    if monthly_debt_payment <= 0:
        return 0.0

    monthly_noi = monthly_rent - monthly_expenses
    annual_noi = monthly_noi * 12
    annual_debt_service = monthly_debt_payment * 12

    return annual_noi / annual_debt_service


def classify_dscr(ratio: float) -> DSCRTier:
    """Map a ratio to its tier. Each tier includes its lower bound."""
    if ratio < CAUTION_THRESHOLD:
        return DSCRTier.danger
    if ratio < COMFORTABLE_THRESHOLD:
        return DSCRTier.caution
    return DSCRTier.comfortable


def get_dscr_message(ratio: float) -> str:
    """Human-readable interpretation of a ratio."""
    return DSCR_MESSAGES[classify_dscr(ratio)]


def evaluate_dscr(
    monthly_rent: NumericInput,
    monthly_expenses: NumericInput,
    monthly_debt_payment: NumericInput,
) -> DSCRResult:
    """Normalize raw cash-flow figures, then compute and classify the DSCR."""
    ratio = calculate_dscr(
        parse_number(monthly_rent),
        parse_number(monthly_expenses),
        parse_number(monthly_debt_payment),
    )
    tier = classify_dscr(ratio)
    return DSCRResult(ratio=ratio, tier=tier, message=DSCR_MESSAGES[tier])
