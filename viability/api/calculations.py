"""
Financial calculation API endpoints.

These endpoints accept raw form values and return calculated results.
Nothing is persisted here.
"""

import math

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional, Union

from viability.calculations import amortization, dscr
from viability.calculations.numbers import parse_number

router = APIRouter()

RawNumber = Optional[Union[float, str]]


class MonthlyPaymentInput(BaseModel):
    """Loan terms as typed by the user ("3,5" and "3.5" both accepted)."""

    principal: RawNumber = None
    annual_rate_percent: RawNumber = None
    years: RawNumber = None


class MonthlyPaymentResponse(BaseModel):
    """Normalized loan terms and the resulting payment."""

    principal: float
    annual_rate_percent: float
    years: float
    monthly_payment: float
    annual_debt_service: float


@router.post("/monthly-payment", response_model=MonthlyPaymentResponse)
async def calculate_monthly_payment_endpoint(inputs: MonthlyPaymentInput):
    """Calculate the monthly payment of a fully amortizing loan."""
    principal = parse_number(inputs.principal)
    rate = parse_number(inputs.annual_rate_percent)
    years = parse_number(inputs.years)

    payment = amortization.calculate_monthly_payment(principal, rate, years)
    if not math.isfinite(payment):
        raise HTTPException(
            status_code=422,
            detail="Loan terms do not produce a finite monthly payment",
        )

    return MonthlyPaymentResponse(
        principal=principal,
        annual_rate_percent=rate,
        years=years,
        monthly_payment=payment,
        annual_debt_service=amortization.calculate_annual_debt_service(payment),
    )


class DSCRInput(BaseModel):
    """Monthly cash flow as typed by the user."""

    monthly_rent: RawNumber = None
    monthly_expenses: RawNumber = None
    monthly_debt_payment: RawNumber = None


class DSCRResponse(BaseModel):
    """Coverage ratio, its tier and the explanation shown to the user."""

    ratio: float
    ratio_display: str
    tier: dscr.DSCRTier
    message: str


def dscr_to_response(result: dscr.DSCRResult) -> DSCRResponse:
    """Convert a DSCRResult to the response schema."""
    return DSCRResponse(
        ratio=result.ratio,
        ratio_display=f"{result.ratio:.2f}",
        tier=result.tier,
        message=result.message,
    )


@router.post("/dscr", response_model=DSCRResponse)
async def calculate_dscr_endpoint(inputs: DSCRInput):
    """Calculate and classify the debt service coverage ratio."""
    if parse_number(inputs.monthly_debt_payment) <= 0:
        raise HTTPException(
            status_code=422,
            detail="The monthly loan payment must be entered or computed",
        )

    result = dscr.evaluate_dscr(
        inputs.monthly_rent,
        inputs.monthly_expenses,
        inputs.monthly_debt_payment,
    )
    return dscr_to_response(result)
