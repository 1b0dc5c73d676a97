"""
Financial calculation API endpoints.

These endpoints accept calculator inputs and return calculated results.
Requests are validated here; the calculation modules assume clean input.
"""

from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator

from debtcalc.calculations import amortization, avalanche, consolidation
from debtcalc.calculations.errors import CalculationError, InsufficientPaymentError
from debtcalc.calculations.models import (
    Debt,
    LoanTerms,
    PayoffConfig,
    PayoffStrategy,
    RateBasis,
    RetentionPolicy,
)
from debtcalc.calculations.rates import effective_annual_rate, effective_period_rate
from debtcalc.calculations.schedule import summarize_by_year
from debtcalc.config import get_settings

router = APIRouter()

MAX_ANNUAL_RATE = 100.0  # percent
MAX_TERM_PERIODS = 1200  # 100 years of monthly payments


def _calculation_error(e: CalculationError) -> HTTPException:
    """Translate a solver failure into a 422 the calculator page can show."""
    if isinstance(e, InsufficientPaymentError):
        return HTTPException(
            status_code=422,
            detail={"message": str(e), "minimum_payment": round(e.minimum_payment, 2)},
        )
    return HTTPException(status_code=422, detail=str(e))


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float = Field(gt=0)
    annual_rate: float = Field(ge=0, le=MAX_ANNUAL_RATE)
    basis: RateBasis = RateBasis.monthly
    term_periods: Optional[int] = Field(default=None, le=MAX_TERM_PERIODS)
    payment: Optional[float] = Field(default=None, gt=0)
    extra_payment: float = Field(default=0.0, ge=0)
    start_date: Optional[date] = None

    @model_validator(mode="after")
    def check_one_unknown(self):
        if (self.term_periods is None) == (self.payment is None):
            raise ValueError("Provide exactly one of term_periods or payment")
        return self


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Solve a loan and generate its amortization schedule."""
    try:
        if inputs.payment is not None:
            # Reject tiny payments before building a schedule of unbounded length
            term = amortization.calculate_term(
                inputs.principal,
                effective_period_rate(inputs.annual_rate, inputs.basis),
                inputs.payment,
            )
            if term > MAX_TERM_PERIODS:
                raise HTTPException(
                    status_code=422,
                    detail=f"Payment takes {term} periods; the limit is {MAX_TERM_PERIODS}",
                )

        result = amortization.solve_amortization(
            principal=inputs.principal,
            annual_rate=inputs.annual_rate,
            basis=inputs.basis,
            term_periods=inputs.term_periods,
            payment=inputs.payment,
            extra_payment=inputs.extra_payment,
            start_date=inputs.start_date,
        )
    except CalculationError as e:
        raise _calculation_error(e)

    return {
        "monthly_payment": result.monthly_payment,
        "total_paid": result.total_paid,
        "total_interest": result.total_interest,
        "term_periods": result.term_periods,
        "period_rate": result.period_rate,
        "effective_annual_rate": effective_annual_rate(result.period_rate) * 100,
        "payoff_date": result.payoff_date,
        "schedule": [asdict(row) for row in result.schedule],
        "annual_summary": [asdict(year) for year in summarize_by_year(result.schedule)],
    }


class DebtInput(BaseModel):
    """One current debt."""

    id: Optional[str] = None
    name: str = Field(min_length=1)
    balance: float = Field(gt=0)
    minimum_payment: float = Field(gt=0)
    annual_rate: float = Field(ge=0, le=MAX_ANNUAL_RATE)


def _to_debts(debts: List[DebtInput]) -> List[Debt]:
    return [
        Debt(
            id=d.id or str(index),
            name=d.name,
            balance=d.balance,
            minimum_payment=d.minimum_payment,
            annual_rate=d.annual_rate,
        )
        for index, d in enumerate(debts, start=1)
    ]


class PayoffInput(BaseModel):
    """Input for debt payoff simulation."""

    debts: List[DebtInput] = Field(min_length=1)
    extra_monthly: float = Field(default=0.0, ge=0)
    extra_yearly: float = Field(default=0.0, ge=0)
    one_time_amount: float = Field(default=0.0, ge=0)
    one_time_period: int = Field(default=1, ge=1)
    retention: RetentionPolicy = RetentionPolicy.fixed_total
    strategy: PayoffStrategy = PayoffStrategy.avalanche


@router.post("/payoff")
async def calculate_payoff(inputs: PayoffInput):
    """Simulate paying off several debts from one budget."""
    settings = get_settings()

    result = avalanche.simulate_payoff(
        _to_debts(inputs.debts),
        PayoffConfig(
            extra_monthly=inputs.extra_monthly,
            extra_yearly=inputs.extra_yearly,
            one_time_amount=inputs.one_time_amount,
            one_time_period=inputs.one_time_period,
            retention=inputs.retention,
            strategy=inputs.strategy,
            horizon=settings.payoff_horizon_months,
        ),
    )

    return asdict(result)


class ConsolidationInput(BaseModel):
    """Input for debt consolidation comparison."""

    debts: List[DebtInput] = Field(min_length=1)
    loan_amount: Optional[float] = Field(default=None, gt=0)  # Defaults to total balance
    annual_rate: float = Field(ge=0, le=MAX_ANNUAL_RATE)
    basis: RateBasis = RateBasis.monthly
    term_years: int = Field(default=5, ge=0, le=MAX_TERM_PERIODS // 12)
    term_months: int = Field(default=0, ge=0, le=11)
    fee_percent: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def check_term_length(self):
        if self.term_years * 12 + self.term_months > MAX_TERM_PERIODS:
            raise ValueError(f"Loan term cannot exceed {MAX_TERM_PERIODS} months")
        return self


@router.post("/consolidation")
async def calculate_consolidation(inputs: ConsolidationInput):
    """Compare current debts against a consolidation loan."""
    settings = get_settings()

    candidate = LoanTerms(
        principal=inputs.loan_amount or 0.0,
        annual_rate=inputs.annual_rate,
        basis=inputs.basis,
        term_periods=inputs.term_years * 12 + inputs.term_months,
        fee_percent=inputs.fee_percent,
    )

    try:
        verdict = consolidation.compare_consolidation(
            _to_debts(inputs.debts),
            candidate,
            horizon=settings.payoff_horizon_months,
        )
    except CalculationError as e:
        raise _calculation_error(e)

    data = asdict(verdict)
    # Schedules are not part of the comparison view
    data["current"].pop("schedule")
    data["candidate"].pop("schedule")
    return data
