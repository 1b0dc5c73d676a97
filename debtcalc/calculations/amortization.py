"""
Loan Amortization Calculations

Solves a level-payment loan for its payment (term known) or for its term
(payment known), then materializes the schedule to get exact totals.
The payment formula matches Excel's PMT() function.
"""

import logging
import math
from datetime import date
from typing import Optional

from debtcalc.calculations.errors import InsufficientPaymentError, InvalidTermError
from debtcalc.calculations.models import AmortizationResult, LoanTerms, RateBasis
from debtcalc.calculations.rates import effective_period_rate
from debtcalc.calculations.schedule import generate_schedule, total_interest, total_paid

logger = logging.getLogger(__name__)


def calculate_payment(principal: float, period_rate: float, term_periods: int) -> float:
    """
    Calculate the level payment that retires a loan over a fixed term.

    Args:
        principal: Loan principal amount
        period_rate: Interest rate per period as decimal (e.g., 0.005)
        term_periods: Number of payments

    Returns:
        Payment per period

    Raises:
        InvalidTermError: If term_periods is zero or negative
    """
    if term_periods <= 0:
        raise InvalidTermError(term_periods)

    if period_rate == 0:
        return principal / term_periods

    factor = (1 + period_rate) ** term_periods
    return principal * period_rate * factor / (factor - 1)


def calculate_term(principal: float, period_rate: float, payment: float) -> int:
    """
    Calculate how many payments of a fixed amount retire a loan.

    Args:
        principal: Loan principal amount
        period_rate: Interest rate per period as decimal
        payment: Fixed payment per period

    Returns:
        Number of periods, rounded up (the last one is a partial payment)

    Raises:
        InsufficientPaymentError: If the payment does not exceed first-period interest
    """
    first_interest = principal * period_rate
    if payment <= first_interest:
        raise InsufficientPaymentError(payment=payment, minimum_payment=first_interest)

    if period_rate == 0:
        return math.ceil(principal / payment)

    return math.ceil(
        math.log(payment / (payment - first_interest)) / math.log(1 + period_rate)
    )


def remaining_balance(
    principal: float, period_rate: float, payment: float, periods_completed: int
) -> float:
    """
    Balance left after a number of level payments.

    Unlike a schedule, this is not floored at zero: a payment smaller than
    the interest yields a growing balance.
    """
    if period_rate == 0:
        return principal - payment * periods_completed

    growth = (1 + period_rate) ** periods_completed
    return principal * growth - payment * (growth - 1) / period_rate


def solve_amortization(
    principal: float,
    annual_rate: float,
    basis: RateBasis = RateBasis.monthly,
    term_periods: Optional[int] = None,
    payment: Optional[float] = None,
    extra_payment: float = 0.0,
    start_date: Optional[date] = None,
) -> AmortizationResult:
    """
    Solve a loan for whichever of payment or term is missing.

    Args:
        principal: Loan principal amount
        annual_rate: Nominal annual rate as a percentage
        basis: Compounding convention of annual_rate
        term_periods: Number of monthly payments (term known -> solve payment)
        payment: Fixed monthly payment (payment known -> solve term)
        extra_payment: Additional principal paid every period
        start_date: Date of first payment, used to date the schedule

    Returns:
        AmortizationResult with totals taken from the generated schedule

    Raises:
        InvalidTermError: Term known but not positive
        InsufficientPaymentError: Payment known but does not cover interest
    """
    if (term_periods is None) == (payment is None):
        raise ValueError("Provide exactly one of term_periods or payment")

    period_rate = effective_period_rate(annual_rate, basis)

    if term_periods is not None:
        monthly_payment = calculate_payment(principal, period_rate, term_periods)
        periods = term_periods
    else:
        monthly_payment = payment
        periods = calculate_term(principal, period_rate, payment)

    logger.debug(
        "Solving amortization: principal=%.2f rate=%.6f periods=%d payment=%.2f",
        principal,
        period_rate,
        periods,
        monthly_payment,
    )

    schedule = generate_schedule(
        principal,
        period_rate,
        periods,
        monthly_payment,
        extra_payment=extra_payment,
        start_date=start_date,
    )

    return AmortizationResult(
        principal=principal,
        period_rate=period_rate,
        monthly_payment=monthly_payment,
        total_paid=total_paid(schedule),
        total_interest=total_interest(schedule),
        term_periods=len(schedule),
        schedule=tuple(schedule),
        payoff_date=schedule[-1].payment_date if schedule else None,
    )


def solve_loan(terms: LoanTerms) -> AmortizationResult:
    """Solve a loan described by LoanTerms."""
    return solve_amortization(
        principal=terms.principal,
        annual_rate=terms.annual_rate,
        basis=terms.basis,
        term_periods=terms.term_periods,
        payment=terms.payment,
        extra_payment=terms.extra_payment,
        start_date=terms.start_date,
    )
