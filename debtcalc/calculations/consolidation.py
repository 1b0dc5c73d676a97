"""
Debt Consolidation Comparison

Compares paying each current debt at its own minimum payment against
rolling them into one consolidation loan with an upfront fee.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from debtcalc.calculations import irr
from debtcalc.calculations.amortization import (
    calculate_term,
    remaining_balance,
    solve_amortization,
)
from debtcalc.calculations.errors import InsufficientPaymentError
from debtcalc.calculations.models import (
    AmortizationResult,
    ConsolidationVerdict,
    CurrentDebtPayoff,
    Debt,
    LoanTerms,
    MAX_PAYOFF_MONTHS,
)
from debtcalc.calculations.rates import effective_period_rate

logger = logging.getLogger(__name__)


def _current_debt_payoff(debt: Debt, horizon: int) -> CurrentDebtPayoff:
    """
    Pay one debt at its minimum payment until it is gone.

    A payment that never covers the interest, or that needs more periods
    than the horizon, is projected across the whole horizon instead, so its
    cost still shows up in the comparison.
    """
    period_rate = effective_period_rate(debt.annual_rate)
    try:
        term = calculate_term(debt.balance, period_rate, debt.minimum_payment)
    except InsufficientPaymentError as e:
        logger.info("Debt %s never pays off at its minimum: %s", debt.name, e)
        term = None

    if term is None or term > horizon:
        if term is not None:
            logger.info("Debt %s needs %d periods at its minimum", debt.name, term)
        leftover = remaining_balance(debt.balance, period_rate, debt.minimum_payment, horizon)
        interest = debt.minimum_payment * horizon + leftover - debt.balance
        return CurrentDebtPayoff(
            debt_id=debt.id,
            name=debt.name,
            balance=debt.balance,
            monthly_payment=debt.minimum_payment,
            annual_rate=debt.annual_rate,
            months=horizon,
            total_interest=interest,
            total_paid=debt.balance + interest,
            converges=False,
        )

    result = solve_amortization(
        principal=debt.balance,
        annual_rate=debt.annual_rate,
        payment=debt.minimum_payment,
    )
    return CurrentDebtPayoff(
        debt_id=debt.id,
        name=debt.name,
        balance=debt.balance,
        monthly_payment=debt.minimum_payment,
        annual_rate=debt.annual_rate,
        months=result.term_periods,
        total_interest=result.total_interest,
        total_paid=result.total_paid,
    )


def weighted_apr(debts: Sequence[Debt]) -> float:
    """Balance-weighted average annual rate, in percent."""
    total_balance = sum(d.balance for d in debts)
    if total_balance <= 0:
        return 0.0
    return sum(d.balance * d.annual_rate for d in debts) / total_balance


def _fee_adjusted_irr_apr(loan_amount: float, candidate: AmortizationResult) -> Optional[float]:
    """Annual percentage rate from the IRR of cash received vs. payments made."""
    cash_flows = irr.loan_cash_flows(loan_amount, [row.payment for row in candidate.schedule])
    try:
        return irr.calculate_irr(cash_flows) * 12 * 100
    except ValueError as e:
        logger.warning("IRR-based APR unavailable: %s", e)
        return None


def compare_consolidation(
    debts: Sequence[Debt],
    candidate: LoanTerms,
    horizon: int = MAX_PAYOFF_MONTHS,
) -> ConsolidationVerdict:
    """
    Decide whether a consolidation loan beats the current debts.

    The loan is worth it only if it costs less in total AND lowers the
    monthly payment.

    Args:
        debts: Current debts, each paid at its own minimum payment
        candidate: Consolidation loan. principal of 0 borrows the total of the
            current balances; term_periods is required; fee_percent is
            charged on the loan amount and financed with it
        horizon: Periods used to project debts whose payment never covers interest

    Returns:
        ConsolidationVerdict with both scenarios and the savings deltas
    """
    if candidate.term_periods is None:
        raise ValueError("Consolidation loan requires term_periods")

    breakdown: List[CurrentDebtPayoff] = [_current_debt_payoff(d, horizon) for d in debts]

    total_balance = sum(d.balance for d in breakdown)
    current_apr = weighted_apr(debts)
    current_interest = sum(d.total_interest for d in breakdown)
    current = AmortizationResult(
        principal=total_balance,
        period_rate=effective_period_rate(current_apr),
        monthly_payment=sum(d.monthly_payment for d in breakdown),
        total_paid=total_balance + current_interest,
        total_interest=current_interest,
        term_periods=max((d.months for d in breakdown), default=0),
    )

    loan_amount = candidate.principal or total_balance
    loan_fee = loan_amount * candidate.fee_percent / 100

    solved = solve_amortization(
        principal=loan_amount + loan_fee,
        annual_rate=candidate.annual_rate,
        basis=candidate.basis,
        term_periods=candidate.term_periods,
        start_date=candidate.start_date,
    )

    # Everything paid beyond the cash actually received: interest plus the fee
    candidate_cost = solved.total_paid - loan_amount
    real_apr = (candidate_cost / loan_amount) / (solved.term_periods / 12) * 100
    consolidated = replace(solved, real_apr=real_apr)

    worth_it = (
        candidate_cost < current.total_interest
        and consolidated.monthly_payment < current.monthly_payment
    )

    logger.debug(
        "Consolidation of %d debts: current interest %.2f vs candidate cost %.2f (worth it: %s)",
        len(breakdown),
        current.total_interest,
        candidate_cost,
        worth_it,
    )

    return ConsolidationVerdict(
        current=current,
        candidate=consolidated,
        worth_it=worth_it,
        monthly_payment_delta=current.monthly_payment - consolidated.monthly_payment,
        total_interest_delta=current.total_interest - candidate_cost,
        term_delta=current.term_periods - consolidated.term_periods,
        loan_amount=loan_amount,
        loan_fee=loan_fee,
        candidate_cost=candidate_cost,
        real_apr=real_apr,
        irr_apr=_fee_adjusted_irr_apr(loan_amount, consolidated),
        current_total_balance=total_balance,
        current_weighted_apr=current_apr,
        current_converges=all(d.converges for d in breakdown),
        current_breakdown=tuple(breakdown),
    )
