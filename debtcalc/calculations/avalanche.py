"""
Debt Payoff Simulation

Month-by-month payoff of several debts from one shared budget. Every period:

1. Interest accrues on each open balance
2. The period's budget is worked out (monthly budget, yearly extra every
   12th period, one-time extra in its configured period)
3. Minimum payments are made in priority order
4. Whatever is left cascades down the priority list, so the top debt is
   cleared as fast as possible and its money then rolls to the next one

Priority is highest rate first (avalanche) or smallest balance first
(snowball), fixed once at the start of the run.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from debtcalc.calculations.models import (
    BALANCE_EPSILON,
    Debt,
    DebtPayoffSummary,
    DebtPeriodSnapshot,
    PayoffConfig,
    PayoffMonthRecord,
    PayoffResult,
    PayoffStrategy,
    RetentionPolicy,
    WorkingDebt,
)
from debtcalc.calculations.rates import effective_period_rate

logger = logging.getLogger(__name__)


def _prioritize(debts: Sequence[Debt], strategy: PayoffStrategy) -> List[WorkingDebt]:
    """
    Build the run's working copies in payment priority order.

    Ties keep input order so identical inputs always cascade identically.
    """
    working = [
        WorkingDebt(
            debt_id=debt.id,
            name=debt.name,
            input_index=index,
            original_balance=debt.balance,
            annual_rate=debt.annual_rate,
            monthly_rate=effective_period_rate(debt.annual_rate),
            minimum_payment=debt.minimum_payment,
            balance=debt.balance,
        )
        for index, debt in enumerate(debts)
    ]

    if PayoffStrategy(strategy) == PayoffStrategy.snowball:
        return sorted(working, key=lambda d: (d.original_balance, d.input_index))
    return sorted(working, key=lambda d: (-d.annual_rate, d.input_index))


def _available_funds(
    debts: List[WorkingDebt], config: PayoffConfig, period: int, total_budget: float
) -> float:
    """Money available for payments in one period."""
    if config.retention == RetentionPolicy.fixed_total:
        funds = total_budget
    else:
        funds = sum(d.minimum_payment for d in debts if d.balance > 0) + config.extra_monthly

    if period % 12 == 0:
        funds += config.extra_yearly

    if period == config.one_time_period:
        funds += config.one_time_amount

    return funds


def _apply_payment(debt: WorkingDebt, amount: float, period: int) -> None:
    debt.balance -= amount
    debt.total_paid += amount

    if debt.balance <= BALANCE_EPSILON:
        debt.balance = 0.0
        if not debt.paid_off_period:
            debt.paid_off_period = period


def simulate_payoff(debts: Sequence[Debt], config: Optional[PayoffConfig] = None) -> PayoffResult:
    """
    Simulate paying off a set of debts under a shared monthly budget.

    The run stops when every balance is paid or the horizon is reached.
    Reaching the horizon is not an error: the result comes back with
    converged=False and whatever balances remain.

    Args:
        debts: Debts to pay off, in input order
        config: Extra payments, retention policy, strategy and horizon

    Returns:
        PayoffResult with one record per simulated period
    """
    config = config or PayoffConfig()
    working = _prioritize(debts, config.strategy)

    if not working:
        return PayoffResult(
            schedule=(), debts=(), total_periods=0, total_paid=0.0, total_interest=0.0, converged=True
        )

    # Only used by the fixed-total policy
    total_budget = sum(d.minimum_payment for d in working) + config.extra_monthly

    schedule: List[PayoffMonthRecord] = []
    period = 0

    while any(d.is_active for d in working) and period < config.horizon:
        period += 1
        interest = [0.0] * len(working)
        payments = [0.0] * len(working)

        for i, debt in enumerate(working):
            if debt.balance > 0:
                interest[i] = debt.balance * debt.monthly_rate
                debt.balance += interest[i]
                debt.total_interest += interest[i]

        available = _available_funds(working, config, period, total_budget)

        # Minimums first
        for i, debt in enumerate(working):
            if debt.balance > 0:
                amount = min(debt.minimum_payment, debt.balance, available)
                _apply_payment(debt, amount, period)
                available -= amount
                payments[i] += amount

        # Surplus cascades down the priority list
        if available > BALANCE_EPSILON:
            for i, debt in enumerate(working):
                if debt.balance > 0:
                    amount = min(available, debt.balance)
                    _apply_payment(debt, amount, period)
                    available -= amount
                    payments[i] += amount

                    if available <= BALANCE_EPSILON:
                        break

        schedule.append(
            PayoffMonthRecord(
                period=period,
                total_balance=sum(d.balance for d in working),
                total_paid=sum(d.total_paid for d in working),
                total_interest=sum(d.total_interest for d in working),
                debts=tuple(
                    DebtPeriodSnapshot(
                        debt_id=d.debt_id,
                        name=d.name,
                        balance=d.balance,
                        payment=payments[i],
                        interest=interest[i],
                    )
                    for i, d in enumerate(working)
                ),
            )
        )

    converged = not any(d.is_active for d in working)
    if converged:
        logger.debug("Payoff converged after %d periods for %d debts", period, len(working))
    else:
        logger.warning(
            "Payoff did not converge within %d periods; %.2f still owed",
            config.horizon,
            sum(d.balance for d in working),
        )

    return PayoffResult(
        schedule=tuple(schedule),
        debts=tuple(
            DebtPayoffSummary(
                debt_id=d.debt_id,
                name=d.name,
                original_balance=d.original_balance,
                annual_rate=d.annual_rate,
                total_paid=d.total_paid,
                total_interest=d.total_interest,
                paid_off_period=d.paid_off_period,
                payoff_order=order,
            )
            for order, d in enumerate(working, start=1)
        ),
        total_periods=period,
        total_paid=sum(d.total_paid for d in working),
        total_interest=sum(d.total_interest for d in working),
        converged=converged,
    )


def simulate_avalanche(
    debts: Sequence[Debt], config: Optional[PayoffConfig] = None
) -> PayoffResult:
    """Return payoff simulation prioritizing highest interest rate first."""
    config = config or PayoffConfig()
    return simulate_payoff(debts, replace(config, strategy=PayoffStrategy.avalanche))


def simulate_snowball(
    debts: Sequence[Debt], config: Optional[PayoffConfig] = None
) -> PayoffResult:
    """Return payoff simulation prioritizing smallest balance first."""
    config = config or PayoffConfig()
    return simulate_payoff(debts, replace(config, strategy=PayoffStrategy.snowball))
