"""
Amortization Schedule

Expands a solved loan into its period-by-period ledger and rolls the ledger
up into annual totals.
"""

from typing import Dict, List, Optional, Sequence
from datetime import date
from dateutil.relativedelta import relativedelta

from debtcalc.calculations.models import AnnualSummary, BALANCE_EPSILON, ScheduleRow


def generate_schedule(
    principal: float,
    period_rate: float,
    term_periods: int,
    payment: float,
    extra_payment: float = 0.0,
    start_date: Optional[date] = None,
) -> List[ScheduleRow]:
    """
    Generate the amortization schedule for a level-payment loan.

    Each period charges interest on the opening balance and applies the rest
    of the payment (plus any extra principal) to the balance. The period that
    would overpay is trimmed so the loan ends at exactly zero.

    Args:
        principal: Opening loan balance
        period_rate: Interest rate per period as decimal
        term_periods: Maximum number of periods to generate
        payment: Scheduled payment per period
        extra_payment: Additional principal paid each period
        start_date: Date of first payment; rows are undated when omitted

    Returns:
        List of schedule rows, period 1 first
    """
    schedule = []
    balance = principal
    cumulative_interest = 0.0
    cumulative_principal = 0.0

    for period in range(1, term_periods + 1):
        interest = balance * period_rate
        principal_pmt = min(payment - interest, balance)
        period_payment = payment
        extra = extra_payment

        if principal_pmt >= balance:
            # Final period: pay only what is owed
            principal_pmt = balance
            period_payment = principal_pmt + interest
            extra = 0.0
        elif principal_pmt + extra > balance:
            extra = balance - principal_pmt

        balance -= principal_pmt + extra

        if balance <= BALANCE_EPSILON:
            # Fold float drift into the last payment instead of leaving a residue
            principal_pmt += balance
            period_payment += balance
            balance = 0.0

        cumulative_interest += interest
        cumulative_principal += principal_pmt + extra

        schedule.append(
            ScheduleRow(
                period=period,
                payment=period_payment,
                principal=principal_pmt,
                interest=interest,
                balance=balance,
                extra_payment=extra,
                cumulative_interest=cumulative_interest,
                cumulative_principal=cumulative_principal,
                payment_date=(
                    start_date + relativedelta(months=period - 1) if start_date else None
                ),
            )
        )

        if balance == 0.0:
            break

    return schedule


def total_paid(schedule: Sequence[ScheduleRow]) -> float:
    """Total cash paid over the schedule, extra principal included."""
    return sum(row.total_payment for row in schedule)


def total_interest(schedule: Sequence[ScheduleRow]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row.interest for row in schedule)


def summarize_by_year(schedule: Sequence[ScheduleRow]) -> List[AnnualSummary]:
    """
    Roll schedule rows up into yearly totals.

    Dated schedules are grouped by calendar year; undated ones by loan year
    (periods 1-12 are year 1).
    """
    years: Dict[int, Dict] = {}

    for row in schedule:
        if row.payment_date is not None:
            year = row.payment_date.year
        else:
            year = (row.period - 1) // 12 + 1

        bucket = years.setdefault(
            year, {"interest": 0.0, "principal": 0.0, "ending_balance": 0.0, "payments": 0}
        )
        bucket["interest"] += row.interest
        bucket["principal"] += row.principal + row.extra_payment
        bucket["ending_balance"] = row.balance
        bucket["payments"] += 1

    return [AnnualSummary(year=year, **totals) for year, totals in sorted(years.items())]
