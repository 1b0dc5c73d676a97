"""
Calculation Data Model

Inputs and results shared by the amortization, payoff and consolidation
calculators. Inputs and results are frozen; WorkingDebt is the only mutable
record and never leaves a single simulation run.
"""

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

# A balance at or below one cent counts as paid off
BALANCE_EPSILON = 0.01

# 50 years of monthly periods before a payoff plan is declared non-converging
MAX_PAYOFF_MONTHS = 600


class RateBasis(str, enum.Enum):
    """Compounding convention of a quoted annual rate."""

    monthly = "monthly"
    daily = "daily"
    annual = "annual"


class RetentionPolicy(str, enum.Enum):
    """What happens to a paid-off debt's minimum payment."""

    fixed_total = "fixed_total"  # freed minimums roll into remaining debts
    decreasing_total = "decreasing_total"  # freed minimums leave the budget


class PayoffStrategy(str, enum.Enum):
    """Order in which surplus funds are directed at debts."""

    avalanche = "avalanche"  # highest rate first
    snowball = "snowball"  # smallest balance first


@dataclass(frozen=True)
class Debt:
    """A single outstanding debt as entered by the user."""

    id: str
    name: str
    balance: float
    minimum_payment: float
    annual_rate: float  # Nominal annual rate in percent (e.g., 19.99)


@dataclass
class WorkingDebt:
    """Run-scoped mutable copy of a Debt used by the payoff simulation."""

    debt_id: str
    name: str
    input_index: int
    original_balance: float
    annual_rate: float
    monthly_rate: float
    minimum_payment: float
    balance: float
    total_paid: float = 0.0
    total_interest: float = 0.0
    paid_off_period: int = 0  # 0 until the balance reaches zero

    @property
    def is_active(self) -> bool:
        return self.balance > BALANCE_EPSILON


@dataclass(frozen=True)
class LoanTerms:
    """
    Terms of a single loan.

    Exactly one of term_periods and payment is given; the other is what the
    solver works out.
    """

    principal: float
    annual_rate: float
    basis: RateBasis = RateBasis.monthly
    term_periods: Optional[int] = None
    payment: Optional[float] = None
    extra_payment: float = 0.0
    start_date: Optional[date] = None
    fee_percent: float = 0.0  # Upfront fee, only used for consolidation loans


@dataclass(frozen=True)
class ScheduleRow:
    """One period of an amortization schedule."""

    period: int
    payment: float
    principal: float
    interest: float
    balance: float
    extra_payment: float = 0.0
    cumulative_interest: float = 0.0
    cumulative_principal: float = 0.0
    payment_date: Optional[date] = None

    @property
    def total_payment(self) -> float:
        return self.payment + self.extra_payment


@dataclass(frozen=True)
class AnnualSummary:
    """Schedule rows rolled up into one year."""

    year: int
    interest: float
    principal: float
    ending_balance: float
    payments: int


@dataclass(frozen=True)
class AmortizationResult:
    """Solved loan: payment, term, totals and the schedule they came from."""

    principal: float
    period_rate: float
    monthly_payment: float
    total_paid: float
    total_interest: float
    term_periods: int
    schedule: Tuple[ScheduleRow, ...] = ()
    real_apr: Optional[float] = None
    payoff_date: Optional[date] = None


@dataclass(frozen=True)
class PayoffConfig:
    """Extra money and budgeting rules for a payoff simulation."""

    extra_monthly: float = 0.0
    extra_yearly: float = 0.0  # Added every 12th period
    one_time_amount: float = 0.0
    one_time_period: int = 1
    retention: RetentionPolicy = RetentionPolicy.fixed_total
    strategy: PayoffStrategy = PayoffStrategy.avalanche
    horizon: int = MAX_PAYOFF_MONTHS


@dataclass(frozen=True)
class DebtPeriodSnapshot:
    """State of one debt at the end of a simulated period."""

    debt_id: str
    name: str
    balance: float
    payment: float
    interest: float


@dataclass(frozen=True)
class PayoffMonthRecord:
    """Aggregate and per-debt state at the end of a simulated period."""

    period: int
    total_balance: float
    total_paid: float
    total_interest: float
    debts: Tuple[DebtPeriodSnapshot, ...]


@dataclass(frozen=True)
class DebtPayoffSummary:
    """Lifetime totals for one debt after a payoff simulation."""

    debt_id: str
    name: str
    original_balance: float
    annual_rate: float
    total_paid: float
    total_interest: float
    paid_off_period: int  # 0 if never paid off within the horizon
    payoff_order: int  # Position in the priority order, starting at 1


@dataclass(frozen=True)
class PayoffResult:
    """Output of a payoff simulation."""

    schedule: Tuple[PayoffMonthRecord, ...]
    debts: Tuple[DebtPayoffSummary, ...]
    total_periods: int
    total_paid: float
    total_interest: float
    converged: bool


@dataclass(frozen=True)
class CurrentDebtPayoff:
    """Payoff of one existing debt at its own minimum payment."""

    debt_id: str
    name: str
    balance: float
    monthly_payment: float
    annual_rate: float
    months: int
    total_interest: float
    total_paid: float
    converges: bool = True


@dataclass(frozen=True)
class ConsolidationVerdict:
    """Current debts versus a single consolidation loan."""

    current: AmortizationResult
    candidate: AmortizationResult
    worth_it: bool
    monthly_payment_delta: float  # current - candidate; positive means savings
    total_interest_delta: float
    term_delta: int
    loan_amount: float
    loan_fee: float
    candidate_cost: float  # Interest plus financed fee
    real_apr: float
    irr_apr: Optional[float] = None
    current_total_balance: float = 0.0
    current_weighted_apr: float = 0.0
    current_converges: bool = True
    current_breakdown: Tuple[CurrentDebtPayoff, ...] = field(default_factory=tuple)
