"""
Financial Calculation Engine

Pure calculation modules behind the loan and debt calculators: rate
conversion, amortization, payoff simulation and consolidation comparison.
Nothing here performs I/O; every function returns a fresh result.
"""

from debtcalc.calculations import amortization, avalanche, consolidation, irr, rates, schedule
from debtcalc.calculations.amortization import solve_amortization, solve_loan
from debtcalc.calculations.avalanche import simulate_avalanche, simulate_payoff, simulate_snowball
from debtcalc.calculations.consolidation import compare_consolidation
from debtcalc.calculations.errors import (
    CalculationError,
    InsufficientPaymentError,
    InvalidTermError,
)

__all__ = [
    "amortization",
    "avalanche",
    "consolidation",
    "irr",
    "rates",
    "schedule",
    "solve_amortization",
    "solve_loan",
    "simulate_avalanche",
    "simulate_payoff",
    "simulate_snowball",
    "compare_consolidation",
    "CalculationError",
    "InsufficientPaymentError",
    "InvalidTermError",
]
