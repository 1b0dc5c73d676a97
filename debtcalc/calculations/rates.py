"""
Rate Conversions

Converts a nominal annual percentage rate into the rate applied once per
monthly period, according to how the lender compounds.
"""

from debtcalc.calculations.models import RateBasis

PERIODS_PER_YEAR = 12
DAYS_PER_YEAR = 365


def effective_period_rate(annual_rate: float, basis: RateBasis = RateBasis.monthly) -> float:
    """
    Convert a nominal annual rate to an effective monthly rate.

    Args:
        annual_rate: Nominal annual rate as a percentage (e.g., 6.5 for 6.5%)
        basis: Compounding convention of the quoted rate

    Returns:
        Per-period rate as decimal (e.g., 0.005 for 0.5% per month)
    """
    rate = annual_rate / 100
    basis = RateBasis(basis)

    if basis == RateBasis.daily:
        # Compound the daily rate up to a month-equivalent period
        return (1 + rate / DAYS_PER_YEAR) ** (DAYS_PER_YEAR / PERIODS_PER_YEAR) - 1
    if basis == RateBasis.annual:
        return (1 + rate) ** (1 / PERIODS_PER_YEAR) - 1
    return rate / PERIODS_PER_YEAR


def effective_annual_rate(period_rate: float) -> float:
    """Compound a monthly rate to an effective annual rate (as decimal)."""
    return (1 + period_rate) ** PERIODS_PER_YEAR - 1

