"""
Tests for rate conversion, amortization and IRR calculations.
"""

import math
import pytest
from datetime import date

from debtcalc.calculations.amortization import (
    calculate_payment,
    calculate_term,
    remaining_balance,
    solve_amortization,
    solve_loan,
)
from debtcalc.calculations.errors import InsufficientPaymentError, InvalidTermError
from debtcalc.calculations.irr import calculate_irr, calculate_npv, loan_cash_flows
from debtcalc.calculations.models import LoanTerms, RateBasis
from debtcalc.calculations.rates import effective_annual_rate, effective_period_rate
from debtcalc.calculations.schedule import generate_schedule, summarize_by_year


class TestRateConversion:
    """Test nominal annual rate to per-period rate conversion."""

    def test_monthly_basis(self):
        assert effective_period_rate(12.0, RateBasis.monthly) == pytest.approx(0.01)

    def test_daily_basis(self):
        """Daily compounding costs slightly more than monthly."""
        rate = effective_period_rate(10.0, RateBasis.daily)
        expected = (1 + 0.10 / 365) ** (365 / 12) - 1
        assert rate == pytest.approx(expected)
        assert rate > 0.10 / 12

    def test_annual_basis(self):
        """Twelve compounded periods reproduce the annual rate."""
        rate = effective_period_rate(12.0, RateBasis.annual)
        assert (1 + rate) ** 12 == pytest.approx(1.12)
        assert rate < 0.01

    def test_basis_accepts_plain_strings(self):
        assert effective_period_rate(12.0, "monthly") == pytest.approx(0.01)

    @pytest.mark.parametrize("basis", list(RateBasis))
    def test_zero_rate(self, basis):
        assert effective_period_rate(0.0, basis) == 0.0

    def test_effective_annual_rate(self):
        assert effective_annual_rate(0.01) == pytest.approx(0.126825, abs=1e-6)


class TestAmortization:
    """Test loan amortization calculations."""

    def test_calculate_payment(self):
        """Test monthly payment calculation."""
        # $1M loan at 5% for 30 years
        payment = calculate_payment(1000000, 0.05 / 12, 360)
        # Expected payment around $5,368/month
        assert abs(payment - 5368.22) < 0.01

    def test_calculate_payment_invalid_term(self):
        with pytest.raises(InvalidTermError):
            calculate_payment(10000, 0.01, 0)
        with pytest.raises(InvalidTermError):
            calculate_payment(10000, 0.01, -12)

    def test_worked_example(self):
        """$10,000 at 10% over 60 months."""
        result = solve_amortization(10000, 10.0, RateBasis.monthly, term_periods=60)
        assert abs(result.monthly_payment - 212.47) < 0.01
        assert abs(result.total_interest - 2748.23) < 0.50
        assert result.term_periods == 60
        assert len(result.schedule) == 60

    def test_zero_rate(self):
        result = solve_amortization(1200, 0.0, term_periods=12)
        assert result.monthly_payment == 100.0
        assert result.total_interest == 0
        assert result.total_paid == pytest.approx(1200)
        assert result.term_periods == 12

    def test_zero_rate_payment_known(self):
        """Last payment is only the remainder."""
        result = solve_amortization(1000, 0.0, payment=300)
        assert result.term_periods == 4
        assert result.schedule[-1].payment == pytest.approx(100)
        assert result.schedule[-1].balance == 0.0

    def test_insufficient_payment_at_interest(self):
        """A payment equal to first-month interest never amortizes."""
        with pytest.raises(InsufficientPaymentError) as exc_info:
            solve_amortization(5000, 24.0, RateBasis.monthly, payment=100.00)
        assert exc_info.value.minimum_payment == pytest.approx(100.00)

    def test_insufficient_payment_below_interest(self):
        with pytest.raises(InsufficientPaymentError) as exc_info:
            solve_amortization(5000, 24.0, RateBasis.monthly, payment=80.00)
        assert exc_info.value.minimum_payment == pytest.approx(100.00)
        assert "100.00" in str(exc_info.value)

    def test_payment_just_above_interest(self):
        result = solve_amortization(5000, 24.0, RateBasis.monthly, payment=100.01)
        expected = math.ceil(math.log(100.01 / 0.01) / math.log(1.02))
        assert result.term_periods == expected
        assert result.schedule[-1].balance == 0.0

    def test_exactly_one_unknown_required(self):
        with pytest.raises(ValueError):
            solve_amortization(10000, 10.0)
        with pytest.raises(ValueError):
            solve_amortization(10000, 10.0, term_periods=60, payment=212.47)

    @pytest.mark.parametrize(
        "principal,annual_rate,term",
        [(10000, 10.0, 60), (250000, 6.5, 360), (5000, 18.0, 24), (800, 29.99, 7)],
    )
    def test_term_payment_round_trip(self, principal, annual_rate, term):
        """Feeding the solved payment back recovers the term."""
        solved = solve_amortization(principal, annual_rate, term_periods=term)
        back = solve_amortization(principal, annual_rate, payment=solved.monthly_payment)
        assert abs(back.term_periods - term) <= 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"term_periods": 60},
            {"term_periods": 360, "basis": RateBasis.daily},
            {"payment": 333.33, "basis": RateBasis.annual},
            {"term_periods": 120, "extra_payment": 250},
        ],
    )
    def test_total_paid_conserves_principal(self, kwargs):
        result = solve_amortization(20000, 7.25, **kwargs)
        assert abs(result.total_paid - (20000 + result.total_interest)) < 0.01

    def test_final_balance_is_zero(self):
        result = solve_amortization(100000, 6.0, term_periods=60)
        assert result.schedule[-1].balance == 0.0
        # Last payment is not larger than the scheduled payment
        assert result.schedule[-1].payment <= result.monthly_payment + 0.01

    def test_extra_payment_shortens_loan(self):
        base = solve_amortization(10000, 10.0, term_periods=60)
        faster = solve_amortization(10000, 10.0, term_periods=60, extra_payment=100)
        assert faster.term_periods < base.term_periods
        assert faster.total_interest < base.total_interest
        assert faster.monthly_payment == base.monthly_payment

    def test_dated_schedule(self):
        result = solve_amortization(1200, 0.0, term_periods=12, start_date=date(2025, 1, 15))
        assert result.schedule[0].payment_date == date(2025, 1, 15)
        assert result.schedule[-1].payment_date == date(2025, 12, 15)
        assert result.payoff_date == date(2025, 12, 15)

    def test_solve_loan_from_terms(self):
        terms = LoanTerms(principal=10000, annual_rate=10.0, term_periods=60)
        assert solve_loan(terms).monthly_payment == pytest.approx(212.47, abs=0.01)

    def test_calculate_term(self):
        assert calculate_term(10000, 0.10 / 12, 212.48) == 60

    def test_remaining_balance(self):
        rate = 0.06 / 12
        payment = calculate_payment(100000, rate, 60)
        assert abs(remaining_balance(100000, rate, payment, 60)) < 0.01
        # Half-way balance is well above half the principal
        assert remaining_balance(100000, rate, payment, 30) > 50000

    def test_remaining_balance_grows_when_payment_short(self):
        assert remaining_balance(10000, 0.02, 150, 12) > 10000


class TestSchedule:
    """Test schedule generation and annual roll-up."""

    def test_schedule_balances_chain(self):
        schedule = generate_schedule(10000, 0.01, 24, calculate_payment(10000, 0.01, 24))
        previous = 10000
        for row in schedule:
            assert row.interest == pytest.approx(previous * 0.01)
            assert row.balance == pytest.approx(max(0.0, previous - row.principal))
            previous = row.balance
        assert schedule[-1].balance == 0.0

    def test_schedule_stops_when_paid(self):
        """Term is only an upper bound."""
        schedule = generate_schedule(1000, 0.0, 100, 250)
        assert len(schedule) == 4

    def test_cumulative_columns(self):
        schedule = generate_schedule(10000, 0.01, 24, calculate_payment(10000, 0.01, 24))
        assert schedule[-1].cumulative_principal == pytest.approx(10000)
        assert schedule[-1].cumulative_interest == pytest.approx(sum(r.interest for r in schedule))

    def test_extra_payment_is_trimmed_in_final_period(self):
        schedule = generate_schedule(1000, 0.0, 12, 100, extra_payment=300)
        assert len(schedule) == 3
        last = schedule[-1]
        assert last.principal + last.extra_payment == pytest.approx(200)
        assert last.balance == 0.0

    def test_annual_summary_by_loan_year(self):
        schedule = generate_schedule(12000, 0.005, 24, calculate_payment(12000, 0.005, 24))
        summary = summarize_by_year(schedule)
        assert [s.year for s in summary] == [1, 2]
        assert [s.payments for s in summary] == [12, 12]
        assert summary[-1].ending_balance == 0.0
        assert sum(s.principal for s in summary) == pytest.approx(12000)

    def test_annual_summary_by_calendar_year(self):
        schedule = generate_schedule(1200, 0.0, 12, 100, start_date=date(2025, 7, 1))
        summary = summarize_by_year(schedule)
        assert [s.year for s in summary] == [2025, 2026]
        assert [s.payments for s in summary] == [6, 6]


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Test IRR calculation with simple cash flows."""
        # Investment of 100, returns of 110 after 1 period = 10% return
        irr = calculate_irr([-100, 110])
        assert abs(irr - 0.10) < 0.001

    def test_calculate_npv(self):
        """Test NPV calculation."""
        npv = calculate_npv([-100, 50, 50, 50], 0.10)
        # NPV should be positive since returns exceed cost
        assert npv > 0

    def test_loan_irr_matches_period_rate(self):
        """Without fees the borrower's IRR is the loan rate."""
        result = solve_amortization(10000, 12.0, term_periods=12)
        flows = loan_cash_flows(10000, [row.payment for row in result.schedule])
        assert calculate_irr(flows) == pytest.approx(0.01, abs=1e-6)

    def test_irr_requires_sign_change(self):
        with pytest.raises(ValueError):
            calculate_irr([100, 100, 100])
        with pytest.raises(ValueError):
            calculate_irr([-100])
