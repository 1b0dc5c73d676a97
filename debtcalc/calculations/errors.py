"""
Calculation Errors

Typed failures raised by the solvers. Both subclass ValueError so callers
that already handle bad input keep working.
"""


class CalculationError(ValueError):
    """Base class for input combinations the solvers cannot satisfy."""


class InvalidTermError(CalculationError):
    """Raised when a term-known solve is given a term of zero or less."""

    def __init__(self, term: int):
        self.term = term
        super().__init__(f"Term must be positive, got {term}")


class InsufficientPaymentError(CalculationError):
    """
    Raised when a fixed payment does not cover first-period interest.

    The loan would never amortize, so the minimum viable payment is carried
    along for the caller to report.
    """

    def __init__(self, payment: float, minimum_payment: float):
        self.payment = payment
        self.minimum_payment = minimum_payment
        super().__init__(
            f"Payment of {payment:.2f} does not cover interest; "
            f"payment must exceed {minimum_payment:.2f}"
        )
