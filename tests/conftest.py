"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from debtcalc.calculations.models import Debt


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def credit_cards():
    """Two credit cards that pay off at their minimums."""
    return [
        Debt(id="1", name="Visa", balance=5000, minimum_payment=150, annual_rate=22.0),
        Debt(id="2", name="Store Card", balance=3000, minimum_payment=100, annual_rate=18.0),
    ]


@pytest.fixture
def avalanche_pair():
    """Equal balances and minimums, different rates; low rate listed first."""
    return [
        Debt(id="b", name="B", balance=1000, minimum_payment=50, annual_rate=10.0),
        Debt(id="a", name="A", balance=1000, minimum_payment=50, annual_rate=20.0),
    ]
