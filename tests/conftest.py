"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from investpro.calculations.appraisal import (
    AppraisalInputs,
    YearlyData,
    default_inputs,
    run_appraisal_cached,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def clear_appraisal_cache():
    """Start each test with an empty memoization cache."""
    run_appraisal_cached.cache_clear()
    yield
    run_appraisal_cached.cache_clear()


@pytest.fixture
def base_inputs():
    """Textbook base case: 100k investment, five years of growing returns."""
    return default_inputs()


@pytest.fixture
def make_inputs():
    """Build inputs from (investment, return, write_off) tuples."""

    def _make(rows, cost_of_capital=10, tax_rate=0, inflation_rate=0):
        return AppraisalInputs(
            cost_of_capital=cost_of_capital,
            tax_rate=tax_rate,
            inflation_rate=inflation_rate,
            yearly_data=tuple(
                YearlyData(year=i, investment=inv, return_=ret, write_off=wo)
                for i, (inv, ret, wo) in enumerate(rows)
            ),
        )

    return _make
