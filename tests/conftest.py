"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

from fastapi.testclient import TestClient

from app.main import app
from app.calculations.amortization import LoanTerms
from app.calculations.rent_vs_buy import RentVsBuyAssumptions


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def first_payment_date():
    return date(2025, 1, 1)


@pytest.fixture
def standard_loan():
    """$520,000 at 7.25% for 30 years (20% down on $650,000)."""
    return LoanTerms(principal=520000, annual_rate=7.25, term_years=30)


@pytest.fixture
def rent_vs_buy_assumptions():
    """Southern California rent vs buy defaults."""
    return RentVsBuyAssumptions(
        home_price=650000,
        down_payment=130000,
        interest_rate=7.25,
        loan_term=30,
        monthly_rent=3200,
        property_tax_rate=1.21,
        home_insurance_rate=0.45,
        hoa_fees=150,
        maintenance_rate=1.0,
        closing_costs=15000,
        rent_increase=3.0,
        home_appreciation=3.5,
        investment_return=7.0,
        marginal_tax_rate=24.0,
        years_to_analyze=10,
    )
