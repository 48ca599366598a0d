"""
Shared fixtures for the calculator hub tests.
"""

import pytest

import app as web
import catalog


SAMPLE_CATALOG = """
CATEGORY: Finance
Sub-category: Loans & Debt
Loan Payment
Mortgage Amortization Calculator
401(k)

Sub-category: Savings
Savings Goal

CATEGORY: Health & Fitness
Sub-category: Body
BMI

CATEGORY: Mathematics
Sub-category: Everyday Math
Percentage
Tip
"""


@pytest.fixture
def sample_text():
    """Small catalog covering headers, suffixing and blank lines."""
    return SAMPLE_CATALOG


@pytest.fixture
def sample_catalog(sample_text):
    return catalog.parse_catalog(sample_text)


@pytest.fixture
def full_catalog():
    """The catalog shipped in data/."""
    return catalog.load_catalog()


@pytest.fixture
def client():
    """Flask test client against the shipped catalog."""
    web.app.config["TESTING"] = True
    with web.app.test_client() as c:
        yield c
