"""
Pytest configuration and shared fixtures.
"""

import pytest

from loan_sim.engine import calculate
from loan_sim_web.app import app as flask_app


@pytest.fixture
def standard_result():
    """100,000 financed at 1% per month over 12 months."""
    return calculate(100000, 0, 12, 1)


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as client:
        yield client
