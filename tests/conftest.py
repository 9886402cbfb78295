"""Pytest configuration and shared fixtures."""

import sys
from datetime import date
from itertools import count
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add src and project root to Python path for imports
src_path = Path(__file__).parent.parent / "src"
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(src_path))
sys.path.insert(0, str(project_root))

# Import after path setup
from budgetlens.core.config import AppConfig  # noqa: E402
from budgetlens.core.models import Budget, Transaction  # noqa: E402

_ids = count(1)


def make_transaction(category, amount, type="expense", when=date(2024, 6, 15), description=""):
    """Build a transaction with a unique id."""
    return Transaction(
        id=f"txn_{next(_ids)}",
        amount=amount,
        type=type,
        category=category,
        date=when,
        description=description,
    )


def make_budget(name, amount, category_id=None, period="monthly", **kwargs):
    """Build a budget whose category id defaults to its lower-cased name."""
    return Budget(
        id=f"budget_{next(_ids)}",
        category_id=category_id or name.lower(),
        category_name=name,
        amount=amount,
        period=period,
        **kwargs,
    )


@pytest.fixture
def today():
    """Fixed reference date for window calculations."""
    return date(2024, 6, 20)


@pytest.fixture
def household_budgets():
    """Four budgets with mixed utilization."""
    return [
        make_budget("Food", 500.0),
        make_budget("Travel", 1000.0),
        make_budget("Rent", 1500.0),
        make_budget("Fun", 200.0),
    ]


@pytest.fixture
def household_transactions():
    """June 2024 transactions: Food over, Travel near limit, Rent on track, Fun unused."""
    return [
        make_transaction("Food", 350.0),
        make_transaction("Food", 250.0),
        make_transaction("Travel", 850.0),
        make_transaction("Rent", 600.0),
        make_transaction("Salary", 4000.0, type="income"),
    ]


@pytest.fixture
def test_client():
    """Create a test client around a fresh application."""
    from main import create_app

    app = create_app(AppConfig())

    with TestClient(app) as client:
        yield client
