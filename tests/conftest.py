"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from decimal import Decimal
from typing import Callable, List
from fastapi.testclient import TestClient
from guidance_engine.api.main import create_app
from guidance_engine.domain.models import Transaction, TransactionType


# Frozen evaluation time shared by every test
NOW = datetime(2025, 1, 1, 0, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def make_expenses() -> Callable[..., List[Transaction]]:
    """
    Build a trailing history of expenses.

    30 expenses of `per_day` dated `now` give a daily spend of exactly `per_day`
    over the 30-day lookback window.
    """

    def _make(per_day: int, count: int = 30, when: datetime = NOW) -> List[Transaction]:
        return [
            Transaction(
                id=f"exp_{i}",
                type=TransactionType.EXPENSE,
                amount=Decimal(per_day),
                date=when,
                category="Food",
            )
            for i in range(count)
        ]

    return _make
