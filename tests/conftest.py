"""Pytest configuration and shared fixtures for FinLearn tests.

Provides an isolated SQLite database, a session factory for repositories,
debt factories and small numeric helpers.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from finlearn import models  # noqa: F401  (registers tables)
from finlearn.infra.database import create_session_factory
from finlearn.models.debt import Debt, DebtType


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config at a temporary data dir and detach logging handlers afterwards."""

    monkeypatch.setenv("FINLEARN_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.delenv("FINLEARN_DATABASE_URL", raising=False)
    monkeypatch.delenv("FINLEARN_DEV_MODE", raising=False)
    yield
    app_logger = logging.getLogger("finlearn")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database with all tables for each test."""

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Factory for building Debt records with sensible defaults.

    Returns:
        Callable: Function that creates Debt instances
    """

    def _create_debt(
        name: str = "Test Debt",
        balance: float = 1000.00,
        interest_rate: float = 18.0,
        minimum_payment: float = 25.00,
        type: DebtType | str = DebtType.CREDIT_CARD,
        is_deductible: bool = False,
    ) -> Debt:
        return Debt(
            name=name,
            balance=balance,
            interest_rate=interest_rate,
            minimum_payment=minimum_payment,
            type=type,
            is_deductible=is_deductible,
        )

    return _create_debt


@pytest.fixture
def two_debts(debt_factory) -> list[Debt]:
    """A low-rate loan and a higher-rate card, in that input order."""

    return [
        debt_factory(
            name="Test1",
            balance=10000,
            interest_rate=5,
            minimum_payment=200,
            type="personal_loan",
        ),
        debt_factory(
            name="Test2",
            balance=5000,
            interest_rate=15,
            minimum_payment=150,
            type="credit_card",
        ),
    ]


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance (default one cent)."""
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
