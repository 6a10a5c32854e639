"""Pytest configuration and shared fixtures for DebtPlan tests.

Provides debt factories, a float comparison helper, and isolation for the
``debtplan`` logger so tests that configure logging do not leak handlers.
"""

from __future__ import annotations

import logging

import pytest

from debtplan.models import DebtInput, DebtRecord


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert abs(actual - expected) <= tolerance, (
        f"Expected {expected}, got {actual} (diff: {abs(actual - expected)}, tolerance: {tolerance})"
    )


@pytest.fixture
def debt_factory():
    """Build ``DebtInput`` values with sensible defaults."""

    def _make(name: str = "Card", principal: float = 1000.0, apr: float = 12.0, minimum_payment: float = 50.0):
        return DebtInput(name=name, principal=principal, apr=apr, minimum_payment=minimum_payment)

    return _make


@pytest.fixture
def record_factory():
    """Build ``DebtRecord`` values with sensible defaults."""

    def _make(
        name: str = "Loan",
        amount: float = 1000.0,
        apr: float = 12.0,
        minimum_payment: float = 50.0,
        **overrides,
    ):
        return DebtRecord(name=name, amount=amount, apr=apr, minimum_payment=minimum_payment, **overrides)

    return _make


@pytest.fixture
def divergent_debts(debt_factory):
    """High-APR large debt plus a low-APR small one: the strategies disagree."""

    return [
        debt_factory(name="A", principal=1000.0, apr=20.0, minimum_payment=50.0),
        debt_factory(name="B", principal=200.0, apr=5.0, minimum_payment=20.0),
    ]


@pytest.fixture(autouse=True)
def _isolate_debtplan_logger():
    """Detach any handlers installed by setup_logging during a test."""

    yield
    logger = logging.getLogger("debtplan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
