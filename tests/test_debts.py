"""Debt service tests."""

from __future__ import annotations

import pytest

from debtplan.models import InsufficientSurplus, PlanResult, Strategy
from debtplan.services.debts import persist_projection, simulate_avalanche, simulate_snowball


class _RecordingWriter:
    def __init__(self) -> None:
        self.plans: list[PlanResult] = []

    def write_plan(self, *, plan: PlanResult) -> None:
        self.plans.append(plan)


def test_simulate_avalanche_orders_by_apr(debt_factory):
    """Verify avalanche sends the surplus to the highest APR first."""
    debts = [
        debt_factory(name="Medium", principal=5000.0, apr=18.0, minimum_payment=100.0),
        debt_factory(name="Small", principal=1000.0, apr=12.0, minimum_payment=50.0),
        debt_factory(name="Large", principal=3000.0, apr=15.0, minimum_payment=75.0),
    ]

    plan = simulate_avalanche(debts, 425.0)

    assert plan.strategy is Strategy.AVALANCHE
    first = plan.timeline[0]
    assert first.entry_for("Medium").extra_payment == 200.0
    assert first.entry_for("Small").extra_payment == 0.0
    assert first.entry_for("Large").extra_payment == 0.0


def test_simulate_snowball_orders_by_balance(debt_factory):
    """Verify snowball sends the surplus to the smallest balance first."""
    debts = [
        debt_factory(name="Medium", principal=5000.0, apr=18.0, minimum_payment=100.0),
        debt_factory(name="Small", principal=1000.0, apr=12.0, minimum_payment=50.0),
        debt_factory(name="Large", principal=3000.0, apr=15.0, minimum_payment=75.0),
    ]

    plan = simulate_snowball(debts, 425.0)

    assert plan.strategy is Strategy.SNOWBALL
    first = plan.timeline[0]
    assert first.entry_for("Small").extra_payment == 200.0
    assert first.entry_for("Medium").extra_payment == 0.0


def test_snowball_clears_small_debt_sooner(debt_factory):
    debts = [
        debt_factory(name="Big", principal=5000.0, apr=20.0, minimum_payment=100.0),
        debt_factory(name="Little", principal=500.0, apr=10.0, minimum_payment=25.0),
    ]

    avalanche = simulate_avalanche(debts, 325.0)
    snowball = simulate_snowball(debts, 325.0)

    def cleared_month(plan: PlanResult, name: str) -> int:
        return next(r.cleared_month for r in plan.cleared_debts if r.name == name)

    assert cleared_month(snowball, "Little") < cleared_month(avalanche, "Little")
    assert avalanche.total_interest_paid < snowball.total_interest_paid


def test_persist_projection_hands_plan_to_writer(debt_factory):
    writer = _RecordingWriter()

    outcome = persist_projection(
        writer=writer, debts=[debt_factory()], strategy="Avalanche", surplus=150.0
    )

    assert isinstance(outcome, PlanResult)
    assert writer.plans == [outcome]


def test_persist_projection_skips_writer_on_failure(debt_factory):
    writer = _RecordingWriter()

    outcome = persist_projection(
        writer=writer,
        debts=[debt_factory(minimum_payment=300.0)],
        strategy=Strategy.SNOWBALL,
        surplus=100.0,
    )

    assert isinstance(outcome, InsufficientSurplus)
    assert writer.plans == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Avalanche", Strategy.AVALANCHE),
        ("avalanche", Strategy.AVALANCHE),
        (" SNOWBALL ", Strategy.SNOWBALL),
        (Strategy.SNOWBALL, Strategy.SNOWBALL),
    ],
)
def test_strategy_parse(raw, expected):
    assert Strategy.parse(raw) is expected


def test_strategy_parse_rejects_unknown():
    with pytest.raises(ValueError, match="Avalanche, Snowball"):
        Strategy.parse("custom")
