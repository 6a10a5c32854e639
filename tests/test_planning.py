"""Tests for plan assembly, strategy comparison and monthly payment cycles."""

from __future__ import annotations

import pytest

from debtplan.models import (
    ClearedDebtRecord,
    ExpenseEntry,
    IncomeEntry,
    InsufficientSurplus,
    NoDebts,
    PlanResult,
    Strategy,
)
from debtplan.services.planning import (
    NO_SURPLUS_MESSAGE,
    NoSurplus,
    PaymentCycle,
    PlanReport,
    apply_monthly_payment,
    build_plan,
    compare_strategies,
    forget_cleared,
    pay_off,
    plan_from_cashflow,
)
from tests.conftest import assert_float_equal


class TestBuildPlan:
    """build_plan merges stored records with a fresh simulation."""

    def test_no_surplus(self, record_factory):
        result = build_plan(records=[record_factory()], surplus=0.0, strategy="Avalanche")

        assert isinstance(result, NoSurplus)
        assert result.kind == "NoSurplus"
        assert result.message == NO_SURPLUS_MESSAGE

    def test_report_totals(self, record_factory):
        records = [
            record_factory(name="Card", amount=1000.0, apr=20.0, minimum_payment=50.0),
            record_factory(name="Phone", amount=200.0, apr=5.0, minimum_payment=20.0),
        ]

        report = build_plan(records=records, surplus=100.0, strategy=Strategy.SNOWBALL, currency="USD")

        assert isinstance(report, PlanReport)
        assert report.plan.strategy is Strategy.SNOWBALL
        assert report.currency == "USD"
        assert report.surplus == 100.0
        assert report.total_principal == 1200.0
        assert report.total_future_interest == report.plan.total_interest_paid
        assert_float_equal(report.total_debt, 1200.0 + report.total_future_interest)
        assert report.best_strategy is Strategy.AVALANCHE

    def test_existing_cleared_debts_listed_first(self, record_factory):
        records = [
            record_factory(name="Card", amount=1000.0, apr=12.0, minimum_payment=50.0),
            record_factory(
                name="Old",
                amount=0.0,
                apr=0.0,
                minimum_payment=100.0,
                cleared=True,
                original_amount=500.0,
                total_paid=450.0,
            ),
        ]

        report = build_plan(records=records, surplus=200.0, strategy="Avalanche")

        assert report.cleared_debts[0] == ClearedDebtRecord(
            name="Old", cleared_month=0, total_paid=450.0, amount_saved=50.0
        )
        assert report.cleared_debts[1].name == "Card"
        assert report.cleared_debts[1].cleared_month == report.plan.months
        assert report.total_principal == 1000.0

    def test_forgotten_names_hidden(self, record_factory):
        records = [
            record_factory(name="Card", amount=300.0, apr=0.0, minimum_payment=50.0),
            record_factory(name="Old", amount=0.0, cleared=True),
        ]

        report = build_plan(records=records, surplus=100.0, strategy="Avalanche", forgotten=["Old", "Card"])

        assert report.cleared_debts == ()
        assert report.plan.cleared_debts[0].name == "Card"

    def test_only_one_time_debts(self, record_factory):
        records = [
            record_factory(name="Tuition", amount=5000.0, apr=0.0, minimum_payment=0.0, payment_type="one-time"),
            record_factory(name="Gift", amount=100.0, apr=0.0, minimum_payment=0.0, payment_type="one-time"),
        ]

        report = build_plan(records=records, surplus=200.0, strategy="Snowball")

        assert isinstance(report, PlanReport)
        assert report.plan.months == 0
        assert report.plan.timeline == ()
        assert report.total_principal == 5100.0
        assert report.total_debt == 5100.0
        assert [(s.name, s.shortage) for s in report.one_time_shortages] == [("Tuition", 4800.0)]

    def test_no_records_gives_empty_plan(self):
        report = build_plan(records=[], surplus=100.0, strategy="Avalanche")

        assert isinstance(report, PlanReport)
        assert report.plan.months == 0
        assert report.cleared_debts == ()

    def test_feasibility_error_passed_through(self, record_factory):
        result = build_plan(
            records=[record_factory(amount=1000.0, minimum_payment=300.0)],
            surplus=100.0,
            strategy="Avalanche",
        )

        assert result == InsufficientSurplus(supplied_surplus=100.0, required_minimum=300.0)

    def test_plan_from_cashflow(self, record_factory):
        report = plan_from_cashflow(
            records=[record_factory(name="Card", amount=600.0, apr=0.0, minimum_payment=100.0)],
            incomes=[IncomeEntry("Salary", 2500.0)],
            expenses=[ExpenseEntry("Rent", 1800.0), ExpenseEntry("Food", 400.0)],
            strategy="Avalanche",
        )

        assert report.surplus == 300.0
        assert report.plan.months == 2

    def test_plan_from_cashflow_without_surplus(self, record_factory):
        result = plan_from_cashflow(
            records=[record_factory()],
            incomes=[IncomeEntry("Salary", 1000.0)],
            expenses=[ExpenseEntry("Rent", 1000.0)],
            strategy="Avalanche",
        )

        assert isinstance(result, NoSurplus)


class TestCompareStrategies:
    def test_avalanche_cheaper_for_divergent_debts(self, divergent_debts):
        comparison = compare_strategies(divergent_debts, 100.0)

        assert isinstance(comparison.avalanche, PlanResult)
        assert isinstance(comparison.snowball, PlanResult)
        assert comparison.best is Strategy.AVALANCHE
        assert comparison.interest_difference > 0

    def test_identical_results_prefer_avalanche(self, debt_factory):
        comparison = compare_strategies([debt_factory()], 150.0)

        assert comparison.avalanche.total_interest_paid == comparison.snowball.total_interest_paid
        assert comparison.best is Strategy.AVALANCHE
        assert comparison.interest_difference == 0.0

    def test_failure_leaves_best_unset(self, debt_factory):
        comparison = compare_strategies([debt_factory(minimum_payment=500.0)], 100.0)

        assert isinstance(comparison.outcome_for(Strategy.SNOWBALL), InsufficientSurplus)
        assert comparison.best is None
        assert comparison.interest_difference is None

    def test_no_debts(self):
        comparison = compare_strategies([], 100.0)

        assert isinstance(comparison.avalanche, NoDebts)
        assert comparison.best is None


class TestApplyMonthlyPayment:
    """One real month of payments produces new records."""

    @pytest.fixture
    def records(self, record_factory):
        return [
            record_factory(name="Card", amount=1000.0, apr=12.0, minimum_payment=50.0),
            record_factory(name="Phone", amount=100.0, apr=0.0, minimum_payment=30.0),
        ]

    def test_snowball_clears_smallest(self, records):
        cycle = apply_monthly_payment(records=records, surplus=200.0, strategy="Snowball")

        assert isinstance(cycle, PaymentCycle)
        card, phone = cycle.debts
        assert card.amount == 960.0
        assert card.total_paid == 50.0
        assert card.original_amount == 1000.0
        assert phone.amount == 0.0
        assert phone.cleared
        assert phone.total_paid == 100.0
        assert phone.amount_saved == 0.0
        assert cycle.payments == {"Card": 50.0, "Phone": 100.0}
        assert cycle.cleared == ("Phone",)
        assert cycle.total_paid == 150.0

    def test_avalanche_targets_highest_apr(self, records):
        cycle = apply_monthly_payment(records=records, surplus=200.0, strategy="Avalanche")

        card, phone = cycle.debts
        assert card.amount == 840.0
        assert card.total_paid == 170.0
        assert phone.amount == 70.0
        assert not phone.cleared
        assert cycle.cleared == ()

    def test_inputs_unchanged(self, records):
        apply_monthly_payment(records=records, surplus=200.0, strategy="Snowball")

        assert records[0].amount == 1000.0
        assert records[1].cleared is False

    def test_insufficient_surplus(self, records):
        result = apply_monthly_payment(records=records, surplus=50.0, strategy="Snowball")

        assert result == InsufficientSurplus(supplied_surplus=50.0, required_minimum=80.0)

    def test_one_time_debt_due_in_full(self, record_factory):
        records = [
            record_factory(name="Fee", amount=300.0, apr=0.0, minimum_payment=0.0, payment_type="one-time"),
        ]

        cycle = apply_monthly_payment(records=records, surplus=300.0, strategy="Avalanche")

        assert cycle.debts[0].cleared
        assert cycle.payments == {"Fee": 300.0}

    def test_settled_records_carried_over(self, record_factory):
        done = record_factory(name="Done", amount=0.0, cleared=True, total_paid=900.0)
        records = [done, record_factory(name="Card", amount=500.0, apr=0.0, minimum_payment=50.0)]

        cycle = apply_monthly_payment(records=records, surplus=100.0, strategy="Avalanche")

        assert cycle.debts[0] is done
        assert cycle.debts[1].amount == 400.0

    def test_empty_and_no_surplus(self, records):
        assert isinstance(apply_monthly_payment(records=[], surplus=100.0, strategy="Avalanche"), NoDebts)
        assert isinstance(apply_monthly_payment(records=records, surplus=0.0, strategy="Avalanche"), NoSurplus)


class TestPayOff:
    def test_pay_off_defaults_to_balance(self, record_factory):
        record = record_factory(name="Card", amount=420.0, total_paid=80.0)

        cleared = pay_off(record)

        assert cleared.cleared
        assert cleared.amount == 0.0
        assert cleared.total_paid == 500.0
        assert cleared.original_amount == 420.0
        assert record.amount == 420.0

    def test_pay_off_with_amount(self, record_factory):
        cleared = pay_off(record_factory(amount=420.0), amount=400.0)

        assert cleared.total_paid == 400.0

    def test_negative_payoff_rejected(self, record_factory):
        with pytest.raises(ValueError):
            pay_off(record_factory(), amount=-1.0)


def test_forget_cleared():
    cleared = [
        ClearedDebtRecord("A", 0, 0.0, 0.0),
        ClearedDebtRecord("B", 3, 120.0, 4.5),
    ]

    assert forget_cleared(cleared, ["A"]) == [cleared[1]]


class TestNonFiniteAmounts:
    @pytest.mark.parametrize("field_name", ["amount", "total_paid", "original_amount"])
    def test_record_rejects_non_finite_amounts(self, record_factory, field_name):
        with pytest.raises(ValueError, match=f"{field_name} must be a finite number"):
            record_factory(**{field_name: float("inf")})

    @pytest.mark.parametrize("surplus", [float("nan"), float("inf")])
    def test_build_plan_rejects_non_finite_surplus(self, record_factory, surplus):
        with pytest.raises(ValueError, match="surplus must be a finite number"):
            build_plan(records=[record_factory()], surplus=surplus, strategy="Avalanche")

    def test_apply_monthly_payment_rejects_nan_surplus(self, record_factory):
        with pytest.raises(ValueError, match="surplus must be a finite number"):
            apply_monthly_payment(records=[record_factory()], surplus=float("nan"), strategy="Snowball")

    def test_pay_off_rejects_infinite_amount(self, record_factory):
        with pytest.raises(ValueError, match="amount must be a finite number"):
            pay_off(record_factory(), amount=float("inf"))
