"""Plan assembly around the payoff engine.

The engine only sees active recurring debts. This module prepares its input
from stored debt records, merges debts that were paid before the run with the
ones the run clears, compares both strategies, and applies a single month of
real payments to produce updated records.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable, Sequence

from ..logging_config import get_logger
from ..models.cashflow import ExpenseEntry, IncomeEntry
from ..models.debt import DebtInput, DebtRecord, Strategy
from ..models.plan import (
    ClearedDebtRecord,
    InsufficientSurplus,
    NoDebts,
    NonConvergentSimulation,
    PlanResult,
    SimulationOutcome,
)
from .budgeting import compute_surplus
from .debts import WorkingDebt, select_target, simulate
from .liabilities import monthly_interest, planned_savings
from .money import require_finite, sum_money, to_money

logger = get_logger("services.planning")

NO_SURPLUS_MESSAGE = "Increase income or reduce expenses."


@dataclass(frozen=True, slots=True)
class NoSurplus:
    """Income does not exceed expenses, so nothing can go toward debts."""

    surplus: float
    message: str = NO_SURPLUS_MESSAGE

    kind: ClassVar[str] = "NoSurplus"


@dataclass(frozen=True, slots=True)
class OneTimeShortage:
    """A one-time debt larger than a whole month's surplus."""

    name: str
    amount: float
    shortage: float


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    """Both strategies run on the same input; ``best`` is None if either failed."""

    avalanche: SimulationOutcome
    snowball: SimulationOutcome
    best: Strategy | None

    def outcome_for(self, strategy: Strategy) -> SimulationOutcome:
        return self.avalanche if strategy is Strategy.AVALANCHE else self.snowball

    @property
    def interest_difference(self) -> float | None:
        """Interest Snowball costs beyond Avalanche, when both succeeded."""

        if isinstance(self.avalanche, PlanResult) and isinstance(self.snowball, PlanResult):
            return to_money(self.snowball.total_interest_paid - self.avalanche.total_interest_paid)
        return None


@dataclass(frozen=True, slots=True)
class PlanReport:
    """Plan plus the portfolio totals shown alongside it."""

    plan: PlanResult
    best_strategy: Strategy
    currency: str
    surplus: float
    total_principal: float
    total_future_interest: float
    total_debt: float
    cleared_debts: tuple[ClearedDebtRecord, ...]
    one_time_shortages: tuple[OneTimeShortage, ...] = ()

    kind: ClassVar[str] = "PlanReport"


@dataclass(frozen=True, slots=True)
class PaymentCycle:
    """Updated records after one month of payments; inputs are left untouched."""

    debts: tuple[DebtRecord, ...]
    payments: dict[str, float] = field(default_factory=dict)
    cleared: tuple[str, ...] = ()

    @property
    def total_paid(self) -> float:
        return sum_money(self.payments.values())


PlanOutcome = PlanReport | NoSurplus | NoDebts | InsufficientSurplus | NonConvergentSimulation


def compare_strategies(debts: Iterable[DebtInput], surplus: float) -> StrategyComparison:
    """Simulate both strategies and pick the cheaper one.

    Lower total interest wins, then fewer months; Avalanche wins a full tie.
    """

    inputs = list(debts)
    avalanche = simulate(inputs, surplus, Strategy.AVALANCHE)
    snowball = simulate(inputs, surplus, Strategy.SNOWBALL)

    best: Strategy | None = None
    if isinstance(avalanche, PlanResult) and isinstance(snowball, PlanResult):
        candidates = [(avalanche, Strategy.AVALANCHE), (snowball, Strategy.SNOWBALL)]
        _, best = min(candidates, key=lambda item: (item[0].total_interest_paid, item[0].months))
    return StrategyComparison(avalanche=avalanche, snowball=snowball, best=best)


def _existing_cleared(records: Sequence[DebtRecord], forgotten: set[str]) -> list[ClearedDebtRecord]:
    return [
        ClearedDebtRecord(
            name=record.name,
            cleared_month=0,
            total_paid=to_money(record.total_paid),
            amount_saved=planned_savings(record),
        )
        for record in records
        if record.is_settled and record.name not in forgotten
    ]


def build_plan(
    *,
    records: Iterable[DebtRecord],
    surplus: float,
    strategy: Strategy | str,
    forgotten: Iterable[str] = (),
    currency: str = "INR",
) -> PlanOutcome:
    """Build the repayment report for stored debts and a monthly surplus.

    ``forgotten`` names cleared debts the user asked to hide; they are dropped
    from both the pre-existing and the newly cleared lists.
    """

    strategy = Strategy.parse(strategy)
    records = list(records)
    forgotten_names = set(forgotten)
    surplus = to_money(require_finite("surplus", surplus))

    if surplus <= 0:
        logger.info("No surplus available for debt repayment", extra={"surplus": surplus})
        return NoSurplus(surplus=surplus)

    open_records = [record for record in records if not record.is_settled]
    recurring = [record for record in open_records if not record.is_one_time]
    one_time = [record for record in open_records if record.is_one_time]

    shortages = tuple(
        OneTimeShortage(
            name=record.name,
            amount=to_money(record.amount),
            shortage=to_money(record.amount - surplus),
        )
        for record in one_time
        if record.amount > surplus
    )
    cleared_existing = _existing_cleared(records, forgotten_names)
    one_time_principal = sum_money(record.amount for record in one_time)

    if not recurring:
        empty = PlanResult(
            strategy=strategy, months=0, total_interest_paid=0.0, cleared_debts=(), timeline=()
        )
        return PlanReport(
            plan=empty,
            best_strategy=strategy,
            currency=currency,
            surplus=surplus,
            total_principal=one_time_principal,
            total_future_interest=0.0,
            total_debt=one_time_principal,
            cleared_debts=tuple(cleared_existing),
            one_time_shortages=shortages,
        )

    comparison = compare_strategies([record.to_input() for record in recurring], surplus)
    outcome = comparison.outcome_for(strategy)
    if not isinstance(outcome, PlanResult):
        logger.info("Plan could not be built", extra={"strategy": strategy.value, "reason": outcome.kind})
        return outcome

    total_principal = to_money(sum_money(record.amount for record in recurring) + one_time_principal)
    future_interest = outcome.total_interest_paid
    cleared = cleared_existing + forget_cleared(outcome.cleared_debts, forgotten_names)

    logger.info(
        "Plan built",
        extra={
            "strategy": strategy.value,
            "months": outcome.months,
            "total_interest": future_interest,
            "best_strategy": (comparison.best or strategy).value,
        },
    )
    return PlanReport(
        plan=outcome,
        best_strategy=comparison.best or strategy,
        currency=currency,
        surplus=surplus,
        total_principal=total_principal,
        total_future_interest=future_interest,
        total_debt=to_money(total_principal + future_interest),
        cleared_debts=tuple(cleared),
        one_time_shortages=shortages,
    )


def plan_from_cashflow(
    *,
    records: Iterable[DebtRecord],
    incomes: Iterable[IncomeEntry],
    expenses: Iterable[ExpenseEntry],
    strategy: Strategy | str,
    forgotten: Iterable[str] = (),
    currency: str = "INR",
) -> PlanOutcome:
    """``build_plan`` with the surplus derived from income and expense entries."""

    surplus = compute_surplus(incomes=incomes, expenses=expenses)
    return build_plan(
        records=records, surplus=surplus, strategy=strategy, forgotten=forgotten, currency=currency
    )


def _obligation(record: DebtRecord) -> float:
    return record.amount if record.is_one_time else record.minimum_payment


def apply_monthly_payment(
    *, records: Iterable[DebtRecord], surplus: float, strategy: Strategy | str
) -> PaymentCycle | NoDebts | NoSurplus | InsufficientSurplus:
    """Apply one real month of payments and return updated records.

    Interest is added to each open balance first. Each open debt then receives
    its obligation (the full amount for one-time debts, the minimum otherwise),
    and any surplus left goes to the single strategy target.
    """

    strategy = Strategy.parse(strategy)
    records = list(records)
    if not records:
        return NoDebts()

    surplus = to_money(require_finite("surplus", surplus))
    if surplus <= 0:
        return NoSurplus(surplus=surplus)

    open_positions = [index for index, record in enumerate(records) if record.amount > 0]
    total_minimum = sum_money(_obligation(records[index]) for index in open_positions)
    if surplus < total_minimum:
        return InsufficientSurplus(supplied_surplus=surplus, required_minimum=total_minimum)

    working: dict[int, WorkingDebt] = {}
    paid: dict[int, float] = {}
    for index in open_positions:
        record = records[index]
        balance = to_money(record.amount + monthly_interest(record.amount, record.apr))
        payment = to_money(min(_obligation(record), balance))
        working[index] = WorkingDebt(
            position=index,
            name=record.name,
            balance=to_money(max(balance - payment, 0.0)),
            apr=record.apr,
            minimum_payment=record.minimum_payment,
        )
        paid[index] = payment

    remaining = to_money(surplus - total_minimum)
    if remaining > 0:
        target = select_target(list(working.values()), strategy)
        if target is not None:
            extra = to_money(min(remaining, target.balance))
            target.balance = to_money(target.balance - extra)
            paid[target.position] = to_money(paid[target.position] + extra)

    updated: list[DebtRecord] = []
    cleared: list[str] = []
    for index, record in enumerate(records):
        if index not in working:
            updated.append(record)
            continue
        debt = working[index]
        new_record = replace(
            record,
            amount=debt.balance,
            total_paid=to_money(record.total_paid + paid[index]),
            original_amount=record.original_amount if record.original_amount is not None else record.amount,
        )
        if debt.balance <= 0:
            new_record = replace(new_record, amount=0.0, cleared=True)
            new_record = replace(new_record, amount_saved=planned_savings(new_record))
            cleared.append(record.name)
        updated.append(new_record)

    logger.info(
        "Monthly payment applied",
        extra={"strategy": strategy.value, "paid": sum_money(paid.values()), "cleared": cleared},
    )
    return PaymentCycle(
        debts=tuple(updated),
        payments={records[index].name: amount for index, amount in paid.items()},
        cleared=tuple(cleared),
    )


def pay_off(record: DebtRecord, amount: float | None = None) -> DebtRecord:
    """Return ``record`` marked cleared with ``amount`` (default: the balance) paid."""

    payment = to_money(require_finite("amount", record.amount if amount is None else amount))
    if payment < 0:
        raise ValueError("Payoff amount must be >= 0")
    return replace(
        record,
        amount=0.0,
        cleared=True,
        total_paid=to_money(record.total_paid + payment),
        original_amount=record.original_amount if record.original_amount is not None else record.amount,
    )


def forget_cleared(
    cleared: Iterable[ClearedDebtRecord], forgotten: Iterable[str]
) -> list[ClearedDebtRecord]:
    """Drop cleared entries whose names the user chose to hide."""

    names = set(forgotten)
    return [record for record in cleared if record.name not in names]
