"""Debt payoff engine (snowball and avalanche).

``simulate`` runs a month-by-month amortization over working copies of the
caller's debts:

1. accrue one month of interest on every active debt,
2. pay each debt's minimum (never more than clears it),
3. send whatever surplus is left to a single target debt chosen by strategy,
4. record the month and retire debts that reached zero.

Failures are returned as values (``NoDebts``, ``InsufficientSurplus``,
``NonConvergentSimulation``) so callers can render them without exception
handling. Inputs are never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, Sequence

from ..logging_config import get_logger
from ..models.debt import DebtInput, Strategy
from ..models.plan import (
    ClearedDebtRecord,
    DebtBreakdown,
    InsufficientSurplus,
    MonthRecord,
    NoDebts,
    NonConvergentSimulation,
    PlanResult,
    SimulationOutcome,
)
from .liabilities import BASELINE_MAX_MONTHS, baseline_interest, monthly_interest
from .money import require_finite, sum_money, to_money

logger = get_logger("services.debts")

MAX_SIMULATION_MONTHS = 600
# Remaining totals at or below one currency unit count as paid off.
PAID_OFF_THRESHOLD = 1.0


@dataclass(slots=True)
class WorkingDebt:
    """Mutable per-run copy of a debt; ``position`` is its index in the input."""

    position: int
    name: str
    balance: float
    apr: float
    minimum_payment: float
    interest_paid: float = 0.0
    total_paid: float = 0.0


@dataclass(slots=True)
class MonthlyAllocation:
    """Payments decided for one month, keyed by working-debt position."""

    minimums: dict[int, float]
    extras: dict[int, float]
    total_minimum: float


class PlanWriter(Protocol):
    """Persists plan results for later retrieval."""

    def write_plan(self, *, plan: PlanResult) -> None:  # pragma: no cover - interface
        ...


def _avalanche_key(debt: WorkingDebt) -> tuple[float, int]:
    return (-debt.apr, debt.position)


def _snowball_key(debt: WorkingDebt) -> tuple[float, int]:
    return (debt.balance, debt.position)


# Ties on the strategy criterion resolve to the earlier input position.
TARGET_ORDERING: dict[Strategy, Callable[[WorkingDebt], tuple[float, int]]] = {
    Strategy.AVALANCHE: _avalanche_key,
    Strategy.SNOWBALL: _snowball_key,
}


def select_target(active: Sequence[WorkingDebt], strategy: Strategy) -> WorkingDebt | None:
    """Return the single debt that receives this month's extra payment.

    Avalanche picks the highest APR, Snowball the smallest current balance.
    Only debts with a positive balance are eligible.
    """

    candidates = [debt for debt in active if debt.balance > 0]
    if not candidates:
        return None
    return min(candidates, key=TARGET_ORDERING[strategy])


def _prepare(debts: Sequence[DebtInput]) -> tuple[list[WorkingDebt], list[ClearedDebtRecord]]:
    """Copy inputs into working debts and split off those already paid."""

    active: list[WorkingDebt] = []
    cleared: list[ClearedDebtRecord] = []
    for position, debt in enumerate(debts):
        balance = max(to_money(debt.principal), 0.0)
        if balance <= 0:
            cleared.append(
                ClearedDebtRecord(name=debt.name, cleared_month=0, total_paid=0.0, amount_saved=0.0)
            )
            continue
        active.append(
            WorkingDebt(
                position=position,
                name=debt.name,
                balance=balance,
                apr=debt.apr,
                minimum_payment=to_money(debt.minimum_payment),
            )
        )
    return active, cleared


def accrue_interest(active: Sequence[WorkingDebt]) -> dict[int, float]:
    """One month of interest per active debt, rounded to cents."""

    return {debt.position: monthly_interest(debt.balance, debt.apr) for debt in active}


def allocate_payments(
    active: Sequence[WorkingDebt],
    interest: dict[int, float],
    surplus: float,
    strategy: Strategy,
) -> MonthlyAllocation | InsufficientSurplus:
    """Pay minimums then direct leftover surplus to one target debt.

    Balances are only touched once the month is known to be affordable, so an
    ``InsufficientSurplus`` result leaves every working debt as it was.
    """

    minimums = {
        debt.position: to_money(min(debt.minimum_payment, debt.balance + interest[debt.position]))
        for debt in active
    }
    total_minimum = sum_money(minimums.values())
    if surplus < total_minimum:
        return InsufficientSurplus(supplied_surplus=surplus, required_minimum=total_minimum)

    for debt in active:
        accrued = interest[debt.position]
        principal = to_money(max(minimums[debt.position] - accrued, 0.0))
        debt.balance = to_money(max(debt.balance - principal, 0.0))
        debt.interest_paid = to_money(debt.interest_paid + accrued)
        debt.total_paid = to_money(debt.total_paid + minimums[debt.position])

    extras: dict[int, float] = {}
    extra_budget = to_money(surplus - total_minimum)
    if extra_budget > 0:
        target = select_target(active, strategy)
        if target is not None:
            # Leftover after the target clears is not carried to another debt this month.
            extra = to_money(min(extra_budget, target.balance))
            target.balance = to_money(target.balance - extra)
            target.total_paid = to_money(target.total_paid + extra)
            extras[target.position] = extra

    return MonthlyAllocation(minimums=minimums, extras=extras, total_minimum=total_minimum)


def _record_month(
    month: int,
    active: Sequence[WorkingDebt],
    interest: dict[int, float],
    allocation: MonthlyAllocation,
) -> MonthRecord:
    breakdown = tuple(
        DebtBreakdown(
            name=debt.name,
            min_payment=allocation.minimums[debt.position],
            extra_payment=allocation.extras.get(debt.position, 0.0),
            interest_accrued=interest[debt.position],
            remaining_balance=debt.balance,
        )
        for debt in active
    )
    return MonthRecord(
        month=month,
        total_payment=sum_money(entry.min_payment + entry.extra_payment for entry in breakdown),
        total_interest=sum_money(interest[debt.position] for debt in active),
        remaining_balance=sum_money(entry.remaining_balance for entry in breakdown),
        breakdown=breakdown,
    )


def _assemble_report(
    *,
    strategy: Strategy,
    debts: Sequence[DebtInput],
    timeline: list[MonthRecord],
    pre_cleared: list[ClearedDebtRecord],
    retired: list[tuple[WorkingDebt, int]],
) -> PlanResult:
    """Attach savings against the minimum-only baseline to each cleared debt."""

    cleared = list(pre_cleared)
    for debt, cleared_month in retired:
        baseline = baseline_interest(debts[debt.position], max_months=BASELINE_MAX_MONTHS)
        cleared.append(
            ClearedDebtRecord(
                name=debt.name,
                cleared_month=cleared_month,
                total_paid=debt.total_paid,
                amount_saved=to_money(max(baseline - debt.interest_paid, 0.0)),
            )
        )

    total_interest = sum_money(month.total_interest for month in timeline)
    return PlanResult(
        strategy=strategy,
        months=len(timeline),
        total_interest_paid=total_interest,
        cleared_debts=tuple(cleared),
        timeline=tuple(timeline),
    )


def simulate(
    debts: Iterable[DebtInput], monthly_surplus: float, strategy: Strategy | str
) -> SimulationOutcome:
    """Project repayment of ``debts`` with ``monthly_surplus`` available each month.

    Returns a ``PlanResult`` or one of the failure values. The loop stops when
    every debt is cleared or the remaining total is within
    ``PAID_OFF_THRESHOLD``; debts still holding such a residue are reported as
    cleared in that final month. A NaN or infinite surplus is malformed input
    and raises ``ValueError``, as ``DebtInput`` does for its fields.
    """

    strategy = Strategy.parse(strategy)
    surplus = to_money(require_finite("monthly_surplus", monthly_surplus))
    inputs = list(debts)
    if not inputs:
        return NoDebts()

    active, pre_cleared = _prepare(inputs)
    timeline: list[MonthRecord] = []
    retired: list[tuple[WorkingDebt, int]] = []

    logger.debug(
        "Simulating payoff",
        extra={"strategy": strategy.value, "debts": len(inputs), "surplus": surplus},
    )

    month = 0
    while active:
        if month >= MAX_SIMULATION_MONTHS:
            remaining = sum_money(debt.balance for debt in active)
            logger.warning(
                "Payoff simulation did not converge",
                extra={"strategy": strategy.value, "months": month, "remaining_balance": remaining},
            )
            return NonConvergentSimulation(months=month, remaining_balance=remaining)

        month += 1
        interest = accrue_interest(active)
        allocation = allocate_payments(active, interest, surplus, strategy)
        if isinstance(allocation, InsufficientSurplus):
            logger.debug(
                "Surplus below minimum payments",
                extra={"month": month, "surplus": surplus, "required": allocation.required_minimum},
            )
            return allocation

        record = _record_month(month, active, interest, allocation)
        timeline.append(record)

        still_open: list[WorkingDebt] = []
        for debt in active:
            if debt.balance <= 0:
                retired.append((debt, month))
            else:
                still_open.append(debt)
        active = still_open

        if active and record.remaining_balance <= PAID_OFF_THRESHOLD:
            retired.extend((debt, month) for debt in active)
            active = []

    plan = _assemble_report(
        strategy=strategy,
        debts=inputs,
        timeline=timeline,
        pre_cleared=pre_cleared,
        retired=retired,
    )
    logger.debug(
        "Payoff plan computed",
        extra={
            "strategy": strategy.value,
            "months": plan.months,
            "total_interest": plan.total_interest_paid,
        },
    )
    return plan


def simulate_avalanche(debts: Iterable[DebtInput], surplus: float) -> SimulationOutcome:
    """Project payoff prioritizing the highest APR first."""
    return simulate(debts, surplus, Strategy.AVALANCHE)


def simulate_snowball(debts: Iterable[DebtInput], surplus: float) -> SimulationOutcome:
    """Project payoff prioritizing the smallest balance first."""
    return simulate(debts, surplus, Strategy.SNOWBALL)


def persist_projection(
    *, writer: PlanWriter, debts: Iterable[DebtInput], strategy: Strategy | str, surplus: float
) -> SimulationOutcome:
    """Compute the plan for ``strategy`` and hand successful results to ``writer``."""

    outcome = simulate(debts, surplus, strategy)
    if isinstance(outcome, PlanResult):
        writer.write_plan(plan=outcome)
    return outcome
