"""Result objects produced by the payoff engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .debt import Strategy


@dataclass(frozen=True, slots=True)
class DebtBreakdown:
    """Per-debt slice of a simulated month."""

    name: str
    min_payment: float
    extra_payment: float
    interest_accrued: float
    remaining_balance: float

    @property
    def total_payment(self) -> float:
        return round(self.min_payment + self.extra_payment, 2)


@dataclass(frozen=True, slots=True)
class MonthRecord:
    """One simulated month across every debt active when it started."""

    month: int
    total_payment: float
    total_interest: float
    remaining_balance: float
    breakdown: tuple[DebtBreakdown, ...]

    def entry_for(self, name: str) -> DebtBreakdown | None:
        for entry in self.breakdown:
            if entry.name == name:
                return entry
        return None


@dataclass(frozen=True, slots=True)
class ClearedDebtRecord:
    """A debt that reached zero; ``cleared_month`` 0 means it was already paid."""

    name: str
    cleared_month: int
    total_paid: float
    amount_saved: float


@dataclass(frozen=True, slots=True)
class PlanResult:
    """Full repayment projection for one strategy."""

    strategy: Strategy
    months: int
    total_interest_paid: float
    cleared_debts: tuple[ClearedDebtRecord, ...]
    timeline: tuple[MonthRecord, ...]

    kind: ClassVar[str] = "Plan"

    @property
    def total_paid(self) -> float:
        return round(sum(month.total_payment for month in self.timeline), 2)


@dataclass(frozen=True, slots=True)
class NoDebts:
    """Nothing to simulate; callers usually render an empty state."""

    kind: ClassVar[str] = "NoDebts"


@dataclass(frozen=True, slots=True)
class InsufficientSurplus:
    """The surplus cannot cover the minimum payments due in some month."""

    supplied_surplus: float
    required_minimum: float

    kind: ClassVar[str] = "InsufficientSurplus"

    @property
    def shortfall(self) -> float:
        return round(self.required_minimum - self.supplied_surplus, 2)


@dataclass(frozen=True, slots=True)
class NonConvergentSimulation:
    """Balances were still outstanding when the month bound was reached.

    Usually a minimum payment below the monthly interest with no surplus left
    over to cover the gap.
    """

    months: int
    remaining_balance: float

    kind: ClassVar[str] = "NonConvergentSimulation"


FeasibilityError = Union[NoDebts, InsufficientSurplus, NonConvergentSimulation]
SimulationOutcome = Union[PlanResult, NoDebts, InsufficientSurplus, NonConvergentSimulation]


def is_feasibility_error(value: object) -> bool:
    """Return True when ``value`` is one of the engine's failure results."""

    return isinstance(value, (NoDebts, InsufficientSurplus, NonConvergentSimulation))
