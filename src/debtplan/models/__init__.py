"""Domain model exports."""

from .cashflow import ExpenseEntry, IncomeEntry
from .debt import DebtInput, DebtRecord, Strategy
from .plan import (
    ClearedDebtRecord,
    DebtBreakdown,
    FeasibilityError,
    InsufficientSurplus,
    MonthRecord,
    NoDebts,
    NonConvergentSimulation,
    PlanResult,
    SimulationOutcome,
    is_feasibility_error,
)

__all__ = [
    "ClearedDebtRecord",
    "DebtBreakdown",
    "DebtInput",
    "DebtRecord",
    "ExpenseEntry",
    "FeasibilityError",
    "IncomeEntry",
    "InsufficientSurplus",
    "MonthRecord",
    "NoDebts",
    "NonConvergentSimulation",
    "PlanResult",
    "SimulationOutcome",
    "Strategy",
    "is_feasibility_error",
]
