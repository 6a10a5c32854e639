"""Income and expense roll-ups for the monthly surplus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..models.cashflow import ExpenseEntry, IncomeEntry
from .money import sum_money, to_money


@dataclass(slots=True)
class CashflowSummary:
    """Lightweight DTO for the monthly cash position."""

    total_income: float
    total_expenses: float

    @property
    def surplus(self) -> float:
        return to_money(self.total_income - self.total_expenses)

    @property
    def has_surplus(self) -> bool:
        return self.surplus > 0


def summarize_cashflow(
    *, incomes: Iterable[IncomeEntry], expenses: Iterable[ExpenseEntry]
) -> CashflowSummary:
    """Total monthly income and expenses."""

    return CashflowSummary(
        total_income=sum_money(entry.amount for entry in incomes),
        total_expenses=sum_money(entry.amount for entry in expenses),
    )


def compute_surplus(*, incomes: Iterable[IncomeEntry], expenses: Iterable[ExpenseEntry]) -> float:
    """Income minus expenses, rounded to cents. May be negative."""

    return summarize_cashflow(incomes=incomes, expenses=expenses).surplus


def expenses_by_category(expenses: Iterable[ExpenseEntry]) -> list[tuple[str, float]]:
    """Return (category, total) pairs sorted by amount descending, then name."""

    totals: dict[str, float] = {}
    for entry in expenses:
        key = entry.category.strip() or "Uncategorized"
        totals[key] = to_money(totals.get(key, 0.0) + entry.amount)

    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))
