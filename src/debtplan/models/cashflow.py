"""Income and expense entries feeding the monthly surplus."""

from __future__ import annotations

import math
from dataclasses import dataclass


def _check_amount(amount: float) -> None:
    if amount is None or not math.isfinite(amount):
        raise ValueError(f"amount must be a finite number (got {amount!r})")


@dataclass(frozen=True, slots=True)
class IncomeEntry:
    """Recurring monthly income."""

    source: str
    amount: float

    def __post_init__(self) -> None:
        _check_amount(self.amount)


@dataclass(frozen=True, slots=True)
class ExpenseEntry:
    """Recurring monthly expense."""

    category: str
    amount: float

    def __post_init__(self) -> None:
        _check_amount(self.amount)
