"""Debt entities supplied to the payoff engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Strategy(str, Enum):
    """Repayment strategy deciding which debt receives surplus beyond minimums."""

    AVALANCHE = "Avalanche"
    SNOWBALL = "Snowball"

    @classmethod
    def parse(cls, value: "Strategy | str") -> "Strategy":
        """Return the strategy matching ``value`` (case-insensitive)."""

        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown payoff strategy {value!r}; expected one of: {choices}")


PAYMENT_TYPES = ("recurring", "one-time")


def _require_finite(field_name: str, value: float) -> None:
    if value is None or not math.isfinite(value):
        raise ValueError(f"{field_name} must be a finite number (got {value!r})")


def _require_non_negative(field_name: str, value: float) -> None:
    _require_finite(field_name, value)
    if value < 0:
        raise ValueError(f"{field_name} must be >= 0 (got {value!r})")


@dataclass(frozen=True, slots=True)
class DebtInput:
    """Immutable simulation input for a single debt.

    ``name`` is the identity key within one simulation run, ``apr`` is a
    percentage (``18.0`` means 18% per year).
    """

    name: str
    principal: float
    apr: float
    minimum_payment: float

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Debt name must be a non-empty string")
        _require_non_negative("principal", self.principal)
        _require_non_negative("apr", self.apr)
        _require_non_negative("minimum_payment", self.minimum_payment)


@dataclass(frozen=True, slots=True)
class DebtRecord:
    """Stored debt as tracked by the surrounding application.

    One-time debts are due in full and never enter the amortization loop.
    ``original_amount`` keeps the amount the debt was opened with so savings
    can be reported after the balance has been paid down.
    """

    name: str
    amount: float
    apr: float
    minimum_payment: float
    payment_type: str = "recurring"
    cleared: bool = False
    original_amount: Optional[float] = None
    total_paid: float = 0.0
    amount_saved: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Debt name must be a non-empty string")
        if self.payment_type not in PAYMENT_TYPES:
            raise ValueError(
                f"payment_type must be one of {', '.join(PAYMENT_TYPES)} (got {self.payment_type!r})"
            )
        _require_non_negative("apr", self.apr)
        _require_non_negative("minimum_payment", self.minimum_payment)
        _require_finite("amount", self.amount)
        _require_finite("total_paid", self.total_paid)
        if self.original_amount is not None:
            _require_finite("original_amount", self.original_amount)

    @property
    def is_one_time(self) -> bool:
        return self.payment_type == "one-time"

    @property
    def is_settled(self) -> bool:
        return self.cleared or self.amount <= 0

    def to_input(self) -> DebtInput:
        """Project the record onto the engine's input shape."""

        return DebtInput(
            name=self.name,
            principal=max(self.amount, 0.0),
            apr=self.apr,
            minimum_payment=self.minimum_payment,
        )
