"""DebtPlan: debt repayment planning with avalanche and snowball strategies."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .models import DebtInput, PlanResult, Strategy
from .services.debts import simulate, simulate_avalanche, simulate_snowball

__all__ = [
    "BaseConfig",
    "DebtInput",
    "DevConfig",
    "PlanResult",
    "Strategy",
    "simulate",
    "simulate_avalanche",
    "simulate_snowball",
]
