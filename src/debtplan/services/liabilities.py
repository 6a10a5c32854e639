"""Minimum-payment amortization used as the "no strategy" baseline."""

from __future__ import annotations

from dataclasses import dataclass

from ..models.debt import DebtInput, DebtRecord
from .money import to_money

# Baseline for amount_saved stops at 40 years; the engine itself allows 600 months.
BASELINE_MAX_MONTHS = 480
PLANNED_TOTAL_MAX_MONTHS = 600


@dataclass(slots=True)
class PaymentProjection:
    """Represents a single projected minimum payment for a debt."""

    month: int
    payment: float
    principal: float
    interest: float
    remaining_balance: float


def monthly_interest(balance: float, apr: float) -> float:
    """Interest accrued on ``balance`` for one month at ``apr`` percent, in cents."""

    if balance <= 0 or apr <= 0:
        return 0.0
    return to_money(balance * (apr / 100) / 12)


def minimum_payment_schedule(
    *, debt: DebtInput, max_months: int = BASELINE_MAX_MONTHS
) -> list[PaymentProjection]:
    """Amortize ``debt`` paying only its contractual minimum each month.

    Interest that the minimum does not cover is not added to the balance, so
    a minimum at or below the monthly interest leaves the balance flat and the
    schedule runs until ``max_months``.
    """

    balance = to_money(max(debt.principal, 0.0))
    schedule: list[PaymentProjection] = []

    month = 0
    while balance > 0 and month < max_months:
        month += 1

        interest = monthly_interest(balance, debt.apr)
        payment = to_money(min(debt.minimum_payment, balance + interest))
        principal = to_money(max(payment - interest, 0.0))
        balance = to_money(max(balance - principal, 0.0))
        if balance < 0.01:
            balance = 0.0

        schedule.append(
            PaymentProjection(
                month=month,
                payment=payment,
                principal=principal,
                interest=interest,
                remaining_balance=balance,
            )
        )

    return schedule


def baseline_interest(debt: DebtInput, *, max_months: int = BASELINE_MAX_MONTHS) -> float:
    """Total interest paid when only the minimum is paid on the original principal."""

    schedule = minimum_payment_schedule(debt=debt, max_months=max_months)
    return to_money(sum(row.interest for row in schedule))


def planned_total(record: DebtRecord, *, max_months: int = PLANNED_TOTAL_MAX_MONTHS) -> float:
    """Total the borrower would pay servicing ``record`` by minimums alone.

    One-time debts are due in full. Recurring debts start from the original
    amount when known, capitalize interest each month, and pay the smaller of
    the minimum and the outstanding balance.
    """

    if record.is_one_time:
        return to_money(max(record.amount, 0.0))

    balance = to_money(record.original_amount if record.original_amount is not None else record.amount)
    total = 0.0
    month = 0
    while balance > 0 and month < max_months:
        month += 1
        balance = to_money(balance + monthly_interest(balance, record.apr))
        payment = to_money(min(record.minimum_payment, balance))
        total = to_money(total + payment)
        balance = to_money(balance - payment)

    return total


def planned_savings(record: DebtRecord) -> float:
    """How much less than the minimum-only plan the borrower has paid so far."""

    return to_money(max(planned_total(record) - record.total_paid, 0.0))


__all__ = [
    "BASELINE_MAX_MONTHS",
    "PLANNED_TOTAL_MAX_MONTHS",
    "PaymentProjection",
    "baseline_interest",
    "minimum_payment_schedule",
    "monthly_interest",
    "planned_savings",
    "planned_total",
]
