"""CSV export helpers for payoff plans."""

from __future__ import annotations

import csv
from pathlib import Path

from ..models.plan import PlanResult

TIMELINE_HEADERS = [
    "month",
    "debt",
    "min_payment",
    "extra_payment",
    "total_payment",
    "interest_accrued",
    "remaining_balance",
]
CLEARED_HEADERS = ["debt", "cleared_month", "total_paid", "amount_saved"]


def _format_amount(value: float) -> str:
    return f"{value:.2f}"


def export_timeline_csv(*, plan: PlanResult, output_path: Path) -> Path:
    """Write one row per month and debt to ``output_path``.

    Columns are deterministic (see ``TIMELINE_HEADERS``). Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=TIMELINE_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for month in plan.timeline:
            for entry in month.breakdown:
                writer.writerow(
                    {
                        "month": month.month,
                        "debt": entry.name,
                        "min_payment": _format_amount(entry.min_payment),
                        "extra_payment": _format_amount(entry.extra_payment),
                        "total_payment": _format_amount(entry.total_payment),
                        "interest_accrued": _format_amount(entry.interest_accrued),
                        "remaining_balance": _format_amount(entry.remaining_balance),
                    }
                )

    return output_path


def export_cleared_csv(*, plan: PlanResult, output_path: Path) -> Path:
    """Write the cleared-debt summary to ``output_path``."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CLEARED_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for record in plan.cleared_debts:
            writer.writerow(
                {
                    "debt": record.name,
                    "cleared_month": record.cleared_month,
                    "total_paid": _format_amount(record.total_paid),
                    "amount_saved": _format_amount(record.amount_saved),
                }
            )

    return output_path


class CsvPlanWriter:
    """``PlanWriter`` that stores each plan's timeline as ``<strategy>_timeline.csv``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.written: list[Path] = []

    def write_plan(self, *, plan: PlanResult) -> None:
        path = self.directory / f"{plan.strategy.value.lower()}_timeline.csv"
        self.written.append(export_timeline_csv(plan=plan, output_path=path))
