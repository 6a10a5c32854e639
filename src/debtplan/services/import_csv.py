"""CSV ingestion for debts and monthly cash flow."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Mapping, Sequence

import pandas as pd

from ..logging_config import get_logger
from ..models.cashflow import ExpenseEntry, IncomeEntry
from ..models.debt import DebtRecord

logger = get_logger("services.import_csv")

# Accepted header spellings per field, first match wins.
DEBT_COLUMNS: dict[str, tuple[str, ...]] = {
    "name": ("name", "debt", "creditor"),
    "amount": ("amount", "principal", "balance"),
    "apr": ("apr", "interest", "interest_rate"),
    "minimum_payment": ("minimum_payment", "min_payment", "minimumpayment", "minimum"),
    "payment_type": ("payment_type", "paymenttype", "type"),
    "cleared": ("cleared",),
    "original_amount": ("original_amount", "originalamount"),
    "total_paid": ("total_paid", "totalpaid"),
}
REQUIRED_DEBT_FIELDS = ("name", "amount", "apr", "minimum_payment")
CASHFLOW_COLUMNS = ("kind", "label", "amount")


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, skipinitialspace=True)
    frame.columns = [str(c).strip().lower().replace(" ", "_") for c in frame.columns]
    return frame


def _resolve_columns(columns: Sequence[str]) -> dict[str, str]:
    resolved: dict[str, str] = {}
    for field_name, candidates in DEBT_COLUMNS.items():
        for candidate in candidates:
            if candidate in columns:
                resolved[field_name] = candidate
                break
    missing = [name for name in REQUIRED_DEBT_FIELDS if name not in resolved]
    if missing:
        raise ValueError(f"Debt CSV is missing required column(s): {', '.join(missing)}")
    return resolved


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


def _as_float(value: Any, *, field_name: str, row_number: int, default: float | None = None) -> float:
    if _blank(value):
        if default is not None:
            return default
        raise ValueError(f"Row {row_number}: {field_name} is required")
    try:
        number = float(str(value).replace(",", "").strip())
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: {field_name} must be a number (got {value!r})") from exc
    if not math.isfinite(number):
        raise ValueError(f"Row {row_number}: {field_name} must be a finite number (got {value!r})")
    return number


def _as_bool(value: Any) -> bool:
    if _blank(value):
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_debt_rows(rows: Sequence[Mapping[str, Any]], columns: Mapping[str, str]) -> list[DebtRecord]:
    """Convert dict-like rows into ``DebtRecord`` values.

    Row numbers in error messages are 1-based and exclude the header line.
    """

    records: list[DebtRecord] = []
    for row_number, row in enumerate(rows, start=1):
        name_raw = row.get(columns["name"])
        if _blank(name_raw):
            raise ValueError(f"Row {row_number}: name is required")

        payment_type = "recurring"
        if "payment_type" in columns and not _blank(row.get(columns["payment_type"])):
            payment_type = str(row[columns["payment_type"]]).strip().lower()

        original_amount = None
        if "original_amount" in columns and not _blank(row.get(columns["original_amount"])):
            original_amount = _as_float(
                row[columns["original_amount"]], field_name="original_amount", row_number=row_number
            )

        total_paid = 0.0
        if "total_paid" in columns:
            total_paid = _as_float(
                row.get(columns["total_paid"]), field_name="total_paid", row_number=row_number, default=0.0
            )

        records.append(
            DebtRecord(
                name=str(name_raw).strip(),
                amount=_as_float(row.get(columns["amount"]), field_name="amount", row_number=row_number),
                apr=_as_float(row.get(columns["apr"]), field_name="apr", row_number=row_number, default=0.0),
                minimum_payment=_as_float(
                    row.get(columns["minimum_payment"]),
                    field_name="minimum_payment",
                    row_number=row_number,
                    default=0.0,
                ),
                payment_type=payment_type,
                cleared=_as_bool(row.get(columns["cleared"])) if "cleared" in columns else False,
                original_amount=original_amount,
                total_paid=total_paid,
            )
        )
    return records


def load_debts_csv(path: Path) -> list[DebtRecord]:
    """Parse a debts CSV (name, amount, apr, minimum_payment, ...)."""

    frame = normalize_frame(file_path=path)
    columns = _resolve_columns(list(frame.columns))
    rows = frame.to_dict(orient="records")
    records = parse_debt_rows(rows, columns)
    logger.info("Loaded debts CSV", extra={"path": str(path), "rows": len(records)})
    return records


def load_cashflow_csv(path: Path) -> tuple[list[IncomeEntry], list[ExpenseEntry]]:
    """Parse ``kind,label,amount`` rows where kind is ``income`` or ``expense``."""

    frame = normalize_frame(file_path=path)
    missing = [name for name in CASHFLOW_COLUMNS if name not in frame.columns]
    if missing:
        raise ValueError(f"Cash-flow CSV is missing required column(s): {', '.join(missing)}")

    incomes: list[IncomeEntry] = []
    expenses: list[ExpenseEntry] = []
    for row_number, row in enumerate(frame.to_dict(orient="records"), start=1):
        kind = "" if _blank(row["kind"]) else str(row["kind"]).strip().lower()
        label = "" if _blank(row["label"]) else str(row["label"]).strip()
        amount = _as_float(row["amount"], field_name="amount", row_number=row_number)
        if kind == "income":
            incomes.append(IncomeEntry(source=label or "Income", amount=amount))
        elif kind == "expense":
            expenses.append(ExpenseEntry(category=label or "Uncategorized", amount=amount))
        else:
            raise ValueError(f"Row {row_number}: kind must be 'income' or 'expense' (got {row['kind']!r})")

    logger.info(
        "Loaded cash-flow CSV",
        extra={"path": str(path), "incomes": len(incomes), "expenses": len(expenses)},
    )
    return incomes, expenses
