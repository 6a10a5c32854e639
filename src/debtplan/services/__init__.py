"""Service module exports."""

from . import (
    budgeting,
    debts,
    export_csv,
    import_csv,
    liabilities,
    money,
    planning,
    reports,
)

__all__ = [
    "budgeting",
    "debts",
    "export_csv",
    "import_csv",
    "liabilities",
    "money",
    "planning",
    "reports",
]
