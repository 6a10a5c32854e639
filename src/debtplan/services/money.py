"""Currency rounding helpers."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")


def to_money(value: float | int | Decimal) -> float:
    """Round to cents using half-up rounding.

    Going through ``str`` keeps binary float artifacts (``1.005`` stored as
    ``1.00499...``) from rounding the wrong way.
    """

    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def require_finite(field_name: str, value: float) -> float:
    """Return ``value`` as a float, rejecting NaN and infinities with ``ValueError``."""

    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{field_name} must be a finite number (got {value!r})")
    return number


def sum_money(values: Iterable[float]) -> float:
    """Sum already-rounded amounts and round the total."""

    return to_money(sum((Decimal(str(v)) for v in values), Decimal("0")))


def format_money(value: float, currency: str = "INR") -> str:
    """Render an amount for terminal output, e.g. ``INR 1,234.50``."""

    return f"{currency} {value:,.2f}"
