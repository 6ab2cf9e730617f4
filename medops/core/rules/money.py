"""Currency helpers shared by the revenue and ledger rules."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

MONEY_TOLERANCE = 0.01


def round_money(value: Optional[float]) -> float:
    """Round an amount to two decimals, treating ``None`` as zero."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def money_equal(left: float, right: float) -> bool:
    """Compare two amounts within the one-paisa tolerance."""
    return abs(left - right) < MONEY_TOLERANCE
