"""Ledger rules: serial numbers, amount validation and balance effects.

Balances live on payment modes. A CREDIT adds to its mode, a DEBIT subtracts
from it, and a SELF_TRANSFER moves money from one mode to another. Credits and
transfers take effect when created; debits only once approved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from medops.core.errors import ValidationFailedError
from medops.core.models.domain import TransactionType

from .money import MONEY_TOLERANCE, money_equal, round_money

SERIAL_PREFIXES: Dict[TransactionType, str] = {
    TransactionType.CREDIT: "CR",
    TransactionType.DEBIT: "DR",
    TransactionType.SELF_TRANSFER: "ST",
}

EDITABLE_FIELDS = frozenset(
    {
        "description",
        "transaction_date",
        "party_id",
        "head_id",
        "payment_type_id",
        "transaction_type",
        "payment_amount",
        "component_a",
        "component_b",
        "received_amount",
        "transfer_amount",
        "payment_mode_id",
        "from_payment_mode_id",
        "to_payment_mode_id",
    }
)

_SERIAL_RE = re.compile(r"^(CR|DR|ST)-(\d+)$")


def next_serial(transaction_type: TransactionType, existing_serials: Iterable[str]) -> str:
    """Next serial number for a transaction type, e.g. ``DR-0042``.

    Serials are numbered per prefix, one past the highest number in use.
    """
    prefix = SERIAL_PREFIXES[TransactionType(transaction_type)]
    highest = 0
    for serial in existing_serials:
        match = _SERIAL_RE.match(serial or "")
        if match and match.group(1) == prefix:
            highest = max(highest, int(match.group(2)))
    return f"{prefix}-{highest + 1:04d}"


def apply_balance(balance: float, transaction_type: TransactionType, amount: float) -> float:
    """Balance after a single-mode credit or debit."""
    transaction_type = TransactionType(transaction_type)
    if transaction_type == TransactionType.CREDIT:
        return round_money(balance + amount)
    if transaction_type == TransactionType.DEBIT:
        return round_money(balance - amount)
    raise ValidationFailedError("Self transfers affect two payment modes; use balance_effects")


@dataclass(frozen=True)
class LedgerAmounts:
    """The amount-bearing fields of a ledger entry."""

    transaction_type: TransactionType
    payment_mode_id: Optional[str] = None
    received_amount: Optional[float] = None
    payment_amount: Optional[float] = None
    component_a: Optional[float] = None
    component_b: Optional[float] = None
    from_payment_mode_id: Optional[str] = None
    to_payment_mode_id: Optional[str] = None
    transfer_amount: Optional[float] = None


def validate_credit(amounts: LedgerAmounts) -> None:
    if not amounts.payment_mode_id:
        raise ValidationFailedError("Payment mode is required for credit entries")
    if amounts.received_amount is None or amounts.received_amount <= 0:
        raise ValidationFailedError("Received amount must be greater than 0 for credit entries")


def validate_debit(amounts: LedgerAmounts) -> None:
    if not amounts.payment_mode_id:
        raise ValidationFailedError("Payment mode is required for debit entries")
    component_a = amounts.component_a or 0
    component_b = amounts.component_b or 0
    if component_a < 0 or component_b < 0:
        raise ValidationFailedError("Component amounts cannot be negative")
    total = round_money(component_a + component_b)
    if total <= 0:
        raise ValidationFailedError("At least one component amount must be greater than 0")
    if amounts.payment_amount is None or not money_equal(round_money(amounts.payment_amount), total):
        raise ValidationFailedError(
            f"Payment amount must equal component A + component B ({total:.2f}) within {MONEY_TOLERANCE}"
        )


def validate_self_transfer(amounts: LedgerAmounts) -> None:
    if not amounts.from_payment_mode_id or not amounts.to_payment_mode_id:
        raise ValidationFailedError("Source and target payment modes are required for self transfers")
    if amounts.from_payment_mode_id == amounts.to_payment_mode_id:
        raise ValidationFailedError("Source and target payment modes must be different")
    if amounts.transfer_amount is None or amounts.transfer_amount <= 0:
        raise ValidationFailedError("Transfer amount must be greater than 0")


def validate_amounts(amounts: LedgerAmounts) -> None:
    """Validate the amount fields for the entry's transaction type."""
    transaction_type = TransactionType(amounts.transaction_type)
    if transaction_type == TransactionType.CREDIT:
        validate_credit(amounts)
    elif transaction_type == TransactionType.DEBIT:
        validate_debit(amounts)
    else:
        validate_self_transfer(amounts)


def balance_effects(amounts: LedgerAmounts) -> Dict[str, float]:
    """Signed balance change per payment mode caused by an entry once it is in effect."""
    transaction_type = TransactionType(amounts.transaction_type)
    if transaction_type == TransactionType.CREDIT:
        return {amounts.payment_mode_id: round_money(amounts.received_amount)}
    if transaction_type == TransactionType.DEBIT:
        return {amounts.payment_mode_id: -round_money(amounts.payment_amount)}
    amount = round_money(amounts.transfer_amount)
    return {amounts.from_payment_mode_id: -amount, amounts.to_payment_mode_id: amount}


def reverse_effects(effects: Dict[str, float]) -> Dict[str, float]:
    return {mode_id: -delta for mode_id, delta in effects.items()}


def within_undo_window(decided_at: Optional[datetime], now: datetime, window_seconds: int) -> bool:
    """Whether a decision taken at ``decided_at`` may still be undone at ``now``."""
    if decided_at is None:
        return False
    elapsed = now - decided_at
    return timedelta(0) <= elapsed <= timedelta(seconds=window_seconds)


@dataclass(frozen=True)
class BalanceCheck:
    opening_balance: float
    total_credits: float
    total_debits: float
    current_balance: float
    expected_balance: float
    integrity_ok: bool


def balance_integrity(opening: float, credits: float, debits: float, current: float) -> BalanceCheck:
    """Check that a payment mode's stored balance matches opening + credits - debits."""
    expected = round_money(opening + credits - debits)
    return BalanceCheck(
        opening_balance=round_money(opening),
        total_credits=round_money(credits),
        total_debits=round_money(debits),
        current_balance=round_money(current),
        expected_balance=expected,
        integrity_ok=abs(expected - current) <= MONEY_TOLERANCE,
    )
