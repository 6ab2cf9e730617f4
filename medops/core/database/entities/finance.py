"""
Finance entity models.

This module contains the finance masters (parties, heads, payment types and
payment modes), the ledger itself and the ledger audit trail. Payment modes
carry the running balance that approved ledger entries move.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class Party(Base, table=True):
    """Entity for a ledger counterparty.

    Table: mo_finance_parties
    """

    __tablename__ = "mo_finance_parties"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255, index=True)
    party_type: str = Field(default="OTHER", max_length=16)
    contact: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class Head(Base, table=True):
    """Entity for an expense or income head.

    Table: mo_finance_heads
    """

    __tablename__ = "mo_finance_heads"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255, unique=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class PaymentType(Base, table=True):
    """Entity for a payment type (cash, cheque, transfer, ...).

    Table: mo_finance_payment_types
    """

    __tablename__ = "mo_finance_payment_types"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=128, unique=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class PaymentMode(Base, table=True):
    """Entity for an account that holds money, e.g. a bank account or petty cash.

    The opening balance is fixed at creation. The current balance only moves
    through ledger entries.

    Table: mo_finance_payment_modes
    """

    __tablename__ = "mo_finance_payment_modes"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=128, unique=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    opening_balance: float = Field(default=0)
    current_balance: float = Field(default=0)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"PaymentMode(id={self.id}, name={self.name}, current_balance={self.current_balance})"


class LedgerEntry(Base, table=True):
    """Entity for a ledger transaction.

    Table: mo_ledger_entries
    """

    __tablename__ = "mo_ledger_entries"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    serial_number: str = Field(max_length=16, unique=True, index=True)
    transaction_type: str = Field(max_length=16, index=True)
    transaction_date: datetime = Field(index=True)
    description: str = Field(sa_type=Text)

    # Masters
    party_id: str = Field(foreign_key="mo_finance_parties.id", max_length=64, index=True)
    head_id: str = Field(foreign_key="mo_finance_heads.id", max_length=64, index=True)
    payment_type_id: str = Field(foreign_key="mo_finance_payment_types.id", max_length=64, index=True)
    payment_mode_id: Optional[str] = Field(default=None, max_length=64, index=True)

    # Amounts
    received_amount: Optional[float] = Field(default=None)
    payment_amount: Optional[float] = Field(default=None)
    component_a: Optional[float] = Field(default=None)
    component_b: Optional[float] = Field(default=None)
    from_payment_mode_id: Optional[str] = Field(default=None, max_length=64)
    to_payment_mode_id: Optional[str] = Field(default=None, max_length=64)
    transfer_amount: Optional[float] = Field(default=None)
    current_balance: Optional[float] = Field(default=None)

    # Approval
    status: str = Field(default="PENDING", max_length=16, index=True)
    approved_by_id: Optional[str] = Field(default=None, max_length=64)
    approved_at: Optional[datetime] = Field(default=None)
    rejection_reason: Optional[str] = Field(default=None, sa_type=Text)

    # Edit requests
    edit_request_status: Optional[str] = Field(default=None, max_length=16, index=True)
    edit_requested_changes: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    edit_request_reason: Optional[str] = Field(default=None, sa_type=Text)
    edit_requested_by_id: Optional[str] = Field(default=None, max_length=64)
    edit_requested_at: Optional[datetime] = Field(default=None)
    edit_decided_by_id: Optional[str] = Field(default=None, max_length=64)
    edit_decided_at: Optional[datetime] = Field(default=None)
    edit_decision_reason: Optional[str] = Field(default=None, sa_type=Text)
    edit_count: int = Field(default=0)

    is_deleted: bool = Field(default=False, index=True)
    created_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"LedgerEntry(id={self.id}, serial_number={self.serial_number}, status={self.status})"


class LedgerAuditLog(Base, table=True):
    """Entity for one change to a ledger entry.

    Table: mo_ledger_audit_logs
    """

    __tablename__ = "mo_ledger_audit_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    ledger_entry_id: str = Field(foreign_key="mo_ledger_entries.id", max_length=64, index=True)
    action: str = Field(max_length=32)
    previous_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    new_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    reason: Optional[str] = Field(default=None, sa_type=Text)
    performed_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
