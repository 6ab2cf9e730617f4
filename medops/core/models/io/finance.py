"""
Finance I/O models for API requests and responses.

This module contains the schemas for the finance masters, the ledger and its
approval and edit workflows, and the finance summary report.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import LedgerAuditAction, LedgerStatus, PartyType, TransactionType

from .common import PaginationMeta

# ---------------------------------------------------------------------------
# Masters
# ---------------------------------------------------------------------------


class PartyCreate(BaseModel):
    name: str = Field(min_length=1, description="Party name")
    party_type: PartyType = Field(default=PartyType.OTHER)
    contact: Optional[str] = None


class PartyUpdate(BaseModel):
    name: Optional[str] = None
    party_type: Optional[PartyType] = None
    contact: Optional[str] = None
    is_active: Optional[bool] = None


class PartyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    party_type: PartyType
    contact: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class HeadCreate(BaseModel):
    name: str = Field(min_length=1, description="Unique head name")
    description: Optional[str] = None


class HeadUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class HeadRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PaymentTypeCreate(BaseModel):
    name: str = Field(min_length=1, description="Unique payment type name")
    description: Optional[str] = None


class PaymentTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class PaymentTypeRead(HeadRead):
    pass


class PaymentModeCreate(BaseModel):
    """Schema for creating a payment mode. The opening balance is fixed from then on."""

    name: str = Field(min_length=1, description="Unique payment mode name")
    description: Optional[str] = None
    opening_balance: float = Field(default=0, description="Starting balance, must not be negative")


class PaymentModeUpdate(BaseModel):
    """Schema for updating a payment mode.

    The balance fields are accepted only so an attempt to change them can be
    rejected explicitly instead of being silently dropped.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    opening_balance: Optional[float] = None
    current_balance: Optional[float] = None


class PaymentModeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    opening_balance: float
    current_balance: float
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


class LedgerEntryCreate(BaseModel):
    """Schema for creating a ledger entry via API."""

    transaction_type: TransactionType
    transaction_date: datetime
    description: str = Field(min_length=1)
    party_id: str
    head_id: str
    payment_type_id: str
    payment_mode_id: Optional[str] = Field(default=None, description="Mode for credits and debits")
    received_amount: Optional[float] = Field(default=None, description="Credit amount")
    payment_amount: Optional[float] = Field(default=None, description="Debit amount, equal to A + B")
    component_a: Optional[float] = None
    component_b: Optional[float] = None
    from_payment_mode_id: Optional[str] = Field(default=None, description="Self transfer source")
    to_payment_mode_id: Optional[str] = Field(default=None, description="Self transfer target")
    transfer_amount: Optional[float] = None


class LedgerEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    serial_number: str
    transaction_type: TransactionType
    transaction_date: datetime
    description: str
    party_id: str
    head_id: str
    payment_type_id: str
    payment_mode_id: Optional[str] = None
    received_amount: Optional[float] = None
    payment_amount: Optional[float] = None
    component_a: Optional[float] = None
    component_b: Optional[float] = None
    from_payment_mode_id: Optional[str] = None
    to_payment_mode_id: Optional[str] = None
    transfer_amount: Optional[float] = None
    current_balance: Optional[float] = None
    status: LedgerStatus
    approved_by_id: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    edit_request_status: Optional[LedgerStatus] = None
    edit_requested_changes: Optional[Dict[str, Any]] = None
    edit_request_reason: Optional[str] = None
    edit_requested_by_id: Optional[str] = None
    edit_requested_at: Optional[datetime] = None
    edit_decision_reason: Optional[str] = None
    edit_count: int
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class LedgerAuditRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ledger_entry_id: str
    action: LedgerAuditAction
    previous_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    performed_by_id: str
    created_at: datetime


class LedgerEntryDetail(LedgerEntryRead):
    audit_trail: List[LedgerAuditRead] = Field(default_factory=list)


class LedgerPage(BaseModel):
    data: List[LedgerEntryRead]
    pagination: PaginationMeta


class LedgerReasonRequest(BaseModel):
    """A decision that needs a reason: reject, approve-edit or reject-edit."""

    reason: str = Field(default="", description="Reason for the decision, required")


class BulkDecisionRequest(BaseModel):
    ids: List[str] = Field(min_length=1)
    action: Literal["approve", "reject"]
    rejection_reason: Optional[str] = None


class BulkDecisionResult(BaseModel):
    approved: int = 0
    rejected: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


class EditRequestCreate(BaseModel):
    reason: str = Field(default="", description="Why the entry should change, required")
    changes: Dict[str, Any] = Field(default_factory=dict, description="Field name to requested value")


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class PaymentModeSummary(BaseModel):
    payment_mode_id: str
    name: str
    opening_balance: float
    total_credits: float
    total_debits: float
    current_balance: float
    expected_balance: float
    integrity_ok: bool


class HeadSummary(BaseModel):
    head_id: str
    name: str
    total_debits: float


class FinanceSummary(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_credits: float
    total_debits: float
    pending_count: int
    payment_modes: List[PaymentModeSummary]
    heads: List[HeadSummary]
