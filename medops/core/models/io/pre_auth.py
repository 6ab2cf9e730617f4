"""
Pre-authorization and insurance initiate form I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import PreAuthAction, PreAuthStatus, QueryStatus


class HospitalSuggestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    hospital_name: str
    tentative_bill: Optional[float] = None
    room_rent_general: Optional[float] = None
    room_rent_private: Optional[float] = None
    room_rent_icu: Optional[float] = None
    notes: Optional[str] = None


class PreAuthRead(BaseModel):
    """Schema for reading a pre-authorization from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    kyp_submission_id: str
    sum_insured: Optional[str] = None
    room_rent: Optional[str] = None
    capping: Optional[str] = None
    copay: Optional[str] = None
    icu: Optional[str] = None
    insurance: Optional[str] = None
    tpa: Optional[str] = None
    requested_hospital_name: Optional[str] = None
    requested_room_type: Optional[str] = None
    expected_admission_date: Optional[datetime] = None
    expected_surgery_date: Optional[datetime] = None
    is_new_hospital_request: bool = False
    new_hospital_name: Optional[str] = None
    new_hospital_request_raised_at: Optional[datetime] = None
    pre_auth_raised_at: Optional[datetime] = None
    raised_by_id: Optional[str] = None
    approval_status: PreAuthStatus
    handled_by_id: Optional[str] = None
    handled_at: Optional[datetime] = None
    temp_approved_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    approval_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PreAuthDetail(PreAuthRead):
    """Pre-authorization with its suggestions and the decisions currently possible."""

    lead_id: str
    case_stage: str
    suggestions: List[HospitalSuggestionRead] = Field(default_factory=list)
    available_actions: List[PreAuthAction] = Field(default_factory=list)


class PreAuthApproveRequest(BaseModel):
    notes: Optional[str] = Field(default=None, description="Approval notes")


class PreAuthRejectRequest(BaseModel):
    reason: str = Field(default="", description="Rejection reason, required")


class InitiateFormCreate(BaseModel):
    """Schema for creating an insurance initiate form via API."""

    lead_id: str
    total_bill_amount: float = Field(default=0, ge=0)
    discount: float = Field(default=0, ge=0)
    other_reductions: float = Field(default=0, ge=0)
    copay: Optional[float] = Field(default=None, ge=0)
    copay_buffer: float = Field(default=0, ge=0)
    deductible: float = Field(default=0, ge=0)
    policy_deductible_amount: float = Field(default=0, ge=0)
    total_authorized_amount: float = Field(default=0, ge=0)
    amount_to_be_paid_by_insurance: float = Field(default=0, ge=0)
    room_category: Optional[str] = None


class InitiateFormUpdate(BaseModel):
    """Schema for updating an insurance initiate form via API."""

    total_bill_amount: Optional[float] = Field(default=None, ge=0)
    discount: Optional[float] = Field(default=None, ge=0)
    other_reductions: Optional[float] = Field(default=None, ge=0)
    copay: Optional[float] = Field(default=None, ge=0)
    copay_buffer: Optional[float] = Field(default=None, ge=0)
    deductible: Optional[float] = Field(default=None, ge=0)
    policy_deductible_amount: Optional[float] = Field(default=None, ge=0)
    total_authorized_amount: Optional[float] = Field(default=None, ge=0)
    amount_to_be_paid_by_insurance: Optional[float] = Field(default=None, ge=0)
    room_category: Optional[str] = None


class InitiateFormRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    total_bill_amount: float
    discount: float
    other_reductions: float
    copay: Optional[float] = None
    copay_buffer: float
    deductible: float
    policy_deductible_amount: float
    total_authorized_amount: float
    amount_to_be_paid_by_insurance: float
    room_category: Optional[str] = None
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class InsuranceQueryCreate(BaseModel):
    pre_auth_id: str
    question: str = Field(min_length=1)


class InsuranceQueryAnswer(BaseModel):
    answer: str = Field(min_length=1)


class InsuranceQueryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    pre_auth_id: str
    question: str
    status: QueryStatus
    raised_by_id: str
    raised_at: datetime
    answer: Optional[str] = None
    answered_by_id: Optional[str] = None
    answered_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
