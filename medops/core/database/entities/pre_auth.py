"""
Pre-authorization entity models.

This module contains the insurance pre-authorization raised for a KYP
submission, the hospitals insurance suggested for it, the initiate form
insurance fills before approving it, and the queries insurance raises on it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class PreAuthorization(Base, table=True):
    """Entity for an insurance pre-authorization.

    Holds the policy details insurance recorded, the hospital the BD asked
    for, and the approval decision.

    Table: mo_pre_authorizations
    """

    __tablename__ = "mo_pre_authorizations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    kyp_submission_id: str = Field(foreign_key="mo_kyp_submissions.id", max_length=64, unique=True)

    # Policy details from insurance
    sum_insured: Optional[str] = Field(default=None, max_length=64)
    room_rent: Optional[str] = Field(default=None, max_length=64)
    capping: Optional[str] = Field(default=None, max_length=64)
    copay: Optional[str] = Field(default=None, max_length=64)
    icu: Optional[str] = Field(default=None, max_length=64)
    insurance: Optional[str] = Field(default=None, max_length=128)
    tpa: Optional[str] = Field(default=None, max_length=128)

    # Request raised by the BD
    requested_hospital_name: Optional[str] = Field(default=None, max_length=255)
    requested_room_type: Optional[str] = Field(default=None, max_length=64)
    expected_admission_date: Optional[datetime] = Field(default=None)
    expected_surgery_date: Optional[datetime] = Field(default=None)
    is_new_hospital_request: bool = Field(default=False)
    new_hospital_name: Optional[str] = Field(default=None, max_length=255)
    new_hospital_request_raised_at: Optional[datetime] = Field(default=None)
    pre_auth_raised_at: Optional[datetime] = Field(default=None)
    raised_by_id: Optional[str] = Field(default=None, max_length=64)

    # Decision
    approval_status: str = Field(default="PENDING", max_length=16, index=True)
    handled_by_id: Optional[str] = Field(default=None, max_length=64)
    handled_at: Optional[datetime] = Field(default=None)
    temp_approved_at: Optional[datetime] = Field(default=None)
    approved_at: Optional[datetime] = Field(default=None)
    rejected_at: Optional[datetime] = Field(default=None)
    rejection_reason: Optional[str] = Field(default=None, sa_type=Text)
    approval_notes: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"PreAuthorization(id={self.id}, approval_status={self.approval_status})"


class HospitalSuggestion(Base, table=True):
    """Entity for a hospital insurance suggested for a case.

    Table: mo_hospital_suggestions
    """

    __tablename__ = "mo_hospital_suggestions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    pre_auth_id: str = Field(foreign_key="mo_pre_authorizations.id", max_length=64, index=True)
    hospital_name: str = Field(max_length=255)
    tentative_bill: Optional[float] = Field(default=None)
    room_rent_general: Optional[float] = Field(default=None)
    room_rent_private: Optional[float] = Field(default=None)
    room_rent_icu: Optional[float] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_type=Text)


class InsuranceInitiateForm(Base, table=True):
    """Entity for the insurer's bill and copay breakdown of a case.

    Table: mo_insurance_initiate_forms
    """

    __tablename__ = "mo_insurance_initiate_forms"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_id: str = Field(foreign_key="mo_leads.id", max_length=64, unique=True)

    total_bill_amount: float = Field(default=0)
    discount: float = Field(default=0)
    other_reductions: float = Field(default=0)
    copay: Optional[float] = Field(default=None)
    copay_buffer: float = Field(default=0)
    deductible: float = Field(default=0)
    policy_deductible_amount: float = Field(default=0)
    total_authorized_amount: float = Field(default=0)
    amount_to_be_paid_by_insurance: float = Field(default=0)
    room_category: Optional[str] = Field(default=None, max_length=64)

    created_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class InsuranceQuery(Base, table=True):
    """Entity for a question insurance raised on a pre-auth for the BD to answer.

    Table: mo_insurance_queries
    """

    __tablename__ = "mo_insurance_queries"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    pre_auth_id: str = Field(foreign_key="mo_pre_authorizations.id", max_length=64, index=True)
    question: str = Field(sa_type=Text)
    status: str = Field(default="PENDING", max_length=16, index=True)
    raised_by_id: str = Field(max_length=64)
    raised_at: datetime = Field(default_factory=utc_now_naive)
    answer: Optional[str] = Field(default=None, sa_type=Text)
    answered_by_id: Optional[str] = Field(default=None, max_length=64)
    answered_at: Optional[datetime] = Field(default=None)
    resolved_at: Optional[datetime] = Field(default=None)
