"""
Lead and case flow I/O models for API requests and responses.

This module contains the schemas for leads and each step a case goes through
before pre-authorization: KYP basic and detailed, insurance suggestions,
raising the pre-auth, admission and IPD status.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import CaseStage, IPDStatus, KYPStatus, PipelineStage

from .common import PaginationMeta


class LeadCreate(BaseModel):
    """Schema for creating a lead via API."""

    lead_ref: str = Field(min_length=1, description="Unique external lead reference")
    patient_name: str = Field(min_length=1, description="Patient full name")
    phone: Optional[str] = Field(default=None, description="Patient contact number")
    city: Optional[str] = Field(default=None, description="Patient city")
    treatment: Optional[str] = Field(default=None, description="Treatment or surgery of interest")
    bd_id: Optional[str] = Field(default=None, description="Owning BD; defaults to the creator")
    team_id: Optional[str] = Field(default=None, description="Sales team; defaults to the BD's team")


class LeadRead(BaseModel):
    """Schema for reading a lead from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_ref: str
    patient_name: str
    phone: Optional[str] = None
    city: Optional[str] = None
    treatment: Optional[str] = None
    bd_id: str
    team_id: Optional[str] = None
    case_stage: CaseStage
    pipeline_stage: PipelineStage
    lost_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LeadPage(BaseModel):
    data: List[LeadRead]
    pagination: PaginationMeta


class StageHistoryRead(BaseModel):
    """One case stage change."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    from_stage: Optional[CaseStage] = None
    to_stage: CaseStage
    changed_by_id: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime


class KYPBasicCreate(BaseModel):
    """KYP basic documents submitted by the BD. Aadhar or PAN is required."""

    aadhar: Optional[str] = Field(default=None, description="Aadhar document reference")
    pan: Optional[str] = Field(default=None, description="PAN document reference")
    insurance_card: Optional[str] = Field(default=None, description="Insurance card document reference")
    disease: Optional[str] = None
    location: Optional[str] = Field(default=None, description="Patient location, required")
    remark: Optional[str] = None
    patient_consent: bool = False


class KYPRead(BaseModel):
    """Schema for reading a KYP submission from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    submitted_by_id: str
    status: KYPStatus
    aadhar: Optional[str] = None
    pan: Optional[str] = None
    insurance_card: Optional[str] = None
    disease: Optional[str] = None
    location: Optional[str] = None
    remark: Optional[str] = None
    patient_consent: bool
    detailed_payload: Optional[Dict[str, Any]] = None
    detailed_submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class HospitalSuggestionInput(BaseModel):
    hospital_name: str = Field(min_length=1)
    tentative_bill: Optional[float] = None
    room_rent_general: Optional[float] = None
    room_rent_private: Optional[float] = None
    room_rent_icu: Optional[float] = None
    notes: Optional[str] = None


class KYPSuggestionsCreate(BaseModel):
    """Policy details and hospital suggestions added by the insurance team."""

    sum_insured: Optional[str] = Field(default=None, description="Sum insured, required")
    room_rent: Optional[str] = None
    capping: Optional[str] = None
    copay: Optional[str] = None
    icu: Optional[str] = None
    insurance: Optional[str] = None
    tpa: Optional[str] = None
    hospitals: List[HospitalSuggestionInput] = Field(default_factory=list, description="At least one hospital")


class KYPDetailedCreate(BaseModel):
    """Free-form detailed KYP data captured after the insurance suggestions."""

    payload: Dict[str, Any] = Field(default_factory=dict)


class RaisePreAuthRequest(BaseModel):
    """Hospital choice submitted when the BD raises a pre-auth."""

    requested_hospital_name: Optional[str] = None
    requested_room_type: Optional[str] = None
    expected_admission_date: Optional[datetime] = None
    expected_surgery_date: Optional[datetime] = None
    is_new_hospital_request: bool = False
    new_hospital_name: Optional[str] = None


class AdmissionCreate(BaseModel):
    """Admission details recorded when a case is initiated."""

    admission_date: datetime
    admission_time: str = Field(min_length=1)
    admitting_hospital: str = Field(min_length=1)
    hospital_address: str = Field(min_length=1)
    surgery_date: datetime
    surgery_time: str = Field(min_length=1)
    tpa: str = Field(min_length=1)
    notes: Optional[str] = None


class AdmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    admission_date: datetime
    admission_time: str
    admitting_hospital: str
    hospital_address: str
    surgery_date: datetime
    surgery_time: str
    tpa: str
    notes: Optional[str] = None
    initiated_by_id: str
    ipd_status: Optional[IPDStatus] = None
    ipd_status_reason: Optional[str] = None
    ipd_status_notes: Optional[str] = None
    new_surgery_date: Optional[datetime] = None
    ipd_discharge_date: Optional[datetime] = None
    ipd_status_updated_at: Optional[datetime] = None
    created_at: datetime


class IPDMarkRequest(BaseModel):
    status: IPDStatus
    reason: Optional[str] = None
    notes: Optional[str] = None
    new_surgery_date: Optional[datetime] = None
    discharge_date: Optional[datetime] = None


class DischargeRequest(BaseModel):
    note: Optional[str] = None


class MarkLostRequest(BaseModel):
    reason: str = Field(default="", description="Why the lead was lost, required")


class FollowUpUpsert(BaseModel):
    """Follow-up details the BD records after the pre-auth is approved."""

    kyp_submission_id: str
    admission_date: Optional[datetime] = None
    surgery_date: Optional[datetime] = None
    hospital_name: Optional[str] = None
    doctor_name: Optional[str] = None
    prescription: Optional[str] = None
    report: Optional[str] = None
    prescription_file_url: Optional[str] = None
    report_file_url: Optional[str] = None


class FollowUpRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    kyp_submission_id: str
    admission_date: Optional[datetime] = None
    surgery_date: Optional[datetime] = None
    hospital_name: Optional[str] = None
    doctor_name: Optional[str] = None
    prescription: Optional[str] = None
    report: Optional[str] = None
    prescription_file_url: Optional[str] = None
    report_file_url: Optional[str] = None
    updated_by_id: str
    updated_at: datetime
