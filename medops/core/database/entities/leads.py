"""
Lead and case flow entity models.

A lead is a patient case. Its case stage tracks where the case is in the
KYP, pre-auth, admission and discharge flow, and its pipeline stage tracks
which team owns it. Every stage change is recorded in the stage history.
After the pre-auth is approved the BD records the patient follow-up against
the KYP submission.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class Lead(Base, table=True):
    """Entity for a patient case.

    Table: mo_leads
    """

    __tablename__ = "mo_leads"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_ref: str = Field(max_length=64, unique=True, index=True)

    # Patient details
    patient_name: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    city: Optional[str] = Field(default=None, max_length=128)
    treatment: Optional[str] = Field(default=None, max_length=255)

    # Ownership
    bd_id: str = Field(foreign_key="mo_users.id", max_length=64, index=True)
    team_id: Optional[str] = Field(default=None, max_length=64, index=True)

    # Workflow state
    case_stage: str = Field(default="NEW_LEAD", max_length=32, index=True)
    pipeline_stage: str = Field(default="SALES", max_length=16, index=True)
    lost_reason: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"Lead(id={self.id}, lead_ref={self.lead_ref}, case_stage={self.case_stage})"


class CaseStageHistory(Base, table=True):
    """Entity for one case stage change.

    Table: mo_case_stage_history
    """

    __tablename__ = "mo_case_stage_history"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_id: str = Field(foreign_key="mo_leads.id", max_length=64, index=True)
    from_stage: Optional[str] = Field(default=None, max_length=32)
    to_stage: str = Field(max_length=32)
    changed_by_id: Optional[str] = Field(default=None, max_length=64)
    note: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now_naive, index=True)


class KYPSubmission(Base, table=True):
    """Entity for the Know-Your-Patient intake of a lead.

    Table: mo_kyp_submissions
    """

    __tablename__ = "mo_kyp_submissions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_id: str = Field(foreign_key="mo_leads.id", max_length=64, unique=True)
    submitted_by_id: str = Field(max_length=64, index=True)
    status: str = Field(default="PENDING", max_length=32, index=True)

    # Basic KYP
    aadhar: Optional[str] = Field(default=None, max_length=512)
    pan: Optional[str] = Field(default=None, max_length=512)
    insurance_card: Optional[str] = Field(default=None, max_length=512)
    disease: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    remark: Optional[str] = Field(default=None, sa_type=Text)
    patient_consent: bool = Field(default=False)

    # Detailed KYP
    detailed_payload: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    detailed_submitted_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class AdmissionRecord(Base, table=True):
    """Entity for the admission initiated after pre-auth approval.

    Table: mo_admission_records
    """

    __tablename__ = "mo_admission_records"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_id: str = Field(foreign_key="mo_leads.id", max_length=64, unique=True)

    admission_date: datetime
    admission_time: str = Field(max_length=16)
    admitting_hospital: str = Field(max_length=255)
    hospital_address: str = Field(sa_type=Text)
    surgery_date: datetime
    surgery_time: str = Field(max_length=16)
    tpa: str = Field(max_length=128)
    notes: Optional[str] = Field(default=None, sa_type=Text)
    initiated_by_id: str = Field(max_length=64)

    # IPD status
    ipd_status: Optional[str] = Field(default=None, max_length=32)
    ipd_status_reason: Optional[str] = Field(default=None, sa_type=Text)
    ipd_status_notes: Optional[str] = Field(default=None, sa_type=Text)
    new_surgery_date: Optional[datetime] = Field(default=None)
    ipd_discharge_date: Optional[datetime] = Field(default=None)
    ipd_status_updated_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now_naive)


class PatientFollowUp(Base, table=True):
    """Entity for the BD's follow-up on a KYP once the pre-auth is approved.

    Table: mo_patient_follow_ups
    """

    __tablename__ = "mo_patient_follow_ups"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    kyp_submission_id: str = Field(foreign_key="mo_kyp_submissions.id", max_length=64, unique=True)
    admission_date: Optional[datetime] = Field(default=None)
    surgery_date: Optional[datetime] = Field(default=None)
    hospital_name: Optional[str] = Field(default=None, max_length=255)
    doctor_name: Optional[str] = Field(default=None, max_length=255)
    prescription: Optional[str] = Field(default=None, sa_type=Text)
    report: Optional[str] = Field(default=None, sa_type=Text)
    prescription_file_url: Optional[str] = Field(default=None, max_length=512)
    report_file_url: Optional[str] = Field(default=None, max_length=512)
    updated_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)
