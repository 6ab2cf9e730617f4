"""
Internal job posting and referral I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import ApplicationStatus


class JobPostingCreate(BaseModel):
    title: str = Field(min_length=5)
    description: str = Field(min_length=20)
    department: Optional[str] = None
    location: Optional[str] = None


class JobPostingUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=5)
    description: Optional[str] = Field(default=None, min_length=20)
    department: Optional[str] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None


class JobPostingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    department: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class ReferralCreate(BaseModel):
    job_posting_id: str
    candidate_name: str = Field(min_length=2)
    candidate_email: Optional[str] = None
    candidate_phone: Optional[str] = None
    resume_url: str = Field(min_length=1)
    documents: List[str] = Field(default_factory=list, max_length=3, description="Up to 3 document URLs")


class ReferralStatusUpdate(BaseModel):
    status: ApplicationStatus
    hr_notes: Optional[str] = None


class ReferralRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_posting_id: str
    referred_by_id: str
    candidate_name: str
    candidate_email: Optional[str] = None
    candidate_phone: Optional[str] = None
    resume_url: str
    documents: Optional[List[str]] = None
    status: ApplicationStatus
    hr_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
