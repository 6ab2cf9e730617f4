"""
Internal job posting entity models.

HR publishes job postings; employees refer candidates against them.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class JobPosting(Base, table=True):
    """Entity for an internal job posting.

    Table: mo_job_postings
    """

    __tablename__ = "mo_job_postings"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=255)
    description: str = Field(sa_type=Text)
    department: Optional[str] = Field(default=None, max_length=128)
    location: Optional[str] = Field(default=None, max_length=128)
    is_active: bool = Field(default=True, index=True)
    created_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class Referral(Base, table=True):
    """Entity for a candidate referred against a job posting.

    Table: mo_referrals
    """

    __tablename__ = "mo_referrals"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    job_posting_id: str = Field(foreign_key="mo_job_postings.id", max_length=64, index=True)
    referred_by_id: str = Field(max_length=64, index=True)
    candidate_name: str = Field(max_length=255)
    candidate_email: Optional[str] = Field(default=None, max_length=255)
    candidate_phone: Optional[str] = Field(default=None, max_length=32)
    resume_url: str = Field(max_length=1024)
    documents: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    status: str = Field(default="PENDING", max_length=16, index=True)
    hr_notes: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)
