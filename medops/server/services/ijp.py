"""
Service for internal job postings (IJP) and employee referrals.
"""

from __future__ import annotations

from typing import List, Optional

from medops.core.database.entities.ijp import JobPosting, Referral
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import InvalidStateError, NotFoundError
from medops.core.logging_config import get_logger
from medops.core.models.domain import ApplicationStatus
from medops.core.models.io.ijp import JobPostingCreate, JobPostingUpdate, ReferralCreate, ReferralStatusUpdate
from medops.core.monitoring import log_workflow_event

logger = get_logger(__name__)


class IJPService:
    """Service for job postings and the referrals made against them."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def list_postings(self, active_only: bool = True) -> List[JobPosting]:
        return await self.repos.job_postings.list_postings(active_only=active_only)

    async def get_posting(self, posting_id: str) -> JobPosting:
        posting = await self.repos.job_postings.get_by_id(posting_id)
        if posting is None:
            raise NotFoundError("Job posting", posting_id)
        return posting

    async def create_posting(self, user: User, data: JobPostingCreate) -> JobPosting:
        posting = await self.repos.job_postings.create(JobPosting(created_by_id=user.id, **data.model_dump()))
        logger.info(f"Job posting {posting.id} created by {user.id}")
        return posting

    async def update_posting(self, posting_id: str, data: JobPostingUpdate) -> JobPosting:
        posting = await self.get_posting(posting_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(posting, key, value)
        return await self.repos.job_postings.update(posting)

    async def deactivate_posting(self, posting_id: str) -> JobPosting:
        posting = await self.get_posting(posting_id)
        posting.is_active = False
        return await self.repos.job_postings.update(posting)

    async def submit_referral(self, user: User, data: ReferralCreate) -> Referral:
        """Refer a candidate to an open posting."""
        posting = await self.get_posting(data.job_posting_id)
        if not posting.is_active:
            raise InvalidStateError("This job posting is no longer accepting referrals")
        referral = await self.repos.referrals.create(
            Referral(
                referred_by_id=user.id,
                job_posting_id=posting.id,
                candidate_name=data.candidate_name.strip(),
                candidate_email=data.candidate_email,
                candidate_phone=data.candidate_phone,
                resume_url=data.resume_url,
                documents=list(data.documents) or None,
            )
        )
        log_workflow_event("referral_submitted", referral.id, actor_id=user.id, job_posting_id=posting.id)
        return referral

    async def list_referrals(
        self,
        job_posting_id: Optional[str] = None,
        referred_by_id: Optional[str] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> List[Referral]:
        return await self.repos.referrals.search(
            job_posting_id=job_posting_id,
            referred_by_id=referred_by_id,
            status=status.value if status else None,
        )

    async def update_referral_status(self, user: User, referral_id: str, data: ReferralStatusUpdate) -> Referral:
        referral = await self.repos.referrals.get_by_id(referral_id)
        if referral is None:
            raise NotFoundError("Referral", referral_id)
        previous = referral.status
        referral.status = data.status.value
        if data.hr_notes is not None:
            referral.hr_notes = data.hr_notes
        referral = await self.repos.referrals.update(referral)
        log_workflow_event(
            "referral_status_changed", referral.id, actor_id=user.id, from_status=previous, to_status=referral.status
        )
        return referral
