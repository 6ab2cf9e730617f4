"""
Internal job posting repository interface and implementation.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.ijp import JobPosting, Referral
from .base import AsyncSqlRepository


class JobPostingRepository(AsyncSqlRepository[JobPosting]):
    """Repository for job posting data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JobPosting)

    async def list_postings(self, active_only: bool = True) -> List[JobPosting]:
        stmt = select(JobPosting)
        if active_only:
            stmt = stmt.where(JobPosting.is_active == True)  # noqa: E712
        result = await self.session.exec(stmt.order_by(JobPosting.created_at.desc()))  # type: ignore
        return list(result.all())


class ReferralRepository(AsyncSqlRepository[Referral]):
    """Repository for referral data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Referral)

    async def search(
        self,
        *,
        job_posting_id: Optional[str] = None,
        referred_by_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Referral]:
        return await self.list(
            filters={"job_posting_id": job_posting_id, "referred_by_id": referred_by_id, "status": status}
        )
