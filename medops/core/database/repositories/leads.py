"""
Leads repository interface and implementation.

This module provides data access operations for leads and the records that
follow a lead through the case flow: stage history, KYP submissions, patient
follow-ups and admission records.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.leads import AdmissionRecord, CaseStageHistory, KYPSubmission, Lead, PatientFollowUp
from .base import AsyncQueryBuilder, AsyncSqlRepository


class LeadRepository(AsyncSqlRepository[Lead]):
    """Repository for lead data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Lead)

    async def get_by_ref(self, lead_ref: str) -> Optional[Lead]:
        result = await self.session.exec(select(Lead).where(Lead.lead_ref == lead_ref))
        return result.first()

    async def search(
        self,
        *,
        bd_id: Optional[str] = None,
        team_id: Optional[str] = None,
        case_stage: Optional[str] = None,
        pipeline_stage: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[Lead], int]:
        """Search leads within an ownership scope.

        Args:
            bd_id: Restrict to leads owned by this BD
            team_id: Restrict to leads of this team
            case_stage: Filter on case stage
            pipeline_stage: Filter on pipeline stage
            search: Substring match on patient name or lead reference
            limit: Maximum records to return
            offset: Records to skip

        Returns:
            The page of leads and the total number of matches
        """
        conditions = []
        filters = {"bd_id": bd_id, "team_id": team_id, "case_stage": case_stage, "pipeline_stage": pipeline_stage}
        if search:
            pattern = f"%{search.strip()}%"
            conditions.append(or_(Lead.patient_name.ilike(pattern), Lead.lead_ref.ilike(pattern)))  # type: ignore

        stmt = AsyncQueryBuilder.apply_filters(select(Lead), Lead, filters)
        count_stmt = AsyncQueryBuilder.apply_filters(select(func.count()).select_from(Lead), Lead, filters)
        for condition in conditions:
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)

        stmt = AsyncQueryBuilder.apply_pagination(stmt.order_by(Lead.created_at.desc()), limit, offset)  # type: ignore
        leads = (await self.session.exec(stmt)).all()
        total = (await self.session.exec(count_stmt)).one()
        return list(leads), int(total)


class CaseStageHistoryRepository(AsyncSqlRepository[CaseStageHistory]):
    """Repository for case stage history data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CaseStageHistory)

    async def list_for_lead(self, lead_id: str) -> List[CaseStageHistory]:
        """Stage changes of a lead, oldest first."""
        stmt = (
            select(CaseStageHistory)
            .where(CaseStageHistory.lead_id == lead_id)
            .order_by(CaseStageHistory.created_at.asc())  # type: ignore
        )
        result = await self.session.exec(stmt)
        return list(result.all())


class KYPSubmissionRepository(AsyncSqlRepository[KYPSubmission]):
    """Repository for KYP submission data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, KYPSubmission)

    async def get_by_lead(self, lead_id: str) -> Optional[KYPSubmission]:
        result = await self.session.exec(select(KYPSubmission).where(KYPSubmission.lead_id == lead_id))
        return result.first()


class PatientFollowUpRepository(AsyncSqlRepository[PatientFollowUp]):
    """Repository for patient follow-up data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PatientFollowUp)

    async def get_by_kyp(self, kyp_submission_id: str) -> Optional[PatientFollowUp]:
        stmt = select(PatientFollowUp).where(PatientFollowUp.kyp_submission_id == kyp_submission_id)
        result = await self.session.exec(stmt)
        return result.first()


class AdmissionRecordRepository(AsyncSqlRepository[AdmissionRecord]):
    """Repository for admission record data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AdmissionRecord)

    async def get_by_lead(self, lead_id: str) -> Optional[AdmissionRecord]:
        result = await self.session.exec(select(AdmissionRecord).where(AdmissionRecord.lead_id == lead_id))
        return result.first()
