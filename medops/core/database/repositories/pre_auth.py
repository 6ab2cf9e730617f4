"""
Pre-authorization repository interface and implementation.

This module provides data access operations for pre-authorizations, their
hospital suggestions, the insurance initiate form and the
queries insurance raises on them.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.pre_auth import HospitalSuggestion, InsuranceInitiateForm, InsuranceQuery, PreAuthorization
from .base import AsyncQueryBuilder, AsyncSqlRepository


class PreAuthorizationRepository(AsyncSqlRepository[PreAuthorization]):
    """Repository for pre-authorization data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PreAuthorization)

    async def get_by_kyp(self, kyp_submission_id: str) -> Optional[PreAuthorization]:
        stmt = select(PreAuthorization).where(PreAuthorization.kyp_submission_id == kyp_submission_id)
        result = await self.session.exec(stmt)
        return result.first()


class HospitalSuggestionRepository(AsyncSqlRepository[HospitalSuggestion]):
    """Repository for hospital suggestion data access operations using SQLModel."""

    order_by_field = None

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, HospitalSuggestion)

    async def list_for_pre_auth(self, pre_auth_id: str) -> List[HospitalSuggestion]:
        stmt = (
            select(HospitalSuggestion)
            .where(HospitalSuggestion.pre_auth_id == pre_auth_id)
            .order_by(HospitalSuggestion.hospital_name)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def replace_for_pre_auth(
        self, pre_auth_id: str, suggestions: Sequence[HospitalSuggestion]
    ) -> List[HospitalSuggestion]:
        """Replace every suggestion of a pre-auth inside the current unit of work."""
        stmt = delete(HospitalSuggestion).where(HospitalSuggestion.pre_auth_id == pre_auth_id)
        await self.session.exec(stmt)  # type: ignore
        for suggestion in suggestions:
            suggestion.pre_auth_id = pre_auth_id
        await self.stage_all(suggestions)
        return list(suggestions)


class InsuranceInitiateFormRepository(AsyncSqlRepository[InsuranceInitiateForm]):
    """Repository for insurance initiate form data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, InsuranceInitiateForm)

    async def get_by_lead(self, lead_id: str) -> Optional[InsuranceInitiateForm]:
        result = await self.session.exec(select(InsuranceInitiateForm).where(InsuranceInitiateForm.lead_id == lead_id))
        return result.first()


class InsuranceQueryRepository(AsyncSqlRepository[InsuranceQuery]):
    """Repository for insurance query data access operations using SQLModel."""

    order_by_field = "raised_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, InsuranceQuery)

    async def search(self, pre_auth_id: Optional[str] = None, status: Optional[str] = None) -> List[InsuranceQuery]:
        """Queries newest first, optionally for one pre-auth or in one status."""
        stmt = AsyncQueryBuilder.apply_filters(
            select(InsuranceQuery), InsuranceQuery, {"pre_auth_id": pre_auth_id, "status": status}
        )
        result = await self.session.exec(stmt.order_by(InsuranceQuery.raised_at.desc()))  # type: ignore
        return list(result.all())

    async def count_open(self, pre_auth_id: str) -> int:
        """Queries on a pre-auth that are not resolved yet."""
        stmt = (
            select(func.count())
            .select_from(InsuranceQuery)
            .where(InsuranceQuery.pre_auth_id == pre_auth_id, InsuranceQuery.status != "RESOLVED")
        )
        result = await self.session.exec(stmt)
        return int(result.one())
