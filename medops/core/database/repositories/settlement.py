"""
Settlement repository interface and implementation.

This module provides data access operations for discharge sheets and P/L records.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.settlement import DischargeSheet, PLRecord
from .base import AsyncSqlRepository


class DischargeSheetRepository(AsyncSqlRepository[DischargeSheet]):
    """Repository for discharge sheet data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, DischargeSheet)

    async def get_by_lead(self, lead_id: str) -> Optional[DischargeSheet]:
        result = await self.session.exec(select(DischargeSheet).where(DischargeSheet.lead_id == lead_id))
        return result.first()


class PLRecordRepository(AsyncSqlRepository[PLRecord]):
    """Repository for P/L record data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PLRecord)

    async def get_by_lead(self, lead_id: str) -> Optional[PLRecord]:
        result = await self.session.exec(select(PLRecord).where(PLRecord.lead_id == lead_id))
        return result.first()

    async def list_open(self) -> List[PLRecord]:
        """P/L records that still have an unpaid share."""
        stmt = select(PLRecord).where(PLRecord.closed_at.is_(None)).order_by(PLRecord.created_at.desc())  # type: ignore
        result = await self.session.exec(stmt)
        return list(result.all())
