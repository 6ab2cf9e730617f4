"""
Request log repository interface and implementation.

Backs the admin log viewer and the error summary.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.request_logs import RequestLog
from .base import AsyncQueryBuilder, AsyncSqlRepository


class RequestLogRepository(AsyncSqlRepository[RequestLog]):
    """Repository for request log data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RequestLog)

    async def search(
        self,
        *,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[RequestLog], int]:
        conditions = []
        if path:
            conditions.append(RequestLog.path.contains(path))  # type: ignore
        if status_code is not None:
            conditions.append(RequestLog.status_code == status_code)
        if start_date:
            conditions.append(RequestLog.created_at >= start_date)
        if end_date:
            conditions.append(RequestLog.created_at <= end_date)

        stmt = select(RequestLog).where(*conditions).order_by(RequestLog.created_at.desc())  # type: ignore
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        logs = (await self.session.exec(stmt)).all()
        total = (await self.session.exec(select(func.count()).select_from(RequestLog).where(*conditions))).one()
        return list(logs), int(total)

    async def errors_since(self, since: datetime, limit: int = 100) -> List[RequestLog]:
        """Server errors (status >= 500) logged since ``since``, newest first."""
        stmt = (
            select(RequestLog)
            .where(RequestLog.status_code >= 500, RequestLog.created_at >= since)
            .order_by(RequestLog.created_at.desc())  # type: ignore
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())
