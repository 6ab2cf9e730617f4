"""
Tasks repository interface and implementation.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.tasks import Task
from .base import AsyncSqlRepository


class TaskRepository(AsyncSqlRepository[Task]):
    """Repository for task data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def search(
        self,
        *,
        visible_to: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
        priority: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Task]:
        """List tasks, soonest due first.

        Args:
            visible_to: Only tasks this user created or is assigned to; None means all
            statuses: Allowed statuses
            priority: Filter on priority
            assigned_to_id: Filter on assignee
            start_date: Earliest due date
            end_date: Latest due date
        """
        stmt = select(Task)
        if visible_to:
            stmt = stmt.where(or_(Task.created_by_id == visible_to, Task.assigned_to_id == visible_to))
        if statuses:
            stmt = stmt.where(Task.status.in_(list(statuses)))  # type: ignore
        if priority:
            stmt = stmt.where(Task.priority == priority)
        if assigned_to_id:
            stmt = stmt.where(Task.assigned_to_id == assigned_to_id)
        if start_date:
            stmt = stmt.where(Task.due_date >= start_date)
        if end_date:
            stmt = stmt.where(Task.due_date <= end_date)
        stmt = stmt.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.created_at.desc())  # type: ignore
        result = await self.session.exec(stmt)
        return list(result.all())
