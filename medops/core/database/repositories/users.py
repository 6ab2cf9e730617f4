"""
Users repository interface and implementation.

This module provides data access operations for staff accounts and sales teams.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.users import Team, User
from .base import AsyncSqlRepository


class UserRepository(AsyncSqlRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, compared case-insensitively."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.exec(stmt)
        return result.first()

    async def list_by_role(self, role: str, active_only: bool = True) -> List[User]:
        """List users holding a role, e.g. every insurance head to notify."""
        stmt = select(User).where(User.role == role)
        if active_only:
            stmt = stmt.where(User.is_active == True)  # noqa: E712
        result = await self.session.exec(stmt.order_by(User.name))
        return list(result.all())


class TeamRepository(AsyncSqlRepository[Team]):
    """Repository for sales team data access operations using SQLModel."""

    order_by_field = "name"
    order_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Team)

    async def get_by_name(self, name: str) -> Optional[Team]:
        result = await self.session.exec(select(Team).where(Team.name == name))
        return result.first()

    async def list_for_department(self, department_id: str) -> List[Team]:
        result = await self.session.exec(select(Team).where(Team.department_id == department_id).order_by(Team.name))
        return list(result.all())
