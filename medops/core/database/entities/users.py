"""
User and team entity models.

Users are everyone who signs in: sales, insurance, P/L, HR, finance and
management staff. Teams group BDs under a team lead.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now_naive


class User(Base, table=True):
    """Entity for an authenticated staff member.

    Table: mo_users
    """

    __tablename__ = "mo_users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=255, unique=True, index=True)
    name: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)
    role: str = Field(max_length=32, index=True)
    team_id: Optional[str] = Field(default=None, foreign_key="mo_teams.id", max_length=64, index=True)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


class Team(Base, table=True):
    """Entity for a sales team.

    Table: mo_teams
    """

    __tablename__ = "mo_teams"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=128, unique=True)
    team_lead_id: Optional[str] = Field(default=None, max_length=64, index=True)
    department_id: Optional[str] = Field(default=None, max_length=64, index=True)

    created_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name})"
