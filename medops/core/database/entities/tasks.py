"""Task entity model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class Task(Base, table=True):
    """Entity for a to-do item assigned to a user.

    Table: mo_tasks
    """

    __tablename__ = "mo_tasks"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_type=Text)
    due_date: Optional[datetime] = Field(default=None, index=True)
    priority: str = Field(default="MEDIUM", max_length=16, index=True)
    status: str = Field(default="PENDING", max_length=16, index=True)
    created_by_id: str = Field(max_length=64, index=True)
    assigned_to_id: str = Field(max_length=64, index=True)
    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"Task(id={self.id}, title={self.title}, status={self.status})"
