"""Notification entity model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class Notification(Base, table=True):
    """Entity for an in-app notification.

    Table: mo_notifications
    """

    __tablename__ = "mo_notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(max_length=64, index=True)
    type: str = Field(max_length=32)
    title: str = Field(max_length=255)
    message: str = Field(sa_type=Text)
    link: Optional[str] = Field(default=None, max_length=512)
    related_id: Optional[str] = Field(default=None, max_length=64)
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
