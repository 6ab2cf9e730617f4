"""
Request log entity model.

One row per API request, written by the request log middleware and read by
the admin log and error viewers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now_naive


class RequestLog(Base, table=True):
    """Entity for a served API request.

    Table: mo_request_logs
    """

    __tablename__ = "mo_request_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    method: str = Field(max_length=8)
    path: str = Field(max_length=512, index=True)
    status_code: int = Field(index=True)
    duration_ms: float
    user_id: Optional[str] = Field(default=None, max_length=64)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    error: Optional[str] = Field(default=None, max_length=1024)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
