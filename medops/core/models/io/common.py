"""
Shared I/O models: pagination envelopes and simple acknowledgements.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """Pagination block returned next to a page of results."""

    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    total: int = Field(description="Total number of matching records")
    total_pages: int = Field(description="Number of pages at this page size")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if limit else 0)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
