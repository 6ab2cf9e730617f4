"""
MD finance analytics I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List

from pydantic import BaseModel, Field


class DailyTrend(BaseModel):
    date: date
    revenue: float = 0
    expense: float = 0


class MDFinanceAnalytics(BaseModel):
    """Aggregated cash flow for a date range."""

    start_date: datetime
    end_date: datetime
    total_revenue: float = Field(description="Approved credit received amounts")
    total_expenses: float = Field(description="Approved debit payment amounts")
    net_cash_flow: float
    pending_approvals: int
    approved_amount: float = Field(description="Approved debit amounts")
    rejected_amount: float = Field(description="Rejected debit amounts")
    daily_trends: List[DailyTrend]
