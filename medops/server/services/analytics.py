"""
Service for MD analytics.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Optional

from medops.core.database.base import utc_now_naive
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import ValidationFailedError
from medops.core.models.domain import LedgerStatus, TransactionType
from medops.core.models.io.analytics import DailyTrend, MDFinanceAnalytics
from medops.core.rules.money import round_money

DEFAULT_RANGE_DAYS = 30


class AnalyticsService:
    """Service for the MD finance dashboard figures."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def md_finance(
        self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
    ) -> MDFinanceAnalytics:
        """
        Revenue, expenses and approval figures over a date range.

        Without a range the last 30 days are used. Every day of the range
        appears in the trend, with zeroes on days without activity.
        """
        end_date = end_date or utc_now_naive()
        start_date = start_date or end_date - timedelta(days=DEFAULT_RANGE_DAYS)
        if start_date > end_date:
            raise ValidationFailedError("start_date must not be after end_date")

        ledger = self.repos.ledger
        revenue = await ledger.sum_approved(
            TransactionType.CREDIT.value, "received_amount", start_date=start_date, end_date=end_date
        )
        expenses = await ledger.sum_approved(
            TransactionType.DEBIT.value, "payment_amount", start_date=start_date, end_date=end_date
        )
        rejected = await ledger.sum_by_status(
            TransactionType.DEBIT.value,
            "payment_amount",
            status=LedgerStatus.REJECTED.value,
            start_date=start_date,
            end_date=end_date,
        )
        pending = await ledger.count_pending(start_date, end_date)

        trends = OrderedDict()
        day = start_date.date()
        while day <= end_date.date():
            trends[day] = DailyTrend(date=day)
            day += timedelta(days=1)
        for entry in await ledger.list_approved_between(start_date, end_date):
            trend = trends.setdefault(entry.transaction_date.date(), DailyTrend(date=entry.transaction_date.date()))
            if entry.transaction_type == TransactionType.CREDIT.value:
                trend.revenue = round_money(trend.revenue + (entry.received_amount or 0))
            elif entry.transaction_type == TransactionType.DEBIT.value:
                trend.expense = round_money(trend.expense + (entry.payment_amount or 0))

        return MDFinanceAnalytics(
            start_date=start_date,
            end_date=end_date,
            total_revenue=round_money(revenue),
            total_expenses=round_money(expenses),
            net_cash_flow=round_money(revenue - expenses),
            pending_approvals=pending,
            approved_amount=round_money(expenses),
            rejected_amount=round_money(rejected),
            daily_trends=list(trends.values()),
        )
