"""
Service for finance reports.

The summary totals approved entries within an optional date range, and checks
every payment mode's stored balance against its full approved history.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, Optional

from medops.core.database.repositories import SqlRepoBundle
from medops.core.logging_config import get_logger
from medops.core.models.domain import TransactionType
from medops.core.models.io.finance import FinanceSummary, HeadSummary, PaymentModeSummary
from medops.core.rules.ledger import balance_integrity
from medops.core.rules.money import round_money

logger = get_logger(__name__)

CREDIT = TransactionType.CREDIT.value
DEBIT = TransactionType.DEBIT.value
TRANSFER = TransactionType.SELF_TRANSFER.value


class FinanceReportService:
    """Service for ledger totals and balance integrity."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def _mode_summary(self, mode) -> PaymentModeSummary:
        ledger = self.repos.ledger
        credits = await ledger.sum_approved(
            CREDIT, "received_amount", payment_mode_column="payment_mode_id", payment_mode_id=mode.id
        )
        debits = await ledger.sum_approved(
            DEBIT, "payment_amount", payment_mode_column="payment_mode_id", payment_mode_id=mode.id
        )
        transfers_in = await ledger.sum_approved(
            TRANSFER, "transfer_amount", payment_mode_column="to_payment_mode_id", payment_mode_id=mode.id
        )
        transfers_out = await ledger.sum_approved(
            TRANSFER, "transfer_amount", payment_mode_column="from_payment_mode_id", payment_mode_id=mode.id
        )
        check = balance_integrity(
            mode.opening_balance, credits + transfers_in, debits + transfers_out, mode.current_balance
        )
        if not check.integrity_ok:
            logger.warning(
                f"Balance mismatch on payment mode {mode.id}: stored {check.current_balance}, "
                f"expected {check.expected_balance}"
            )
        return PaymentModeSummary(
            payment_mode_id=mode.id,
            name=mode.name,
            opening_balance=check.opening_balance,
            total_credits=check.total_credits,
            total_debits=check.total_debits,
            current_balance=check.current_balance,
            expected_balance=check.expected_balance,
            integrity_ok=check.integrity_ok,
        )

    async def summary(
        self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
    ) -> FinanceSummary:
        """
        Summarize the ledger.

        Credit and debit totals, the pending count and the head breakdown
        respect the date range. Payment mode figures always cover all time,
        since a balance is only comparable with its whole history.
        """
        ledger = self.repos.ledger
        total_credits = await ledger.sum_approved(CREDIT, "received_amount", start_date=start_date, end_date=end_date)
        total_debits = await ledger.sum_approved(DEBIT, "payment_amount", start_date=start_date, end_date=end_date)
        pending = await ledger.count_pending(start_date, end_date)

        modes = [await self._mode_summary(mode) for mode in await self.repos.payment_modes.list_masters()]

        head_totals: Dict[str, float] = defaultdict(float)
        for entry in await ledger.list_approved_between(start_date, end_date):
            if entry.transaction_type == DEBIT:
                head_totals[entry.head_id] += entry.payment_amount or 0
        heads = []
        for head in await self.repos.heads.list_masters():
            if head.id in head_totals:
                total = round_money(head_totals[head.id])
                heads.append(HeadSummary(head_id=head.id, name=head.name, total_debits=total))
        heads.sort(key=lambda h: h.total_debits, reverse=True)

        return FinanceSummary(
            start_date=start_date,
            end_date=end_date,
            total_credits=round_money(total_credits),
            total_debits=round_money(total_debits),
            pending_count=pending,
            payment_modes=modes,
            heads=heads,
        )
