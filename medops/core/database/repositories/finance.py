"""
Finance repository interface and implementation.

This module provides data access operations for the finance masters, the
ledger and its audit trail, including the aggregate queries behind the
finance summary report and the MD analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now_naive
from ..entities.finance import Head, LedgerAuditLog, LedgerEntry, Party, PaymentMode, PaymentType
from .base import AsyncQueryBuilder, AsyncSqlRepository, EntityType


class _NamedMasterRepository(AsyncSqlRepository[EntityType]):
    """Shared queries for masters identified by name."""

    order_by_field = "name"
    order_descending = False

    async def get_by_name(self, name: str) -> Optional[EntityType]:
        result = await self.session.exec(select(self.model).where(self.model.name == name))
        return result.first()

    async def list_masters(self, active_only: bool = False) -> List[EntityType]:
        stmt = select(self.model)
        if active_only:
            stmt = stmt.where(self.model.is_active == True)  # noqa: E712
        result = await self.session.exec(stmt.order_by(self.model.name))
        return list(result.all())


class PartyRepository(_NamedMasterRepository[Party]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Party)


class HeadRepository(_NamedMasterRepository[Head]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Head)


class PaymentTypeRepository(_NamedMasterRepository[PaymentType]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentType)


class PaymentModeRepository(_NamedMasterRepository[PaymentMode]):
    """Repository for payment modes and their running balances."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentMode)

    async def adjust_balance(self, mode_id: str, delta: float) -> float:
        """Move a payment mode balance by ``delta`` inside the current unit of work.

        The increment is done in SQL so concurrent approvals never overwrite
        each other's balance change.

        Returns:
            The balance after the change
        """
        stmt = (
            update(PaymentMode)
            .where(PaymentMode.id == mode_id)
            .values(current_balance=PaymentMode.current_balance + delta, updated_at=utc_now_naive())
        )
        await self.session.exec(stmt)  # type: ignore
        await self.session.flush()
        result = await self.session.exec(select(PaymentMode.current_balance).where(PaymentMode.id == mode_id))
        balance = float(result.one())
        mode = await self.session.get(PaymentMode, mode_id)
        if mode is not None:
            mode.current_balance = balance
        return balance


@dataclass
class LedgerFilters:
    """Query parameters accepted by the ledger list."""

    transaction_type: Optional[str] = None
    status: Optional[str] = None
    edit_request_status: Optional[str] = None
    party_id: Optional[str] = None
    head_id: Optional[str] = None
    payment_mode_id: Optional[str] = None
    payment_type_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    component_filter: Optional[str] = None


class LedgerEntryRepository(AsyncSqlRepository[LedgerEntry]):
    """Repository for ledger entry data access operations using SQLModel."""

    order_by_field = "transaction_date"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LedgerEntry)

    @staticmethod
    def _conditions(filters: LedgerFilters) -> list:
        conditions = [LedgerEntry.is_deleted == False]  # noqa: E712
        equals: Dict[str, Optional[str]] = {
            "transaction_type": filters.transaction_type,
            "status": filters.status,
            "edit_request_status": filters.edit_request_status,
            "party_id": filters.party_id,
            "head_id": filters.head_id,
            "payment_type_id": filters.payment_type_id,
        }
        for key, value in equals.items():
            if value is not None:
                conditions.append(getattr(LedgerEntry, key) == value)
        if filters.payment_mode_id:
            conditions.append(
                or_(
                    LedgerEntry.payment_mode_id == filters.payment_mode_id,
                    LedgerEntry.from_payment_mode_id == filters.payment_mode_id,
                    LedgerEntry.to_payment_mode_id == filters.payment_mode_id,
                )
            )
        if filters.start_date:
            conditions.append(LedgerEntry.transaction_date >= filters.start_date)
        if filters.end_date:
            conditions.append(LedgerEntry.transaction_date <= filters.end_date)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            conditions.append(
                or_(LedgerEntry.description.ilike(pattern), LedgerEntry.serial_number.ilike(pattern))  # type: ignore
            )
        a_zero = or_(LedgerEntry.component_a == 0, LedgerEntry.component_a == None)  # noqa: E711
        b_zero = or_(LedgerEntry.component_b == 0, LedgerEntry.component_b == None)  # noqa: E711
        if filters.component_filter == "a_only":
            conditions.extend([LedgerEntry.component_a > 0, b_zero])
        elif filters.component_filter == "b_only":
            conditions.extend([a_zero, LedgerEntry.component_b > 0])
        elif filters.component_filter == "both":
            conditions.extend([LedgerEntry.component_a > 0, LedgerEntry.component_b > 0])
        return conditions

    async def search(
        self, filters: LedgerFilters, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> Tuple[List[LedgerEntry], int]:
        """Page through live ledger entries, newest transaction first.

        Returns:
            The page of entries and the total number of matches
        """
        conditions = self._conditions(filters)
        stmt = select(LedgerEntry).where(*conditions)
        stmt = stmt.order_by(LedgerEntry.transaction_date.desc(), LedgerEntry.created_at.desc())  # type: ignore
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        entries = (await self.session.exec(stmt)).all()
        total = (await self.session.exec(select(func.count()).select_from(LedgerEntry).where(*conditions))).one()
        return list(entries), int(total)

    async def serials_for_prefix(self, prefix: str) -> List[str]:
        """Serial numbers in use for a prefix, deleted entries included."""
        stmt = select(LedgerEntry.serial_number).where(LedgerEntry.serial_number.like(f"{prefix}-%"))  # type: ignore
        result = await self.session.exec(stmt)
        return list(result.all())

    async def sum_approved(
        self,
        transaction_type: str,
        column: str,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        payment_mode_column: Optional[str] = None,
        payment_mode_id: Optional[str] = None,
    ) -> float:
        """Sum an amount column over approved, live entries of one type."""
        return await self.sum_by_status(
            transaction_type,
            column,
            status="APPROVED",
            start_date=start_date,
            end_date=end_date,
            payment_mode_column=payment_mode_column,
            payment_mode_id=payment_mode_id,
        )

    async def sum_by_status(
        self,
        transaction_type: str,
        column: str,
        *,
        status: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        payment_mode_column: Optional[str] = None,
        payment_mode_id: Optional[str] = None,
    ) -> float:
        amount = getattr(LedgerEntry, column)
        stmt = select(func.coalesce(func.sum(amount), 0)).where(
            LedgerEntry.is_deleted == False,  # noqa: E712
            LedgerEntry.transaction_type == transaction_type,
            LedgerEntry.status == status,
        )
        if start_date:
            stmt = stmt.where(LedgerEntry.transaction_date >= start_date)
        if end_date:
            stmt = stmt.where(LedgerEntry.transaction_date <= end_date)
        if payment_mode_column and payment_mode_id:
            stmt = stmt.where(getattr(LedgerEntry, payment_mode_column) == payment_mode_id)
        result = await self.session.exec(stmt)
        return float(result.one() or 0)

    async def count_pending(self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None) -> int:
        stmt = select(func.count()).select_from(LedgerEntry).where(
            LedgerEntry.is_deleted == False,  # noqa: E712
            LedgerEntry.status == "PENDING",
        )
        if start_date:
            stmt = stmt.where(LedgerEntry.transaction_date >= start_date)
        if end_date:
            stmt = stmt.where(LedgerEntry.transaction_date <= end_date)
        result = await self.session.exec(stmt)
        return int(result.one())

    async def list_approved_between(
        self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
    ) -> List[LedgerEntry]:
        """Approved live entries in a date range, oldest first, for trend and head breakdowns."""
        stmt = select(LedgerEntry).where(
            LedgerEntry.is_deleted == False,  # noqa: E712
            LedgerEntry.status == "APPROVED",
        )
        if start_date:
            stmt = stmt.where(LedgerEntry.transaction_date >= start_date)
        if end_date:
            stmt = stmt.where(LedgerEntry.transaction_date <= end_date)
        result = await self.session.exec(stmt.order_by(LedgerEntry.transaction_date.asc()))  # type: ignore
        return list(result.all())


class LedgerAuditLogRepository(AsyncSqlRepository[LedgerAuditLog]):
    """Repository for ledger audit trail data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LedgerAuditLog)

    async def list_for_entry(self, ledger_entry_id: str) -> List[LedgerAuditLog]:
        stmt = (
            select(LedgerAuditLog)
            .where(LedgerAuditLog.ledger_entry_id == ledger_entry_id)
            .order_by(LedgerAuditLog.created_at.asc())  # type: ignore
        )
        result = await self.session.exec(stmt)
        return list(result.all())

