"""
Service for discharge sheets and P/L records.

Totals, revenue shares and profit are always recomputed with
``medops.core.rules.revenue`` from the stored inputs, never accepted from the
client.
"""

from __future__ import annotations

from typing import List, Optional

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.settlement import DischargeSheet, PLRecord
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import ConflictError, NotFoundError
from medops.core.logging_config import get_logger
from medops.core.models.domain import PayoutStatus, PipelineStage
from medops.core.models.io.settlement import DischargeSheetCreate, DischargeSheetUpdate, PLRecordUpdate
from medops.core.monitoring import log_workflow_event
from medops.core.rules import case_flow, revenue
from medops.core.rules.money import round_money

logger = get_logger(__name__)

_SHEET_AMOUNT_FIELDS = (
    "room_rent_amount",
    "pharmacy_amount",
    "investigation_amount",
    "consumables_amount",
    "implants_amount",
    "instruments_amount",
    "deduction_amount",
    "discount_amount",
    "waived_off_amount",
    "other_deductions",
)


def _recompute_sheet(
    sheet: DischargeSheet,
    hospital_share_amount: Optional[float],
    mediend_share_amount: Optional[float],
) -> None:
    """Refresh a sheet's totals and shares. Shares are taken on the net settlement."""
    totals = revenue.discharge_totals(
        **{field: getattr(sheet, field) for field in _SHEET_AMOUNT_FIELDS},
        final_approved_amount=sheet.final_approved_amount,
    )
    sheet.total_bill_amount = totals.total_bill_amount
    sheet.total_deductions = totals.total_deductions
    sheet.net_settlement_amount = totals.net_settlement_amount
    sheet.hospital_share_amount = revenue.share_amount(
        totals.net_settlement_amount, sheet.hospital_share_pct, hospital_share_amount
    )
    sheet.mediend_share_amount = revenue.share_amount(
        totals.net_settlement_amount, sheet.mediend_share_pct, mediend_share_amount
    )


def _recompute_pl(record: PLRecord) -> None:
    breakdown = revenue.pl_profit(
        record.bill_amount,
        hospital_share_pct=record.hospital_share_pct,
        hospital_share_amount=record.hospital_share_amount,
        mediend_share_pct=record.mediend_share_pct,
        mediend_share_amount=record.mediend_share_amount,
        referral_amount=record.referral_amount,
        cab_charges=record.cab_charges,
        dc_charges=record.dc_charges,
        doctor_charges=record.doctor_charges,
        implant_cost=record.implant_cost,
    )
    record.hospital_share_amount = breakdown.hospital_share_amount
    record.mediend_share_amount = breakdown.mediend_share_amount
    record.net_profit = breakdown.net_profit


class SettlementService:
    """Service for the discharge sheet and the P/L record of a case."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    # ------------------------------------------------------------------
    # Discharge sheet
    # ------------------------------------------------------------------

    async def create_sheet(self, user: User, data: DischargeSheetCreate) -> DischargeSheet:
        lead = await self.repos.leads.get_by_id(data.lead_id)
        if lead is None:
            raise NotFoundError("Lead", data.lead_id)
        case_flow.require_stage(lead.case_stage, case_flow.DISCHARGE_SHEET_STAGES, "create a discharge sheet")
        if await self.repos.discharge_sheets.get_by_lead(lead.id):
            raise ConflictError("Discharge sheet already exists for this lead")

        values = data.model_dump(exclude={"hospital_share_amount", "mediend_share_amount"})
        for key in _SHEET_AMOUNT_FIELDS + ("doctor_share_amount",):
            if values.get(key) is None:
                values[key] = 0
        sheet = DischargeSheet(created_by_id=user.id, **values)
        _recompute_sheet(sheet, data.hospital_share_amount, data.mediend_share_amount)
        await self.repos.discharge_sheets.stage(sheet)

        lead.pipeline_stage = PipelineStage.PL.value
        await self.repos.leads.stage(lead)
        await self.repos.commit()
        log_workflow_event(
            "discharge_sheet_created", sheet.id, actor_id=user.id, net_settlement=sheet.net_settlement_amount
        )
        return sheet

    async def get_sheet(self, sheet_id: str) -> DischargeSheet:
        sheet = await self.repos.discharge_sheets.get_by_id(sheet_id)
        if sheet is None:
            raise NotFoundError("Discharge sheet", sheet_id)
        return sheet

    async def list_sheets(self, lead_id: Optional[str] = None) -> List[DischargeSheet]:
        return await self.repos.discharge_sheets.list(filters={"lead_id": lead_id})

    async def update_sheet(self, sheet_id: str, data: DischargeSheetUpdate) -> DischargeSheet:
        sheet = await self.get_sheet(sheet_id)
        changes = data.model_dump(exclude_unset=True)
        hospital_amount = changes.pop("hospital_share_amount", sheet.hospital_share_amount)
        mediend_amount = changes.pop("mediend_share_amount", sheet.mediend_share_amount)
        for key, value in changes.items():
            if value is None and key in _SHEET_AMOUNT_FIELDS + ("doctor_share_amount",):
                value = 0
            setattr(sheet, key, value)
        _recompute_sheet(sheet, hospital_amount, mediend_amount)
        return await self.repos.discharge_sheets.update(sheet)

    # ------------------------------------------------------------------
    # P/L
    # ------------------------------------------------------------------

    async def create_pl_from_sheet(self, user: User, sheet_id: str) -> PLRecord:
        """Open the P/L record of a case from its discharge sheet."""
        sheet = await self.get_sheet(sheet_id)
        if await self.repos.pl_records.get_by_lead(sheet.lead_id):
            raise ConflictError("P/L record already exists for this lead")

        record = PLRecord(
            lead_id=sheet.lead_id,
            discharge_sheet_id=sheet.id,
            bill_amount=sheet.net_settlement_amount,
            total_amount=sheet.total_bill_amount,
            hospital_share_pct=sheet.hospital_share_pct,
            mediend_share_pct=sheet.mediend_share_pct,
            hospital_share_amount=sheet.hospital_share_amount,
            mediend_share_amount=sheet.mediend_share_amount,
            doctor_share_amount=sheet.doctor_share_amount,
            remarks=sheet.remarks,
            created_by_id=user.id,
        )
        _recompute_pl(record)
        record.final_profit = record.net_profit
        await self.repos.pl_records.stage(record)

        lead = await self.repos.leads.get_by_id(sheet.lead_id)
        if lead is not None:
            lead.pipeline_stage = PipelineStage.PL.value
            await self.repos.leads.stage(lead)
        await self.repos.commit()
        log_workflow_event("pl_record_created", record.id, actor_id=user.id, lead_id=record.lead_id)
        return record

    async def list_pl(
        self,
        hospital_payout_status: Optional[PayoutStatus] = None,
        doctor_payout_status: Optional[PayoutStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[PLRecord]:
        return await self.repos.pl_records.list(
            limit=limit,
            offset=offset,
            filters={"hospital_payout_status": hospital_payout_status, "doctor_payout_status": doctor_payout_status},
        )

    async def count_pl(
        self,
        hospital_payout_status: Optional[PayoutStatus] = None,
        doctor_payout_status: Optional[PayoutStatus] = None,
    ) -> int:
        return await self.repos.pl_records.count(
            {"hospital_payout_status": hospital_payout_status, "doctor_payout_status": doctor_payout_status}
        )

    async def get_pl(self, lead_id: str) -> PLRecord:
        record = await self.repos.pl_records.get_by_lead(lead_id)
        if record is None:
            raise NotFoundError("P/L record for lead", lead_id)
        return record

    async def update_pl(self, user: User, lead_id: str, data: PLRecordUpdate) -> PLRecord:
        """
        Update a P/L record and recompute shares and profit.

        Once both payouts are PAID the record is closed and the case pipeline
        moves to COMPLETED.
        """
        record = await self.get_pl(lead_id)
        changes = data.model_dump(exclude_unset=True)
        if "final_profit" in changes:
            explicit_final = changes.pop("final_profit")
            record.final_profit_override = round_money(explicit_final) if explicit_final is not None else None
        for key, value in changes.items():
            if value is None:
                continue
            setattr(record, key, value.value if isinstance(value, PayoutStatus) else value)
        _recompute_pl(record)
        if record.final_profit_override is not None:
            record.final_profit = record.final_profit_override
        else:
            record.final_profit = record.net_profit

        if revenue.is_closed(record.hospital_payout_status, record.doctor_payout_status):
            if record.closed_at is None:
                record.closed_at = utc_now_naive()
                lead = await self.repos.leads.get_by_id(record.lead_id)
                if lead is not None:
                    lead.pipeline_stage = PipelineStage.COMPLETED.value
                    await self.repos.leads.stage(lead)
                log_workflow_event("pl_record_closed", record.id, actor_id=user.id, final_profit=record.final_profit)
        else:
            record.closed_at = None

        await self.repos.pl_records.stage(record)
        await self.repos.commit()
        return record
