"""
Discharge sheet and P/L record I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import PayoutStatus


class _DischargeSheetFields(BaseModel):
    doctor_name: Optional[str] = None
    surgery_name: Optional[str] = None
    admission_date: Optional[datetime] = None
    discharge_date: Optional[datetime] = None

    room_rent_amount: Optional[float] = Field(default=None, ge=0)
    pharmacy_amount: Optional[float] = Field(default=None, ge=0)
    investigation_amount: Optional[float] = Field(default=None, ge=0)
    consumables_amount: Optional[float] = Field(default=None, ge=0)
    implants_amount: Optional[float] = Field(default=None, ge=0)
    instruments_amount: Optional[float] = Field(default=None, ge=0)

    deduction_amount: Optional[float] = Field(default=None, ge=0)
    discount_amount: Optional[float] = Field(default=None, ge=0)
    waived_off_amount: Optional[float] = Field(default=None, ge=0)
    other_deductions: Optional[float] = Field(default=None, ge=0)

    final_approved_amount: Optional[float] = Field(default=None, ge=0, description="Amount approved by the insurer")

    hospital_share_pct: Optional[float] = Field(default=None, ge=0, le=100)
    mediend_share_pct: Optional[float] = Field(default=None, ge=0, le=100)
    hospital_share_amount: Optional[float] = Field(default=None, ge=0)
    mediend_share_amount: Optional[float] = Field(default=None, ge=0)
    doctor_share_amount: Optional[float] = Field(default=None, ge=0)

    remarks: Optional[str] = None


class DischargeSheetCreate(_DischargeSheetFields):
    """Schema for creating a discharge sheet via API. Totals are computed server-side."""

    lead_id: str


class DischargeSheetUpdate(_DischargeSheetFields):
    """Schema for updating a discharge sheet via API. Totals are recomputed."""


class DischargeSheetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    doctor_name: Optional[str] = None
    surgery_name: Optional[str] = None
    admission_date: Optional[datetime] = None
    discharge_date: Optional[datetime] = None
    room_rent_amount: float
    pharmacy_amount: float
    investigation_amount: float
    consumables_amount: float
    implants_amount: float
    instruments_amount: float
    total_bill_amount: float
    deduction_amount: float
    discount_amount: float
    waived_off_amount: float
    other_deductions: float
    total_deductions: float
    final_approved_amount: Optional[float] = None
    net_settlement_amount: float
    hospital_share_pct: Optional[float] = None
    mediend_share_pct: Optional[float] = None
    hospital_share_amount: float
    mediend_share_amount: float
    doctor_share_amount: float
    remarks: Optional[str] = None
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class PLRecordUpdate(BaseModel):
    """Schema for updating a P/L record via API. Shares and profit are recomputed."""

    bill_amount: Optional[float] = Field(default=None, ge=0)
    hospital_share_pct: Optional[float] = Field(default=None, ge=0, le=100)
    mediend_share_pct: Optional[float] = Field(default=None, ge=0, le=100)
    hospital_share_amount: Optional[float] = Field(default=None, ge=0)
    mediend_share_amount: Optional[float] = Field(default=None, ge=0)
    doctor_share_amount: Optional[float] = Field(default=None, ge=0)
    referral_amount: Optional[float] = Field(default=None, ge=0)
    cab_charges: Optional[float] = Field(default=None, ge=0)
    dc_charges: Optional[float] = Field(default=None, ge=0)
    doctor_charges: Optional[float] = Field(default=None, ge=0)
    implant_cost: Optional[float] = Field(default=None, ge=0)
    final_profit: Optional[float] = None
    hospital_payout_status: Optional[PayoutStatus] = None
    doctor_payout_status: Optional[PayoutStatus] = None
    remarks: Optional[str] = None


class PLRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    discharge_sheet_id: str
    bill_amount: float
    total_amount: float
    hospital_share_pct: Optional[float] = None
    mediend_share_pct: Optional[float] = None
    hospital_share_amount: float
    mediend_share_amount: float
    doctor_share_amount: float
    referral_amount: float
    cab_charges: float
    dc_charges: float
    doctor_charges: float
    implant_cost: float
    net_profit: float
    final_profit: float
    hospital_payout_status: PayoutStatus
    doctor_payout_status: PayoutStatus
    closed_at: Optional[datetime] = None
    remarks: Optional[str] = None
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class PLRecordList(BaseModel):
    data: List[PLRecordRead]
    total: int
