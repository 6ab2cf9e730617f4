"""
Discharge sheet and P/L record entity models.

After discharge, insurance records the final bill in a discharge sheet. The
P/L team then settles the case in a P/L record that splits the revenue
between the hospital and the company and tracks payouts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class DischargeSheet(Base, table=True):
    """Entity for the final bill of a discharged case.

    Table: mo_discharge_sheets
    """

    __tablename__ = "mo_discharge_sheets"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_id: str = Field(foreign_key="mo_leads.id", max_length=64, unique=True)

    doctor_name: Optional[str] = Field(default=None, max_length=255)
    surgery_name: Optional[str] = Field(default=None, max_length=255)
    admission_date: Optional[datetime] = Field(default=None)
    discharge_date: Optional[datetime] = Field(default=None)

    # Bill components
    room_rent_amount: float = Field(default=0)
    pharmacy_amount: float = Field(default=0)
    investigation_amount: float = Field(default=0)
    consumables_amount: float = Field(default=0)
    implants_amount: float = Field(default=0)
    instruments_amount: float = Field(default=0)
    total_bill_amount: float = Field(default=0)

    # Deductions
    deduction_amount: float = Field(default=0)
    discount_amount: float = Field(default=0)
    waived_off_amount: float = Field(default=0)
    other_deductions: float = Field(default=0)
    total_deductions: float = Field(default=0)

    final_approved_amount: Optional[float] = Field(default=None)
    net_settlement_amount: float = Field(default=0)

    # Revenue split
    hospital_share_pct: Optional[float] = Field(default=None)
    mediend_share_pct: Optional[float] = Field(default=None)
    hospital_share_amount: float = Field(default=0)
    mediend_share_amount: float = Field(default=0)
    doctor_share_amount: float = Field(default=0)

    remarks: Optional[str] = Field(default=None, sa_type=Text)
    created_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class PLRecord(Base, table=True):
    """Entity for the profit and loss settlement of a case.

    Table: mo_pl_records
    """

    __tablename__ = "mo_pl_records"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    lead_id: str = Field(foreign_key="mo_leads.id", max_length=64, unique=True)
    discharge_sheet_id: str = Field(foreign_key="mo_discharge_sheets.id", max_length=64, index=True)

    bill_amount: float = Field(default=0)
    total_amount: float = Field(default=0)

    # Revenue split
    hospital_share_pct: Optional[float] = Field(default=None)
    mediend_share_pct: Optional[float] = Field(default=None)
    hospital_share_amount: float = Field(default=0)
    mediend_share_amount: float = Field(default=0)
    doctor_share_amount: float = Field(default=0)

    # Case costs
    referral_amount: float = Field(default=0)
    cab_charges: float = Field(default=0)
    dc_charges: float = Field(default=0)
    doctor_charges: float = Field(default=0)
    implant_cost: float = Field(default=0)

    net_profit: float = Field(default=0)
    final_profit: float = Field(default=0)
    # Set when finance fixes the final profit by hand; later updates keep it
    final_profit_override: Optional[float] = Field(default=None)

    # Payouts
    hospital_payout_status: str = Field(default="PENDING", max_length=16, index=True)
    doctor_payout_status: str = Field(default="PENDING", max_length=16, index=True)
    closed_at: Optional[datetime] = Field(default=None)

    remarks: Optional[str] = Field(default=None, sa_type=Text)
    created_by_id: str = Field(max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)
