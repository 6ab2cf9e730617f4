"""Discharge sheet totals and the P/L revenue split."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from medops.core.models.domain import PayoutStatus

from .money import round_money


@dataclass(frozen=True)
class DischargeTotals:
    total_bill_amount: float
    total_deductions: float
    net_settlement_amount: float


def discharge_totals(
    room_rent_amount: Optional[float] = None,
    pharmacy_amount: Optional[float] = None,
    investigation_amount: Optional[float] = None,
    consumables_amount: Optional[float] = None,
    implants_amount: Optional[float] = None,
    instruments_amount: Optional[float] = None,
    deduction_amount: Optional[float] = None,
    discount_amount: Optional[float] = None,
    waived_off_amount: Optional[float] = None,
    other_deductions: Optional[float] = None,
    final_approved_amount: Optional[float] = None,
) -> DischargeTotals:
    """Compute the bill, deduction and settlement totals of a discharge sheet.

    The settlement is taken against the insurer's final approved amount when
    one is recorded, otherwise against the full bill.
    """
    total_bill = round_money(
        sum(
            round_money(v)
            for v in (
                room_rent_amount,
                pharmacy_amount,
                investigation_amount,
                consumables_amount,
                implants_amount,
                instruments_amount,
            )
        )
    )
    total_deductions = round_money(
        sum(round_money(v) for v in (deduction_amount, discount_amount, waived_off_amount, other_deductions))
    )
    base = final_approved_amount if final_approved_amount else total_bill
    return DischargeTotals(
        total_bill_amount=total_bill,
        total_deductions=total_deductions,
        net_settlement_amount=round_money(round_money(base) - total_deductions),
    )


def share_amount(bill_amount: Optional[float], share_pct: Optional[float], explicit_amount: Optional[float]) -> float:
    """Amount of a revenue share.

    A percentage of the bill wins when both are positive, otherwise the amount
    entered by hand is used.
    """
    if bill_amount and bill_amount > 0 and share_pct and share_pct > 0:
        return round_money(bill_amount * share_pct / 100)
    return round_money(explicit_amount)


@dataclass(frozen=True)
class ProfitBreakdown:
    hospital_share_amount: float
    mediend_share_amount: float
    total_costs: float
    net_profit: float
    final_profit: float


def pl_profit(
    bill_amount: Optional[float],
    hospital_share_pct: Optional[float] = None,
    hospital_share_amount: Optional[float] = None,
    mediend_share_pct: Optional[float] = None,
    mediend_share_amount: Optional[float] = None,
    referral_amount: Optional[float] = None,
    cab_charges: Optional[float] = None,
    dc_charges: Optional[float] = None,
    doctor_charges: Optional[float] = None,
    implant_cost: Optional[float] = None,
    final_profit: Optional[float] = None,
) -> ProfitBreakdown:
    """Split a case's bill between hospital and company and derive the profit.

    The company share minus the case costs is the net profit. An explicit final
    profit overrides the computed one.
    """
    hospital = share_amount(bill_amount, hospital_share_pct, hospital_share_amount)
    company = share_amount(bill_amount, mediend_share_pct, mediend_share_amount)
    costs = round_money(
        sum(round_money(v) for v in (referral_amount, cab_charges, dc_charges, doctor_charges, implant_cost))
    )
    net = round_money(company - costs)
    return ProfitBreakdown(
        hospital_share_amount=hospital,
        mediend_share_amount=company,
        total_costs=costs,
        net_profit=net,
        final_profit=round_money(final_profit) if final_profit is not None else net,
    )


def is_closed(hospital_payout_status: Optional[str], doctor_payout_status: Optional[str]) -> bool:
    """A P/L record is closed once both the hospital and the doctor have been paid."""
    return hospital_payout_status == PayoutStatus.PAID.value and doctor_payout_status == PayoutStatus.PAID.value
