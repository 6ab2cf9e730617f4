"""
P/L API Endpoints.

Profit and loss per case: the company share less case costs, and the payout
state of the hospital and doctor shares. A record closes once both payouts
are paid.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from medops.core.models.domain import PayoutStatus
from medops.core.models.io.settlement import PLRecordList, PLRecordRead, PLRecordUpdate
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import SettlementServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=PLRecordList,
    summary="List P/L Records",
    description="List P/L records, optionally filtered by payout status.",
    response_description="P/L records and the total count.",
    dependencies=[Depends(require_permission(Permission.PL_READ))],
)
async def list_records(
    service: SettlementServiceDep,
    hospital_payout_status: Optional[PayoutStatus] = None,
    doctor_payout_status: Optional[PayoutStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    records = await service.list_pl(hospital_payout_status, doctor_payout_status, limit=limit, offset=offset)
    total = await service.count_pl(hospital_payout_status, doctor_payout_status)
    return PLRecordList(data=[PLRecordRead.model_validate(r) for r in records], total=total)


@router.get(
    "/{lead_id}",
    response_model=PLRecordRead,
    summary="Get P/L Record",
    description="Retrieve the P/L record of a lead.",
    response_description="The P/L record.",
    responses={404: {"description": "No P/L record for this lead"}},
    dependencies=[Depends(require_permission(Permission.PL_READ))],
)
async def get_record(lead_id: str, service: SettlementServiceDep):
    return await service.get_pl(lead_id)


@router.patch(
    "/{lead_id}",
    response_model=PLRecordRead,
    summary="Update P/L Record",
    description=(
        "Update costs, shares and payout statuses. Profit is recomputed; "
        "when both payouts are PAID the record closes and the case completes."
    ),
    response_description="The updated P/L record.",
    responses={404: {"description": "No P/L record for this lead"}},
)
async def update_record(
    lead_id: str,
    payload: PLRecordUpdate,
    service: SettlementServiceDep,
    user=Depends(require_permission(Permission.PL_WRITE)),
):
    return await service.update_pl(user, lead_id, payload)
