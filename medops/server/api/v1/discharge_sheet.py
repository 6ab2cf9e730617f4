"""
Discharge Sheet API Endpoints.

A discharge sheet records the final bill of a case and the settlement split
between hospital and company. A P/L record is created from it.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from medops.core.models.domain import UserRole
from medops.core.models.io.settlement import (
    DischargeSheetCreate,
    DischargeSheetRead,
    DischargeSheetUpdate,
    PLRecordRead,
)
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission, require_roles
from medops.server.services.deps import SettlementServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=DischargeSheetRead,
    status_code=201,
    summary="Create Discharge Sheet",
    description="Create the discharge sheet of a discharged or admitted case. Totals and shares are computed.",
    response_description="The created discharge sheet.",
    responses={400: {"description": "Wrong stage or sheet already exists"}, 404: {"description": "Lead not found"}},
)
async def create_sheet(
    payload: DischargeSheetCreate, service: SettlementServiceDep, user=Depends(require_roles(UserRole.INSURANCE_HEAD))
):
    return await service.create_sheet(user, payload)


@router.get(
    "",
    response_model=List[DischargeSheetRead],
    summary="List Discharge Sheets",
    description="List discharge sheets, optionally for one lead.",
    response_description="A list of discharge sheets.",
    dependencies=[Depends(require_permission(Permission.INSURANCE_READ))],
)
async def list_sheets(service: SettlementServiceDep, lead_id: Optional[str] = None):
    return await service.list_sheets(lead_id)


@router.get(
    "/{sheet_id}",
    response_model=DischargeSheetRead,
    summary="Get Discharge Sheet",
    description="Retrieve a discharge sheet.",
    response_description="The discharge sheet.",
    responses={404: {"description": "Discharge sheet not found"}},
    dependencies=[Depends(require_permission(Permission.INSURANCE_READ))],
)
async def get_sheet(sheet_id: str, service: SettlementServiceDep):
    return await service.get_sheet(sheet_id)


@router.patch(
    "/{sheet_id}",
    response_model=DischargeSheetRead,
    summary="Update Discharge Sheet",
    description="Update bill figures; totals and shares are recomputed.",
    response_description="The updated discharge sheet.",
    responses={404: {"description": "Discharge sheet not found"}},
    dependencies=[Depends(require_roles(UserRole.INSURANCE_HEAD))],
)
async def update_sheet(sheet_id: str, payload: DischargeSheetUpdate, service: SettlementServiceDep):
    return await service.update_sheet(sheet_id, payload)


@router.post(
    "/{sheet_id}/create-pnl",
    response_model=PLRecordRead,
    status_code=201,
    summary="Create P/L Record",
    description="Create the P/L record of the case from its discharge sheet.",
    response_description="The created P/L record.",
    responses={400: {"description": "P/L record already exists"}, 404: {"description": "Discharge sheet not found"}},
)
async def create_pnl(
    sheet_id: str,
    service: SettlementServiceDep,
    user=Depends(require_roles(UserRole.PL_HEAD, UserRole.INSURANCE_HEAD)),
):
    return await service.create_pl_from_sheet(user, sheet_id)
