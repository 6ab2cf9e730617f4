"""
Leads API Endpoints.

This module covers a patient case from the first sales contact to discharge:
lead creation, KYP, insurance suggestions, raising the pre-auth, admission,
IPD status and discharge. Every stage change is written to the lead's stage
history.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medops.core.models.domain import CaseStage, PipelineStage, UserRole
from medops.core.models.io.common import PaginationMeta
from medops.core.models.io.leads import (
    AdmissionCreate,
    AdmissionRead,
    DischargeRequest,
    IPDMarkRequest,
    KYPBasicCreate,
    KYPDetailedCreate,
    KYPRead,
    KYPSuggestionsCreate,
    LeadCreate,
    LeadPage,
    LeadRead,
    MarkLostRequest,
    RaisePreAuthRequest,
    StageHistoryRead,
)
from medops.core.models.io.pre_auth import PreAuthRead
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission, require_roles
from medops.server.services.deps import CurrentUserDep, LeadServiceDep

router = APIRouter()

_STAGE_ERRORS = {
    400: {"description": "Lead is in the wrong stage or the request breaks a case rule"},
    403: {"description": "Not the owning BD"},
    404: {"description": "Lead not found"},
}


@router.post(
    "",
    response_model=LeadRead,
    status_code=201,
    summary="Create Lead",
    description="Create a lead in NEW_LEAD / SALES. A BD can only create leads for themselves.",
    response_description="The created lead.",
    responses={400: {"description": "Duplicate lead reference"}, 403: {"description": "BD assigning to another BD"}},
    dependencies=[Depends(require_permission(Permission.LEADS_WRITE))],
)
async def create_lead(payload: LeadCreate, user: CurrentUserDep, service: LeadServiceDep):
    return await service.create_lead(user, payload)


@router.get(
    "",
    response_model=LeadPage,
    summary="List Leads",
    description=(
        "List the leads visible to the caller: all leads for management and insurance, "
        "the team's leads for a team lead, and their own leads for a BD."
    ),
    response_description="A page of leads with pagination metadata.",
    dependencies=[Depends(require_permission(Permission.LEADS_READ))],
)
async def list_leads(
    user: CurrentUserDep,
    service: LeadServiceDep,
    case_stage: Optional[CaseStage] = None,
    pipeline_stage: Optional[PipelineStage] = None,
    bd_id: Optional[str] = None,
    search: Optional[str] = Query(None, description="Patient name or lead reference"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
):
    leads, total = await service.list_leads(
        user,
        case_stage=case_stage,
        pipeline_stage=pipeline_stage,
        bd_id=bd_id,
        search=search,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return LeadPage(
        data=[LeadRead.model_validate(lead) for lead in leads], pagination=PaginationMeta.build(page, limit, total)
    )


@router.post(
    "/kyp/{kyp_id}/suggestions",
    response_model=PreAuthRead,
    summary="Add Insurance Suggestions",
    description=(
        "Insurance adds policy details and suggested hospitals to a submitted KYP. "
        "Replaces any earlier suggestions and notifies the BD."
    ),
    response_description="The pre-authorization holding the suggestions.",
    responses={
        400: {"description": "Wrong stage, missing sum insured or no hospitals"},
        404: {"description": "KYP not found"},
    },
)
async def add_suggestions(
    kyp_id: str,
    payload: KYPSuggestionsCreate,
    service: LeadServiceDep,
    user=Depends(require_roles(UserRole.INSURANCE_HEAD)),
):
    return await service.add_suggestions(user, kyp_id, payload)


@router.get(
    "/{lead_id}",
    response_model=LeadRead,
    summary="Get Lead",
    description="Retrieve a lead the caller may see.",
    response_description="The lead.",
    responses={403: {"description": "Lead not visible to the caller"}, 404: {"description": "Lead not found"}},
)
async def get_lead(lead_id: str, user: CurrentUserDep, service: LeadServiceDep):
    return await service.get_lead(user, lead_id)


@router.get(
    "/{lead_id}/stage-history",
    response_model=List[StageHistoryRead],
    summary="Lead Stage History",
    description="All stage changes of a lead, oldest first.",
    response_description="The stage history.",
    responses={403: {"description": "Lead not visible to the caller"}, 404: {"description": "Lead not found"}},
)
async def stage_history(lead_id: str, user: CurrentUserDep, service: LeadServiceDep):
    return await service.stage_history(user, lead_id)


@router.post(
    "/{lead_id}/kyp",
    response_model=KYPRead,
    status_code=201,
    summary="Submit KYP",
    description="Submit the basic Know Your Patient details. Requires Aadhar or PAN and a location.",
    response_description="The KYP submission.",
    responses=_STAGE_ERRORS,
)
async def submit_kyp(lead_id: str, payload: KYPBasicCreate, user: CurrentUserDep, service: LeadServiceDep):
    return await service.submit_kyp_basic(user, lead_id, payload)


@router.post(
    "/{lead_id}/kyp/detailed",
    response_model=KYPRead,
    summary="Submit Detailed KYP",
    description="Store the detailed KYP once insurance has added suggestions.",
    response_description="The KYP submission.",
    responses=_STAGE_ERRORS,
)
async def submit_kyp_detailed(lead_id: str, payload: KYPDetailedCreate, user: CurrentUserDep, service: LeadServiceDep):
    return await service.submit_kyp_detailed(user, lead_id, payload.payload)


@router.post(
    "/{lead_id}/raise-preauth",
    response_model=PreAuthRead,
    summary="Raise Pre-Auth",
    description=(
        "Raise the pre-authorization with one of the suggested hospitals, or request a new hospital. "
        "Notifies insurance."
    ),
    response_description="The raised pre-authorization.",
    responses=_STAGE_ERRORS,
)
async def raise_pre_auth(
    lead_id: str,
    payload: RaisePreAuthRequest,
    service: LeadServiceDep,
    user=Depends(require_roles(UserRole.BD)),
):
    return await service.raise_pre_auth(user, lead_id, payload)


@router.post(
    "/{lead_id}/initiate",
    response_model=AdmissionRead,
    status_code=201,
    summary="Initiate Admission",
    description="Record the admission plan once the pre-auth is approved.",
    response_description="The admission record.",
    responses=_STAGE_ERRORS,
)
async def initiate(lead_id: str, payload: AdmissionCreate, user: CurrentUserDep, service: LeadServiceDep):
    return await service.initiate(user, lead_id, payload)


@router.post(
    "/{lead_id}/ipd-mark",
    response_model=AdmissionRead,
    summary="Mark IPD Status",
    description="Record whether the patient was admitted, postponed, cancelled or discharged. Notifies insurance.",
    response_description="The updated admission record.",
    responses=_STAGE_ERRORS,
)
async def mark_ipd(lead_id: str, payload: IPDMarkRequest, user: CurrentUserDep, service: LeadServiceDep):
    return await service.mark_ipd(user, lead_id, payload)


@router.post(
    "/{lead_id}/discharge",
    response_model=LeadRead,
    summary="Discharge Patient",
    description="Move an initiated or admitted case to DISCHARGED.",
    response_description="The updated lead.",
    responses=_STAGE_ERRORS,
)
async def discharge(
    lead_id: str, user: CurrentUserDep, service: LeadServiceDep, payload: Optional[DischargeRequest] = None
):
    return await service.discharge(user, lead_id, payload.note if payload else None)


@router.post(
    "/{lead_id}/mark-lost",
    response_model=LeadRead,
    summary="Mark Lead Lost",
    description="Close a lead as lost with a reason.",
    response_description="The updated lead.",
    responses=_STAGE_ERRORS,
)
async def mark_lost(lead_id: str, payload: MarkLostRequest, user: CurrentUserDep, service: LeadServiceDep):
    return await service.mark_lost(user, lead_id, payload.reason)
