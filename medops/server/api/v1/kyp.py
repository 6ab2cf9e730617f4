"""
KYP Queries And Follow-Up API Endpoints.

Insurance raises queries on a pre-auth and resolves them once the BD has
answered. After approval the BD records the patient follow-up.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from medops.core.models.domain import QueryStatus, UserRole
from medops.core.models.io.leads import FollowUpRead, FollowUpUpsert
from medops.core.models.io.pre_auth import InsuranceQueryAnswer, InsuranceQueryCreate, InsuranceQueryRead
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission, require_roles
from medops.server.services.deps import KYPFollowUpServiceDep

router = APIRouter()

_reader = require_permission(Permission.LEADS_READ)
_insurance = require_roles(UserRole.INSURANCE_HEAD)


@router.get(
    "/queries",
    response_model=List[InsuranceQueryRead],
    summary="List Insurance Queries",
    description="Queries newest first, optionally for one pre-auth or in one status.",
    response_description="A list of insurance queries.",
    dependencies=[Depends(_reader)],
)
async def list_queries(
    service: KYPFollowUpServiceDep, pre_auth_id: Optional[str] = None, status: Optional[QueryStatus] = None
):
    return await service.list_queries(pre_auth_id=pre_auth_id, status=status)


@router.post(
    "/queries",
    response_model=InsuranceQueryRead,
    status_code=201,
    summary="Raise Insurance Query",
    description="Raise a query on a pre-auth. The BD who submitted the KYP is notified.",
    response_description="The pending query.",
    responses={403: {"description": "Only insurance may raise queries"}, 404: {"description": "Pre-auth not found"}},
)
async def raise_query(payload: InsuranceQueryCreate, service: KYPFollowUpServiceDep, user=Depends(_insurance)):
    return await service.raise_query(user, payload)


@router.get(
    "/queries/{query_id}",
    response_model=InsuranceQueryRead,
    summary="Get Insurance Query",
    description="Retrieve one query.",
    response_description="The query.",
    responses={404: {"description": "Query not found"}},
    dependencies=[Depends(_reader)],
)
async def get_query(query_id: str, service: KYPFollowUpServiceDep):
    return await service.get_query(query_id)


@router.post(
    "/queries/{query_id}/answer",
    response_model=InsuranceQueryRead,
    summary="Answer Insurance Query",
    description="Answer a query. A BD may only answer queries on their own leads.",
    response_description="The answered query.",
    responses={
        400: {"description": "Query already resolved"},
        403: {"description": "Not the BD of the lead"},
        404: {"description": "Query not found"},
    },
)
async def answer_query(
    query_id: str,
    payload: InsuranceQueryAnswer,
    service: KYPFollowUpServiceDep,
    user=Depends(require_roles(UserRole.BD, UserRole.TEAM_LEAD)),
):
    return await service.answer_query(user, query_id, payload)


@router.post(
    "/queries/{query_id}/resolve",
    response_model=InsuranceQueryRead,
    summary="Resolve Insurance Query",
    description="Close an answered query.",
    response_description="The resolved query.",
    responses={400: {"description": "Query not answered yet"}, 404: {"description": "Query not found"}},
)
async def resolve_query(query_id: str, service: KYPFollowUpServiceDep, user=Depends(_insurance)):
    return await service.resolve_query(user, query_id)


@router.post(
    "/follow-up",
    response_model=FollowUpRead,
    summary="Record Patient Follow-Up",
    description="Create or update the follow-up of a KYP whose pre-auth is complete.",
    response_description="The follow-up.",
    responses={
        400: {"description": "Pre-auth not complete"},
        403: {"description": "Not the BD of the lead"},
        404: {"description": "KYP submission not found"},
    },
)
async def record_follow_up(
    payload: FollowUpUpsert,
    service: KYPFollowUpServiceDep,
    user=Depends(require_permission(Permission.LEADS_WRITE)),
):
    return await service.record_follow_up(user, payload)


@router.get(
    "/follow-up/{kyp_submission_id}",
    response_model=FollowUpRead,
    summary="Get Patient Follow-Up",
    description="The follow-up recorded for a KYP submission.",
    response_description="The follow-up.",
    responses={404: {"description": "No follow-up recorded"}},
    dependencies=[Depends(_reader)],
)
async def get_follow_up(kyp_submission_id: str, service: KYPFollowUpServiceDep):
    return await service.get_follow_up(kyp_submission_id)
