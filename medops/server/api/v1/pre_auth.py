"""
Pre-Authorization API Endpoints.

Insurance decides on a raised pre-auth: temporary approval, approval or
rejection. Allowed decisions follow the pre-auth state machine, and every
response lists the actions currently possible.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from medops.core.models.io.pre_auth import PreAuthApproveRequest, PreAuthDetail, PreAuthRejectRequest
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import CurrentUserDep, PreAuthServiceDep

router = APIRouter()

_DECISION_ERRORS = {
    400: {"description": "Decision not allowed in the current status or stage, or pre-auth data missing"},
    403: {"description": "Missing insurance:write"},
    404: {"description": "KYP submission not found"},
}

_insurance_writer = require_permission(Permission.INSURANCE_WRITE)


@router.get(
    "/{kyp_submission_id}",
    response_model=PreAuthDetail,
    summary="Get Pre-Auth",
    description="Pre-auth details with hospital suggestions and the decisions currently available.",
    response_description="The pre-auth details.",
    responses={403: {"description": "Lead not visible"}, 404: {"description": "KYP submission not found"}},
)
async def get_pre_auth(kyp_submission_id: str, user: CurrentUserDep, service: PreAuthServiceDep):
    return await service.get_detail(user, kyp_submission_id)


@router.post(
    "/{kyp_submission_id}/temp-approve",
    response_model=PreAuthDetail,
    summary="Temporarily Approve Pre-Auth",
    description="Give a temporary approval to a pending pre-auth. The case stays in PREAUTH_RAISED.",
    response_description="The updated pre-auth.",
    responses=_DECISION_ERRORS,
)
async def temp_approve(kyp_submission_id: str, service: PreAuthServiceDep, user=Depends(_insurance_writer)):
    return await service.temp_approve(user, kyp_submission_id)


@router.post(
    "/{kyp_submission_id}/approve",
    response_model=PreAuthDetail,
    summary="Approve Pre-Auth",
    description="Approve the pre-auth. Requires a complete initiate form. Moves the case to PREAUTH_COMPLETE.",
    response_description="The updated pre-auth.",
    responses=_DECISION_ERRORS,
)
async def approve(
    kyp_submission_id: str,
    service: PreAuthServiceDep,
    payload: Optional[PreAuthApproveRequest] = None,
    user=Depends(_insurance_writer),
):
    return await service.approve(user, kyp_submission_id, payload.notes if payload else None)


@router.post(
    "/{kyp_submission_id}/reject",
    response_model=PreAuthDetail,
    summary="Reject Pre-Auth",
    description="Reject the pre-auth with a reason. The case stays in PREAUTH_RAISED.",
    response_description="The updated pre-auth.",
    responses=_DECISION_ERRORS,
)
async def reject(
    kyp_submission_id: str, payload: PreAuthRejectRequest, service: PreAuthServiceDep, user=Depends(_insurance_writer)
):
    return await service.reject(user, kyp_submission_id, payload.reason)


@router.post(
    "/{kyp_submission_id}/mark-new-hospital-raised",
    response_model=PreAuthDetail,
    summary="Mark New Hospital Raised",
    description="Confirm that a requested new hospital was raised with the insurer. Repeating it changes nothing.",
    response_description="The updated pre-auth.",
    responses=_DECISION_ERRORS,
)
async def mark_new_hospital_raised(kyp_submission_id: str, service: PreAuthServiceDep, user=Depends(_insurance_writer)):
    return await service.mark_new_hospital_raised(user, kyp_submission_id)
