"""
Leave API Endpoints.

Leave types and the decision on a request are HR's; any employee may apply
and see their own requests and balances.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medops.core.models.domain import LeaveStatus
from medops.core.models.io.common import MessageResponse, PaginationMeta
from medops.core.models.io.hr import (
    LeaveApplyRequest,
    LeaveDecisionRequest,
    LeaveRequestPage,
    LeaveRequestRead,
    LeaveTypeCreate,
    LeaveTypeRead,
    LeaveTypeUpdate,
    MyLeaves,
)
from medops.server.core.rbac import Permission, has_permission
from medops.server.core.security import require_permission
from medops.server.services.deps import CurrentUserDep, LeaveServiceDep

router = APIRouter()

_writer = require_permission(Permission.LEAVES_WRITE)


@router.get(
    "",
    response_model=LeaveRequestPage,
    summary="List Leave Requests",
    description="Page through leave requests, newest first, filtered by status, employee or department.",
    response_description="A page of leave requests with pagination details.",
    dependencies=[Depends(require_permission(Permission.LEAVES_READ))],
)
async def list_leave_requests(
    service: LeaveServiceDep,
    status: Optional[LeaveStatus] = None,
    employee_id: Optional[str] = None,
    department_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
):
    requests, total = await service.list_requests(
        status=status, employee_id=employee_id, department_id=department_id, page=page, limit=limit
    )
    return LeaveRequestPage(
        data=await service.describe_requests(requests), pagination=PaginationMeta.build(page, limit, total)
    )


@router.get(
    "/my",
    response_model=MyLeaves,
    summary="My Leaves",
    description="The caller's leave requests and balances. Balances are allocated on first visit.",
    response_description="Requests and balances of the current user.",
    responses={404: {"description": "The current user has no employee record"}},
)
async def my_leaves(user: CurrentUserDep, service: LeaveServiceDep):
    return await service.my_leaves(user)


@router.post(
    "/apply",
    response_model=LeaveRequestRead,
    status_code=201,
    summary="Apply For Leave",
    description="File a leave application for the current user.",
    response_description="The pending leave request.",
    responses={
        400: {"description": "Probation, invalid dates or type, insufficient balance or overlapping leave"},
        404: {"description": "The current user has no employee record"},
    },
)
async def apply_for_leave(payload: LeaveApplyRequest, user: CurrentUserDep, service: LeaveServiceDep):
    request = await service.apply(user, payload)
    return (await service.describe_requests([request]))[0]


@router.get(
    "/types",
    response_model=List[LeaveTypeRead],
    summary="List Leave Types",
    description="Leave types by name. HR sees inactive types too unless active_only is set.",
    response_description="A list of leave types.",
)
async def list_leave_types(user: CurrentUserDep, service: LeaveServiceDep, active_only: bool = False):
    hr_view = has_permission(user.role, Permission.LEAVES_WRITE)
    return await service.list_types(active_only=active_only or not hr_view)


@router.post(
    "/types",
    response_model=LeaveTypeRead,
    status_code=201,
    summary="Create Leave Type",
    description="Create a leave type and its yearly allocation.",
    response_description="The created leave type.",
    responses={400: {"description": "Leave type name already exists"}},
    dependencies=[Depends(_writer)],
)
async def create_leave_type(payload: LeaveTypeCreate, service: LeaveServiceDep):
    return await service.create_type(payload)


@router.patch(
    "/types/{leave_type_id}",
    response_model=LeaveTypeRead,
    summary="Update Leave Type",
    description="Rename, reallocate or deactivate a leave type.",
    response_description="The updated leave type.",
    responses={400: {"description": "Leave type name already exists"}, 404: {"description": "Leave type not found"}},
    dependencies=[Depends(_writer)],
)
async def update_leave_type(leave_type_id: str, payload: LeaveTypeUpdate, service: LeaveServiceDep):
    return await service.update_type(leave_type_id, payload)


@router.delete(
    "/types/{leave_type_id}",
    response_model=MessageResponse,
    summary="Delete Leave Type",
    description="Delete a leave type nobody has a request or balance for.",
    response_description="Confirmation message.",
    responses={400: {"description": "Leave type in use"}, 404: {"description": "Leave type not found"}},
    dependencies=[Depends(_writer)],
)
async def delete_leave_type(leave_type_id: str, service: LeaveServiceDep):
    await service.delete_type(leave_type_id)
    return MessageResponse(message="Leave type deleted")


@router.patch(
    "/{request_id}/approve",
    response_model=LeaveRequestRead,
    summary="Decide Leave Request",
    description="Approve or reject a pending leave request. Approval consumes the balance.",
    response_description="The decided leave request.",
    responses={400: {"description": "Request is not pending"}, 404: {"description": "Leave request not found"}},
)
async def decide_leave_request(
    request_id: str, payload: LeaveDecisionRequest, service: LeaveServiceDep, user=Depends(_writer)
):
    request = await service.decide(user, request_id, payload)
    return (await service.describe_requests([request]))[0]
