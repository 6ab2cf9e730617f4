"""
Internal Job Posting (IJP) API Endpoints.

HR publishes postings; any employee can browse active postings and refer
candidates. HR reviews referrals and moves them through their status.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from medops.core.models.domain import ApplicationStatus
from medops.core.models.io.ijp import (
    JobPostingCreate,
    JobPostingRead,
    JobPostingUpdate,
    ReferralCreate,
    ReferralRead,
    ReferralStatusUpdate,
)
from medops.server.core.rbac import Permission, has_permission
from medops.server.core.security import require_permission
from medops.server.services.deps import CurrentUserDep, IJPServiceDep

router = APIRouter()

_hr_reader = require_permission(Permission.EMPLOYEES_READ)
_hr_writer = require_permission(Permission.EMPLOYEES_WRITE)


@router.get(
    "/postings",
    response_model=List[JobPostingRead],
    summary="List Job Postings",
    description="List active job postings. HR may include inactive ones.",
    response_description="A list of job postings.",
)
async def list_postings(user: CurrentUserDep, service: IJPServiceDep, include_inactive: bool = False):
    active_only = not (include_inactive and has_permission(user.role, Permission.EMPLOYEES_WRITE))
    return await service.list_postings(active_only=active_only)


@router.post(
    "/postings",
    response_model=JobPostingRead,
    status_code=201,
    summary="Create Job Posting",
    description="Publish a job posting.",
    response_description="The created posting.",
)
async def create_posting(payload: JobPostingCreate, service: IJPServiceDep, user=Depends(_hr_writer)):
    return await service.create_posting(user, payload)


@router.get(
    "/postings/{posting_id}",
    response_model=JobPostingRead,
    summary="Get Job Posting",
    description="Retrieve a job posting.",
    response_description="The posting.",
    responses={404: {"description": "Job posting not found"}},
)
async def get_posting(posting_id: str, user: CurrentUserDep, service: IJPServiceDep):
    return await service.get_posting(posting_id)


@router.patch(
    "/postings/{posting_id}",
    response_model=JobPostingRead,
    summary="Update Job Posting",
    description="Update a job posting.",
    response_description="The updated posting.",
    responses={404: {"description": "Job posting not found"}},
    dependencies=[Depends(_hr_writer)],
)
async def update_posting(posting_id: str, payload: JobPostingUpdate, service: IJPServiceDep):
    return await service.update_posting(posting_id, payload)


@router.delete(
    "/postings/{posting_id}",
    response_model=JobPostingRead,
    summary="Deactivate Job Posting",
    description="Close a job posting to new referrals.",
    response_description="The deactivated posting.",
    responses={404: {"description": "Job posting not found"}},
    dependencies=[Depends(_hr_writer)],
)
async def deactivate_posting(posting_id: str, service: IJPServiceDep):
    return await service.deactivate_posting(posting_id)


@router.post(
    "/referrals",
    response_model=ReferralRead,
    status_code=201,
    summary="Submit Referral",
    description="Refer a candidate to an active posting with a resume and up to three documents.",
    response_description="The submitted referral.",
    responses={400: {"description": "Posting is closed"}, 404: {"description": "Job posting not found"}},
)
async def submit_referral(payload: ReferralCreate, user: CurrentUserDep, service: IJPServiceDep):
    return await service.submit_referral(user, payload)


@router.get(
    "/referrals",
    response_model=List[ReferralRead],
    summary="List Referrals",
    description="List referrals, optionally for one posting or status.",
    response_description="A list of referrals.",
    dependencies=[Depends(_hr_reader)],
)
async def list_referrals(
    service: IJPServiceDep, job_posting_id: Optional[str] = None, status: Optional[ApplicationStatus] = None
):
    return await service.list_referrals(job_posting_id=job_posting_id, status=status)


@router.get(
    "/my-referrals",
    response_model=List[ReferralRead],
    summary="My Referrals",
    description="Referrals submitted by the current user.",
    response_description="A list of referrals.",
)
async def my_referrals(user: CurrentUserDep, service: IJPServiceDep):
    return await service.list_referrals(referred_by_id=user.id)


@router.patch(
    "/referrals/{referral_id}/status",
    response_model=ReferralRead,
    summary="Update Referral Status",
    description="Shortlist, reject or hire a referred candidate, with optional HR notes.",
    response_description="The updated referral.",
    responses={404: {"description": "Referral not found"}},
)
async def update_referral_status(
    referral_id: str, payload: ReferralStatusUpdate, service: IJPServiceDep, user=Depends(_hr_writer)
):
    return await service.update_referral_status(user, referral_id, payload)
