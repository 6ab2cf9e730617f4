"""
Insurance Initiate Form API Endpoints.

The initiate form holds the bill and authorization figures insurance needs
before it can approve a pre-auth.
"""

from fastapi import APIRouter, Depends

from medops.core.models.domain import UserRole
from medops.core.models.io.pre_auth import InitiateFormCreate, InitiateFormRead, InitiateFormUpdate
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission, require_roles
from medops.server.services.deps import InitiateFormServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=InitiateFormRead,
    status_code=201,
    summary="Create Initiate Form",
    description="Create the initiate form for a lead whose pre-auth is raised or complete. One form per lead.",
    response_description="The created form.",
    responses={400: {"description": "Wrong stage or form already exists"}, 404: {"description": "Lead not found"}},
)
async def create_form(
    payload: InitiateFormCreate, service: InitiateFormServiceDep, user=Depends(require_roles(UserRole.INSURANCE_HEAD))
):
    return await service.create_form(user, payload)


@router.get(
    "",
    response_model=InitiateFormRead,
    summary="Get Initiate Form",
    description="Fetch the initiate form of a lead.",
    response_description="The form.",
    responses={404: {"description": "No form for this lead"}},
    dependencies=[Depends(require_permission(Permission.INSURANCE_READ))],
)
async def get_form(lead_id: str, service: InitiateFormServiceDep):
    return await service.get_by_lead(lead_id)


@router.patch(
    "/{form_id}",
    response_model=InitiateFormRead,
    summary="Update Initiate Form",
    description="Update the figures on an initiate form.",
    response_description="The updated form.",
    responses={404: {"description": "Form not found"}},
    dependencies=[Depends(require_roles(UserRole.INSURANCE_HEAD))],
)
async def update_form(form_id: str, payload: InitiateFormUpdate, service: InitiateFormServiceDep):
    return await service.update_form(form_id, payload)
