"""
User Management API Endpoints.

This module provides endpoints for listing, creating and updating user
accounts and for resetting passwords.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medops.core.models.domain import UserRole
from medops.core.models.io.auth import PasswordReset, UserCreate, UserRead, UserUpdate
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import UserServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=List[UserRead],
    summary="List Users",
    description="List user accounts, optionally filtered by role or team.",
    response_description="A list of users.",
    dependencies=[Depends(require_permission(Permission.USERS_READ))],
)
async def list_users(
    service: UserServiceDep,
    role: Optional[UserRole] = None,
    team_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    return await service.list_users(role=role, team_id=team_id, limit=limit, offset=offset)


@router.post(
    "",
    response_model=UserRead,
    status_code=201,
    summary="Create User",
    description="Create a user account. Email addresses are unique and case-insensitive.",
    response_description="The created user.",
    responses={400: {"description": "Email already registered"}, 404: {"description": "Team not found"}},
    dependencies=[Depends(require_permission(Permission.USERS_WRITE))],
)
async def create_user(payload: UserCreate, service: UserServiceDep):
    return await service.create_user(payload)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    description="Retrieve a single user account.",
    response_description="The user.",
    responses={404: {"description": "User not found"}},
    dependencies=[Depends(require_permission(Permission.USERS_READ))],
)
async def get_user(user_id: str, service: UserServiceDep):
    return await service.get_user(user_id)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    summary="Update User",
    description="Update a user's name, role, team or active flag.",
    response_description="The updated user.",
    responses={404: {"description": "User or team not found"}},
    dependencies=[Depends(require_permission(Permission.USERS_WRITE))],
)
async def update_user(user_id: str, payload: UserUpdate, service: UserServiceDep):
    return await service.update_user(user_id, payload)


@router.put(
    "/{user_id}/password",
    response_model=UserRead,
    summary="Reset Password",
    description="Set a new password for a user. Passwords have at least 8 characters.",
    response_description="The user whose password was reset.",
    responses={404: {"description": "User not found"}},
    dependencies=[Depends(require_permission(Permission.USERS_WRITE))],
)
async def reset_password(user_id: str, payload: PasswordReset, service: UserServiceDep):
    return await service.reset_password(user_id, payload.password)
