"""
Authentication API Endpoints.

This module exchanges credentials for bearer tokens and reports who the
current token belongs to.
"""

from fastapi import APIRouter

from medops.core.models.io.auth import LoginRequest, TokenResponse, UserRead
from medops.server.services.deps import CurrentUserDep, UserServiceDep

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign In",
    description="Exchange an email and password for a bearer access token.",
    response_description="The access token and the signed-in user.",
    responses={401: {"description": "Invalid credentials or inactive account"}},
)
async def login(payload: LoginRequest, service: UserServiceDep):
    """
    Sign in.

    The returned token carries the user's id, role and team and must be sent
    as ``Authorization: Bearer <token>`` on every other request.
    """
    return await service.login(payload.email, payload.password)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the user the bearer token belongs to.",
    response_description="The current user.",
    responses={401: {"description": "Missing or invalid token"}},
)
async def me(user: CurrentUserDep):
    return user
