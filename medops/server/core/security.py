"""
Authentication and authorization dependencies.

Passwords are hashed with passlib and access tokens are PyJWT HS256 tokens
carrying the user id, role and team. ``get_current_user`` re-reads the user
on every request so deactivation takes effect immediately.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlmodel.ext.asyncio.session import AsyncSession

from medops.core.database import get_session
from medops.core.database.entities.users import User
from medops.core.logging_config import get_logger
from medops.core.models.domain import UserRole

from .config import settings
from .rbac import has_permission

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(
    user_id: str, role: str, team_id: Optional[str] = None, *, expires_minutes: Optional[int] = None
) -> str:
    """Create a signed JWT access token for the given user."""
    auth = settings.auth
    minutes = expires_minutes or auth.access_token_expire_minutes
    payload: Dict[str, Any] = {
        "sub": user_id,
        "role": role,
        "team_id": team_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, auth.jwt_secret, algorithm=auth.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify an access token.

    Raises:
        jwt.PyJWTError: If the token is malformed, forged or expired
    """
    auth = settings.auth
    return jwt.decode(token, auth.jwt_secret, algorithms=[auth.jwt_algorithm])


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Authentication required")
    try:
        data = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")

    user_id = data.get("sub")
    user = await session.get(User, user_id) if user_id else None
    if user is None or not user.is_active:
        logger.debug(f"Rejected token for unknown or inactive user {user_id}")
        raise _unauthorized("User not found or inactive")
    return user


def require_permission(permission: str) -> Callable:
    """Dependency factory ensuring the current user's role holds a permission."""

    async def checker(user: User = Depends(get_current_user)) -> User:
        if not has_permission(user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {permission}",
            )
        return user

    return checker


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory ensuring the current user is in an allowed role.

    ADMIN is always allowed.
    """
    allowed = {UserRole.ADMIN.value, *(UserRole(r).value for r in roles)}

    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient privileges",
            )
        return user

    return checker
