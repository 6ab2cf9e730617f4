"""
Service for authentication, users and sales teams.
"""

from __future__ import annotations

from typing import List, Optional

from medops.core.database.entities.users import Team, User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import AuthenticationError, ConflictError, NotFoundError
from medops.core.logging_config import get_logger
from medops.core.models.domain import UserRole
from medops.core.models.io.auth import TeamCreate, TokenResponse, UserCreate, UserRead, UserUpdate
from medops.server.core.config import AuthConfig
from medops.server.core.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for signing in and managing user accounts."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def login(self, email: str, password: str) -> TokenResponse:
        """
        Exchange credentials for an access token.

        Raises:
            AuthenticationError: On an unknown email, a wrong password or an inactive account
        """
        user = await self.repos.users.get_by_email(_normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {email}")
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("User account is inactive")

        token = create_access_token(user.id, user.role, user.team_id)
        logger.info(f"User {user.id} signed in")
        return TokenResponse(access_token=token, user=UserRead.model_validate(user))

    async def get_user(self, user_id: str) -> User:
        user = await self.repos.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(
        self, role: Optional[UserRole] = None, team_id: Optional[str] = None, limit: int = 100, offset: int = 0
    ) -> List[User]:
        return await self.repos.users.list(limit=limit, offset=offset, filters={"role": role, "team_id": team_id})

    async def _ensure_team(self, team_id: Optional[str]) -> None:
        if team_id and await self.repos.teams.get_by_id(team_id) is None:
            raise NotFoundError("Team", team_id)

    async def create_user(self, data: UserCreate) -> User:
        email = _normalize_email(data.email)
        if await self.repos.users.get_by_email(email):
            raise ConflictError(f"User with email {email} already exists")
        await self._ensure_team(data.team_id)

        user = User(
            email=email,
            name=data.name.strip(),
            password_hash=hash_password(data.password),
            role=data.role.value,
            team_id=data.team_id,
        )
        user = await self.repos.users.create(user)
        logger.info(f"Created user {user.id} with role {user.role}")
        return user

    async def update_user(self, user_id: str, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True)
        if "team_id" in changes:
            await self._ensure_team(changes["team_id"])
        for key, value in changes.items():
            if key == "role" and value is not None:
                value = UserRole(value).value
            if key in ("name", "role", "is_active") and value is None:
                continue
            setattr(user, key, value)
        return await self.repos.users.update(user)

    async def reset_password(self, user_id: str, password: str) -> User:
        user = await self.get_user(user_id)
        user.password_hash = hash_password(password)
        user = await self.repos.users.update(user)
        logger.info(f"Password reset for user {user_id}")
        return user

    async def list_teams(self, department_id: Optional[str] = None) -> List[Team]:
        if department_id:
            return await self.repos.teams.list_for_department(department_id)
        return await self.repos.teams.list()

    async def create_team(self, data: TeamCreate, department_id: Optional[str] = None) -> Team:
        name = data.name.strip()
        if await self.repos.teams.get_by_name(name):
            raise ConflictError(f"Team {name} already exists")
        if data.team_lead_id:
            await self.get_user(data.team_lead_id)
        team = Team(name=name, team_lead_id=data.team_lead_id, department_id=department_id or data.department_id)
        team = await self.repos.teams.create(team)
        logger.info(f"Created team {team.id} ({team.name})")
        return team

    async def ensure_bootstrap_admin(self, auth: AuthConfig) -> Optional[User]:
        """Create the first ADMIN from configuration when the user table is empty."""
        if not auth.bootstrap_admin_email or not auth.bootstrap_admin_password:
            return None
        if await self.repos.users.count() > 0:
            return None
        admin = User(
            email=_normalize_email(auth.bootstrap_admin_email),
            name=auth.bootstrap_admin_name,
            password_hash=hash_password(auth.bootstrap_admin_password),
            role=UserRole.ADMIN.value,
        )
        admin = await self.repos.users.create(admin)
        logger.info(f"Bootstrap admin {admin.email} created")
        return admin
