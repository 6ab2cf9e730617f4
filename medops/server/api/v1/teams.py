"""
Teams API Endpoints.

Sales teams group BDs under a team lead. Team leads see the leads of their
own team.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from medops.core.models.io.auth import TeamCreate, TeamRead
from medops.server.core.rbac import Permission
from medops.server.core.security import get_current_user, require_permission
from medops.server.services.deps import UserServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=List[TeamRead],
    summary="List Teams",
    description="List sales teams, optionally within a department.",
    response_description="A list of teams.",
    dependencies=[Depends(get_current_user)],
)
async def list_teams(service: UserServiceDep, department_id: Optional[str] = None):
    return await service.list_teams(department_id)


@router.post(
    "",
    response_model=TeamRead,
    status_code=201,
    summary="Create Team",
    description="Create a sales team with an optional team lead.",
    response_description="The created team.",
    responses={400: {"description": "Team name already taken"}, 404: {"description": "Team lead not found"}},
    dependencies=[Depends(require_permission(Permission.USERS_WRITE))],
)
async def create_team(payload: TeamCreate, service: UserServiceDep):
    return await service.create_team(payload)
