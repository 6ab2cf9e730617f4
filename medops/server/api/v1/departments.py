"""
Departments API Endpoints.

This module provides the department directory and the sales teams that
belong to each department.
"""

from typing import List

from fastapi import APIRouter, Depends

from medops.core.models.io.auth import TeamCreate, TeamRead
from medops.core.models.io.common import MessageResponse
from medops.core.models.io.hr import DepartmentCreate, DepartmentRead, DepartmentUpdate
from medops.server.core.rbac import Permission
from medops.server.core.security import get_current_user, require_permission
from medops.server.services.deps import DepartmentServiceDep, UserServiceDep

router = APIRouter()

_writer = require_permission(Permission.EMPLOYEES_WRITE)


@router.get(
    "",
    response_model=List[DepartmentRead],
    summary="List Departments",
    description="List all departments.",
    response_description="A list of departments.",
    dependencies=[Depends(get_current_user)],
)
async def list_departments(service: DepartmentServiceDep):
    return await service.list_departments()


@router.post(
    "",
    response_model=DepartmentRead,
    status_code=201,
    summary="Create Department",
    description="Create a department. Only MD or ADMIN may set its head.",
    response_description="The created department.",
    responses={400: {"description": "Name already taken"}, 403: {"description": "Not allowed to set the head"}},
)
async def create_department(payload: DepartmentCreate, service: DepartmentServiceDep, user=Depends(_writer)):
    return await service.create_department(user, payload)


@router.get(
    "/{department_id}",
    response_model=DepartmentRead,
    summary="Get Department",
    description="Retrieve a department.",
    response_description="The department.",
    responses={404: {"description": "Department not found"}},
    dependencies=[Depends(get_current_user)],
)
async def get_department(department_id: str, service: DepartmentServiceDep):
    return await service.get_department(department_id)


@router.patch(
    "/{department_id}",
    response_model=DepartmentRead,
    summary="Update Department",
    description="Update a department. Changing the head requires MD or ADMIN.",
    response_description="The updated department.",
    responses={403: {"description": "Not allowed to change the head"}, 404: {"description": "Department not found"}},
)
async def update_department(
    department_id: str, payload: DepartmentUpdate, service: DepartmentServiceDep, user=Depends(_writer)
):
    return await service.update_department(user, department_id, payload)


@router.delete(
    "/{department_id}",
    response_model=MessageResponse,
    summary="Delete Department",
    description="Delete a department that no employee belongs to.",
    response_description="Confirmation message.",
    responses={400: {"description": "Department still has employees"}, 404: {"description": "Department not found"}},
    dependencies=[Depends(_writer)],
)
async def delete_department(department_id: str, service: DepartmentServiceDep):
    await service.delete_department(department_id)
    return MessageResponse(message="Department deleted")


@router.get(
    "/{department_id}/teams",
    response_model=List[TeamRead],
    summary="List Department Teams",
    description="List the teams of a department.",
    response_description="A list of teams.",
    responses={404: {"description": "Department not found"}},
    dependencies=[Depends(get_current_user)],
)
async def list_department_teams(department_id: str, service: DepartmentServiceDep, users: UserServiceDep):
    await service.get_department(department_id)
    return await users.list_teams(department_id)


@router.post(
    "/{department_id}/teams",
    response_model=TeamRead,
    status_code=201,
    summary="Create Department Team",
    description="Create a team within a department.",
    response_description="The created team.",
    responses={400: {"description": "Team name already taken"}, 404: {"description": "Department not found"}},
    dependencies=[Depends(_writer)],
)
async def create_department_team(
    department_id: str, payload: TeamCreate, service: DepartmentServiceDep, users: UserServiceDep
):
    await service.get_department(department_id)
    return await users.create_team(payload, department_id=department_id)
