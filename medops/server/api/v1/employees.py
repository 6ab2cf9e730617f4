"""
Employees API Endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medops.core.models.io.hr import EmployeeCreate, EmployeeRead, EmployeeUpdate, LeaveBalanceRead
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import CurrentUserDep, EmployeeServiceDep, LeaveServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=List[EmployeeRead],
    summary="List Employees",
    description="List employees, optionally within a department or matching a name or employee code.",
    response_description="A list of employees.",
    dependencies=[Depends(require_permission(Permission.EMPLOYEES_READ))],
)
async def list_employees(
    service: EmployeeServiceDep,
    department_id: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    return await service.list_employees(department_id=department_id, search=search, limit=limit, offset=offset)


@router.get(
    "/my",
    response_model=EmployeeRead,
    summary="My Employee Record",
    description="The employee record of the current user.",
    response_description="The employee record.",
    responses={404: {"description": "The current user has no employee record"}},
)
async def my_employee(user: CurrentUserDep, service: EmployeeServiceDep):
    return await service.get_for_user(user.id)


@router.post(
    "",
    response_model=EmployeeRead,
    status_code=201,
    summary="Create Employee",
    description="Create the employee record of a user.",
    response_description="The created employee.",
    responses={400: {"description": "User already an employee or code taken"}, 404: {"description": "Unknown user"}},
    dependencies=[Depends(require_permission(Permission.EMPLOYEES_WRITE))],
)
async def create_employee(payload: EmployeeCreate, service: EmployeeServiceDep):
    return await service.create_employee(payload)


@router.get(
    "/{employee_id}",
    response_model=EmployeeRead,
    summary="Get Employee",
    description="Retrieve an employee.",
    response_description="The employee.",
    responses={404: {"description": "Employee not found"}},
    dependencies=[Depends(require_permission(Permission.EMPLOYEES_READ))],
)
async def get_employee(employee_id: str, service: EmployeeServiceDep):
    return await service.get_employee(employee_id)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeRead,
    summary="Update Employee",
    description="Update an employee's department, designation, dates, salary or biometric code.",
    response_description="The updated employee.",
    responses={404: {"description": "Employee or department not found"}},
    dependencies=[Depends(require_permission(Permission.EMPLOYEES_WRITE))],
)
async def update_employee(employee_id: str, payload: EmployeeUpdate, service: EmployeeServiceDep):
    return await service.update_employee(employee_id, payload)


@router.post(
    "/{employee_id}/initialize-leaves",
    response_model=List[LeaveBalanceRead],
    summary="Initialize Leave Balances",
    description="Allocate every active leave type to the employee. Existing balances are kept.",
    response_description="All leave balances of the employee.",
    responses={404: {"description": "Employee not found"}},
    dependencies=[Depends(require_permission(Permission.EMPLOYEES_WRITE))],
)
async def initialize_leaves(employee_id: str, service: LeaveServiceDep):
    return await service.describe_balances(await service.initialize_balances(employee_id))
