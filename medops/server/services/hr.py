"""
Service for departments and employees.
"""

from __future__ import annotations

from typing import List, Optional

from medops.core.database.entities.hr import Department, Employee
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError
from medops.core.logging_config import get_logger
from medops.core.models.domain import UserRole
from medops.core.models.io.hr import DepartmentCreate, DepartmentUpdate, EmployeeCreate, EmployeeUpdate

logger = get_logger(__name__)

# Roles allowed to appoint a department head
HEAD_APPOINTING_ROLES = {UserRole.MD.value, UserRole.ADMIN.value}


class DepartmentService:
    """Service for the department directory."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def list_departments(self) -> List[Department]:
        return await self.repos.departments.list()

    async def get_department(self, department_id: str) -> Department:
        department = await self.repos.departments.get_by_id(department_id)
        if department is None:
            raise NotFoundError("Department", department_id)
        return department

    async def _ensure_user(self, user_id: Optional[str]) -> None:
        if user_id and await self.repos.users.get_by_id(user_id) is None:
            raise NotFoundError("User", user_id)

    async def _ensure_name_free(self, name: str, current_id: Optional[str] = None) -> None:
        existing = await self.repos.departments.get_by_name(name)
        if existing is not None and existing.id != current_id:
            raise ConflictError(f"Department '{name}' already exists")

    async def create_department(self, user: User, data: DepartmentCreate) -> Department:
        if data.head_id and user.role not in HEAD_APPOINTING_ROLES:
            raise PermissionDeniedError("Only MD or ADMIN can assign a department head")
        await self._ensure_name_free(data.name)
        await self._ensure_user(data.head_id)
        department = await self.repos.departments.create(Department(**data.model_dump()))
        logger.info(f"Department {department.name} created by {user.id}")
        return department

    async def update_department(self, user: User, department_id: str, data: DepartmentUpdate) -> Department:
        """
        Update a department.

        Changing the head is reserved to MD and ADMIN; sending the current
        head unchanged is allowed for anyone with write access.
        """
        department = await self.get_department(department_id)
        changes = data.model_dump(exclude_unset=True)
        if "head_id" in changes and changes["head_id"] != department.head_id:
            if user.role not in HEAD_APPOINTING_ROLES:
                raise PermissionDeniedError("Only MD or ADMIN can change the department head")
            await self._ensure_user(changes["head_id"])
        if changes.get("name"):
            await self._ensure_name_free(changes["name"], current_id=department.id)
        for key, value in changes.items():
            setattr(department, key, value)
        return await self.repos.departments.update(department)

    async def delete_department(self, department_id: str) -> None:
        department = await self.get_department(department_id)
        employees = await self.repos.employees.count_in_department(department.id)
        if employees:
            raise InvalidStateError(
                f"Department '{department.name}' still has {employees} employees; reassign them first"
            )
        await self.repos.departments.delete(department.id)
        logger.info(f"Department {department.name} deleted")


class EmployeeService:
    """Service for employee records."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def list_employees(
        self, department_id: Optional[str] = None, search: Optional[str] = None, limit: int = 100, offset: int = 0
    ) -> List[Employee]:
        return await self.repos.employees.search(department_id=department_id, search=search, limit=limit, offset=offset)

    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self.repos.employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def get_for_user(self, user_id: str) -> Employee:
        employee = await self.repos.employees.get_by_user(user_id)
        if employee is None:
            raise NotFoundError("Employee record for user", user_id)
        return employee

    async def _ensure_department(self, department_id: Optional[str]) -> None:
        if department_id and await self.repos.departments.get_by_id(department_id) is None:
            raise NotFoundError("Department", department_id)

    async def create_employee(self, data: EmployeeCreate) -> Employee:
        if await self.repos.users.get_by_id(data.user_id) is None:
            raise NotFoundError("User", data.user_id)
        if await self.repos.employees.get_by_user(data.user_id) is not None:
            raise ConflictError(f"User '{data.user_id}' already has an employee record")
        for code in filter(None, (data.employee_code, data.biometric_code)):
            if await self.repos.employees.get_by_code(code) is not None:
                raise ConflictError(f"Employee code '{code}' is already in use")
        await self._ensure_department(data.department_id)
        employee = await self.repos.employees.create(Employee(**data.model_dump()))
        logger.info(f"Employee {employee.employee_code} created for user {employee.user_id}")
        return employee

    async def update_employee(self, employee_id: str, data: EmployeeUpdate) -> Employee:
        employee = await self.get_employee(employee_id)
        changes = data.model_dump(exclude_unset=True)
        if "department_id" in changes:
            await self._ensure_department(changes["department_id"])
        if changes.get("biometric_code"):
            other = await self.repos.employees.get_by_code(changes["biometric_code"])
            if other is not None and other.id != employee.id:
                raise ConflictError(f"Employee code '{changes['biometric_code']}' is already in use")
        for key, value in changes.items():
            setattr(employee, key, value)
        return await self.repos.employees.update(employee)
