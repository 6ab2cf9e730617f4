"""
HR repository interface and implementation.

This module provides data access operations for departments, employees,
biometric attendance punches, leave types, leave balances and leave requests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.hr import AttendanceLog, Department, Employee, LeaveBalance, LeaveRequest, LeaveType
from ..entities.users import User
from .base import AsyncQueryBuilder, AsyncSqlRepository


class DepartmentRepository(AsyncSqlRepository[Department]):
    """Repository for department data access operations using SQLModel."""

    order_by_field = "name"
    order_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Department)

    async def get_by_name(self, name: str) -> Optional[Department]:
        result = await self.session.exec(select(Department).where(Department.name == name))
        return result.first()


class EmployeeRepository(AsyncSqlRepository[Employee]):
    """Repository for employee data access operations using SQLModel."""

    order_by_field = "employee_code"
    order_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Employee)

    async def get_by_user(self, user_id: str) -> Optional[Employee]:
        result = await self.session.exec(select(Employee).where(Employee.user_id == user_id))
        return result.first()

    async def get_by_code(self, employee_code: str) -> Optional[Employee]:
        """Find an employee by employee code, falling back to the biometric device code."""
        stmt = select(Employee).where(
            or_(Employee.employee_code == employee_code, Employee.biometric_code == employee_code)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def count_in_department(self, department_id: str) -> int:
        return await self.count({"department_id": department_id})

    async def search(
        self,
        *,
        department_id: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Employee]:
        """List employees, optionally within a department or matching a name or code."""
        stmt = AsyncQueryBuilder.apply_filters(select(Employee), Employee, {"department_id": department_id})
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.join(User, User.id == Employee.user_id).where(
                or_(User.name.ilike(pattern), Employee.employee_code.ilike(pattern))  # type: ignore
            )
        stmt = AsyncQueryBuilder.apply_pagination(stmt.order_by(Employee.employee_code), limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def ids_in_department(self, department_id: str) -> List[str]:
        result = await self.session.exec(select(Employee.id).where(Employee.department_id == department_id))
        return list(result.all())


class AttendanceLogRepository(AsyncSqlRepository[AttendanceLog]):
    """Repository for attendance punch data access operations using SQLModel."""

    order_by_field = "log_date"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AttendanceLog)

    async def list_between(
        self, start: datetime, end: datetime, employee_ids: Optional[Iterable[str]] = None
    ) -> List[AttendanceLog]:
        """Punches with ``start <= log_date < end``, optionally for some employees only."""
        stmt = select(AttendanceLog).where(AttendanceLog.log_date >= start, AttendanceLog.log_date < end)
        if employee_ids is not None:
            stmt = stmt.where(AttendanceLog.employee_id.in_(list(employee_ids)))  # type: ignore
        result = await self.session.exec(stmt.order_by(AttendanceLog.log_date.asc()))  # type: ignore
        return list(result.all())

    async def exists(self, employee_id: str, log_date: datetime) -> bool:
        """Whether this exact punch was already ingested."""
        stmt = (
            select(func.count())
            .select_from(AttendanceLog)
            .where(AttendanceLog.employee_id == employee_id, AttendanceLog.log_date == log_date)
        )
        result = await self.session.exec(stmt)
        return int(result.one()) > 0


class LeaveTypeRepository(AsyncSqlRepository[LeaveType]):
    """Repository for leave type data access operations using SQLModel."""

    order_by_field = "name"
    order_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LeaveType)

    async def get_by_name(self, name: str) -> Optional[LeaveType]:
        result = await self.session.exec(select(LeaveType).where(LeaveType.name == name))
        return result.first()

    async def list_types(self, active_only: bool = False) -> List[LeaveType]:
        filters = {"is_active": True} if active_only else None
        return await self.list(filters=filters)


class LeaveBalanceRepository(AsyncSqlRepository[LeaveBalance]):
    """Repository for per-employee leave balances using SQLModel."""

    order_by_field = "created_at"
    order_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LeaveBalance)

    async def get_for(self, employee_id: str, leave_type_id: str) -> Optional[LeaveBalance]:
        stmt = select(LeaveBalance).where(
            LeaveBalance.employee_id == employee_id, LeaveBalance.leave_type_id == leave_type_id
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def list_for_employee(self, employee_id: str) -> List[LeaveBalance]:
        return await self.list(filters={"employee_id": employee_id})

    async def count_for_type(self, leave_type_id: str) -> int:
        return await self.count({"leave_type_id": leave_type_id})


class LeaveRequestRepository(AsyncSqlRepository[LeaveRequest]):
    """Repository for leave request data access operations using SQLModel."""

    order_by_field = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LeaveRequest)

    async def search(
        self,
        *,
        status: Optional[str] = None,
        employee_ids: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[LeaveRequest], int]:
        """Newest requests first with the total before pagination."""
        filters = {"status": status}
        stmt = AsyncQueryBuilder.apply_filters(select(LeaveRequest), LeaveRequest, filters)
        count_stmt = AsyncQueryBuilder.apply_filters(
            select(func.count()).select_from(LeaveRequest), LeaveRequest, filters
        )
        if employee_ids is not None:
            condition = LeaveRequest.employee_id.in_(list(employee_ids))  # type: ignore
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)

        stmt = stmt.order_by(LeaveRequest.created_at.desc())  # type: ignore
        requests = (await self.session.exec(AsyncQueryBuilder.apply_pagination(stmt, limit, offset))).all()
        total = (await self.session.exec(count_stmt)).one()
        return list(requests), int(total)

    async def list_for_employee(self, employee_id: str) -> List[LeaveRequest]:
        return await self.list(filters={"employee_id": employee_id})

    async def list_in_status(self, employee_id: str, statuses: Iterable[str]) -> List[LeaveRequest]:
        stmt = select(LeaveRequest).where(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status.in_(list(statuses)),  # type: ignore
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_for_type(self, leave_type_id: str) -> int:
        return await self.count({"leave_type_id": leave_type_id})
