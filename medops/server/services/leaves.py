"""
Service for leave types, leave balances and leave applications.

Employees apply for leave against a per-type balance; HR approves or rejects.
Only an approval consumes the balance.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.hr import Employee, LeaveBalance, LeaveRequest, LeaveType
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.database.repositories.base import page_offset
from medops.core.errors import ConflictError, InvalidStateError, NotFoundError, ValidationFailedError
from medops.core.logging_config import get_logger
from medops.core.models.domain import LeaveStatus
from medops.core.models.io.hr import (
    LeaveApplyRequest,
    LeaveBalanceRead,
    LeaveDecisionRequest,
    LeaveRequestRead,
    LeaveTypeCreate,
    LeaveTypeUpdate,
    MyLeaves,
)
from medops.core.monitoring import log_workflow_event
from medops.core.rules import leaves as leave_rules

logger = get_logger(__name__)

# Requests that block another request on the same days
BLOCKING_STATUSES = (LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value)


class LeaveService:
    """Service for the leave workflow."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    # ------------------------------------------------------------------
    # Leave types
    # ------------------------------------------------------------------

    async def list_types(self, active_only: bool = False) -> List[LeaveType]:
        return await self.repos.leave_types.list_types(active_only=active_only)

    async def get_type(self, leave_type_id: str) -> LeaveType:
        leave_type = await self.repos.leave_types.get_by_id(leave_type_id)
        if leave_type is None:
            raise NotFoundError("Leave type", leave_type_id)
        return leave_type

    async def _ensure_name_free(self, name: str, current_id: Optional[str] = None) -> None:
        existing = await self.repos.leave_types.get_by_name(name)
        if existing is not None and existing.id != current_id:
            raise ConflictError("Leave type name already exists")

    async def create_type(self, data: LeaveTypeCreate) -> LeaveType:
        await self._ensure_name_free(data.name)
        leave_type = await self.repos.leave_types.create(LeaveType(**data.model_dump()))
        logger.info(f"Leave type {leave_type.name} created with {leave_type.max_days} days")
        return leave_type

    async def update_type(self, leave_type_id: str, data: LeaveTypeUpdate) -> LeaveType:
        leave_type = await self.get_type(leave_type_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name"):
            await self._ensure_name_free(changes["name"], current_id=leave_type.id)
        for key, value in changes.items():
            if value is not None:
                setattr(leave_type, key, value)
        return await self.repos.leave_types.update(leave_type)

    async def delete_type(self, leave_type_id: str) -> None:
        leave_type = await self.get_type(leave_type_id)
        in_use = await self.repos.leave_requests.count_for_type(leave_type.id)
        in_use += await self.repos.leave_balances.count_for_type(leave_type.id)
        if in_use:
            raise InvalidStateError("Cannot delete leave type with existing leave requests or balances")
        await self.repos.leave_types.delete(leave_type.id)
        logger.info(f"Leave type {leave_type.name} deleted")

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------

    async def _get_employee(self, employee_id: str) -> Employee:
        employee = await self.repos.employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def _employee_for_user(self, user: User) -> Employee:
        employee = await self.repos.employees.get_by_user(user.id)
        if employee is None:
            raise NotFoundError("Employee record for user", user.id)
        return employee

    async def _stage_missing_balances(self, employee_id: str) -> List[LeaveBalance]:
        """Stage a full allocation of every active type the employee has no balance for yet."""
        created = []
        for leave_type in await self.repos.leave_types.list_types(active_only=True):
            if await self.repos.leave_balances.get_for(employee_id, leave_type.id) is None:
                balance = LeaveBalance(
                    employee_id=employee_id,
                    leave_type_id=leave_type.id,
                    allocated=leave_type.max_days,
                    remaining=leave_type.max_days,
                )
                created.append(await self.repos.leave_balances.stage(balance))
        return created

    async def initialize_balances(self, employee_id: str) -> List[LeaveBalance]:
        """Allocate every active leave type to an employee. Existing balances are kept."""
        employee = await self._get_employee(employee_id)
        created = await self._stage_missing_balances(employee.id)
        await self.repos.commit()
        logger.info(f"Initialized {len(created)} leave balance(s) for employee {employee.employee_code}")
        return await self.repos.leave_balances.list_for_employee(employee.id)

    async def _type_names(self, leave_type_ids: Iterable[str]) -> Dict[str, str]:
        names = {}
        for leave_type_id in set(leave_type_ids):
            leave_type = await self.repos.leave_types.get_by_id(leave_type_id)
            if leave_type is not None:
                names[leave_type_id] = leave_type.name
        return names

    async def describe_balances(self, balances: List[LeaveBalance]) -> List[LeaveBalanceRead]:
        names = await self._type_names(b.leave_type_id for b in balances)
        return [
            LeaveBalanceRead.model_validate(b).model_copy(update={"leave_type_name": names.get(b.leave_type_id)})
            for b in balances
        ]

    async def describe_requests(self, requests: List[LeaveRequest]) -> List[LeaveRequestRead]:
        names = await self._type_names(r.leave_type_id for r in requests)
        return [
            LeaveRequestRead.model_validate(r).model_copy(update={"leave_type_name": names.get(r.leave_type_id)})
            for r in requests
        ]

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def list_requests(
        self,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        department_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[LeaveRequest], int]:
        """A page of requests, optionally for one employee or everyone in a department."""
        employee_ids: Optional[List[str]] = None
        if employee_id:
            employee_ids = [employee_id]
        elif department_id:
            employee_ids = await self.repos.employees.ids_in_department(department_id)
        return await self.repos.leave_requests.search(
            status=status.value if status else None,
            employee_ids=employee_ids,
            limit=limit,
            offset=page_offset(page, limit),
        )

    async def my_leaves(self, user: User) -> MyLeaves:
        employee = await self._employee_for_user(user)
        balances = await self.repos.leave_balances.list_for_employee(employee.id)
        if not balances:
            await self._stage_missing_balances(employee.id)
            await self.repos.commit()
            balances = await self.repos.leave_balances.list_for_employee(employee.id)
        requests = await self.repos.leave_requests.list_for_employee(employee.id)
        return MyLeaves(
            requests=await self.describe_requests(requests), balances=await self.describe_balances(balances)
        )

    async def apply(self, user: User, data: LeaveApplyRequest, today: Optional[date] = None) -> LeaveRequest:
        """
        File a leave application for the caller.

        The caller must have an employee record and be past probation. The
        balance of the type is created on first use. Days already pending or
        approved cannot be requested again.
        """
        today = today or utc_now_naive().date()
        employee = await self._employee_for_user(user)
        leave_rules.check_probation(employee.date_of_joining, today)
        days = leave_rules.check_dates(data.start_date, data.end_date, today)

        leave_type = await self.repos.leave_types.get_by_id(data.leave_type_id)
        if leave_type is None or not leave_type.is_active:
            raise ValidationFailedError("Invalid leave type")

        balance = await self.repos.leave_balances.get_for(employee.id, leave_type.id)
        if balance is None:
            balance = await self.repos.leave_balances.stage(
                LeaveBalance(
                    employee_id=employee.id,
                    leave_type_id=leave_type.id,
                    allocated=leave_type.max_days,
                    remaining=leave_type.max_days,
                )
            )
        leave_rules.check_balance(balance.remaining, days)

        existing = await self.repos.leave_requests.list_in_status(employee.id, BLOCKING_STATUSES)
        if any(leave_rules.overlaps(data.start_date, data.end_date, r.start_date, r.end_date) for r in existing):
            raise ConflictError("Leave request conflicts with existing approved/pending leave")

        request = LeaveRequest(
            employee_id=employee.id,
            leave_type_id=leave_type.id,
            start_date=data.start_date,
            end_date=data.end_date,
            days=days,
            reason=data.reason,
        )
        await self.repos.leave_requests.stage(request)
        await self.repos.commit()
        log_workflow_event("leave_applied", request.id, actor_id=user.id, days=days, leave_type=leave_type.name)
        return request

    async def decide(self, user: User, request_id: str, data: LeaveDecisionRequest) -> LeaveRequest:
        """Approve or reject a pending request. An approval moves its days from remaining to used."""
        request = await self.repos.leave_requests.get_by_id(request_id)
        if request is None:
            raise NotFoundError("Leave request", request_id)
        if request.status != LeaveStatus.PENDING.value:
            raise InvalidStateError("Leave request is not pending")

        request.status = data.status
        request.approved_by_id = user.id
        request.approved_at = utc_now_naive()
        request.remarks = data.remarks
        await self.repos.leave_requests.stage(request)

        if data.status == LeaveStatus.APPROVED.value:
            balance = await self.repos.leave_balances.get_for(request.employee_id, request.leave_type_id)
            if balance is None:
                leave_type = await self.get_type(request.leave_type_id)
                balance = LeaveBalance(
                    employee_id=request.employee_id,
                    leave_type_id=request.leave_type_id,
                    allocated=leave_type.max_days,
                    remaining=leave_type.max_days,
                )
            if balance.remaining < request.days:
                logger.warning(
                    f"Approving leave {request.id} for {request.days} day(s) with only {balance.remaining:g} remaining"
                )
            balance.used += request.days
            balance.remaining = max(0, balance.remaining - request.days)
            await self.repos.leave_balances.stage(balance)

        await self.repos.commit()
        log_workflow_event("leave_decided", request.id, actor_id=user.id, status=request.status, days=request.days)
        return request
