"""
Attendance API Endpoints.

Biometric devices push punches to ``/ingest``; the read endpoints return one
summary per employee per day.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from medops.core.models.io.hr import AttendanceIngestRequest, AttendanceIngestResult, DailyAttendanceRead
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import AttendanceServiceDep, CurrentUserDep, EmployeeServiceDep

router = APIRouter()


@router.post(
    "/ingest",
    response_model=AttendanceIngestResult,
    summary="Ingest Punches",
    description=(
        "Store raw device punches. Directions 'in'/'1' and 'out'/'0' are recognized; anything else counts as IN. "
        "Unknown employee codes are skipped and reported."
    ),
    response_description="Counts of stored, duplicate and skipped punches.",
    dependencies=[Depends(require_permission(Permission.ATTENDANCE_WRITE))],
)
async def ingest(payload: AttendanceIngestRequest, service: AttendanceServiceDep):
    return await service.ingest(payload)


@router.get(
    "",
    response_model=List[DailyAttendanceRead],
    summary="Daily Attendance",
    description="Daily attendance per employee for a date range, today by default.",
    response_description="One row per employee per day.",
    dependencies=[Depends(require_permission(Permission.ATTENDANCE_READ))],
)
async def daily_attendance(
    service: AttendanceServiceDep,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    department_id: Optional[str] = None,
    employee_id: Optional[str] = None,
):
    return await service.daily(start_date, end_date, department_id=department_id, employee_id=employee_id)


@router.get(
    "/my",
    response_model=List[DailyAttendanceRead],
    summary="My Attendance",
    description="The current user's daily attendance for a date range, today by default.",
    response_description="One row per day.",
    responses={404: {"description": "The current user has no employee record"}},
)
async def my_attendance(
    user: CurrentUserDep,
    service: AttendanceServiceDep,
    employees: EmployeeServiceDep,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    employee = await employees.get_for_user(user.id)
    return await service.daily(start_date, end_date, employee_id=employee.id)
