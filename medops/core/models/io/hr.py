"""
HR I/O models: departments, employees, attendance and leave.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import LeaveStatus

from .common import PaginationMeta


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1, description="Unique department name")
    description: Optional[str] = None
    head_id: Optional[str] = Field(default=None, description="User heading the department")


class DepartmentUpdate(BaseModel):
    """Schema for updating a department. Only MD or ADMIN may change the head."""

    name: Optional[str] = None
    description: Optional[str] = None
    head_id: Optional[str] = None


class DepartmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    head_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EmployeeCreate(BaseModel):
    user_id: str
    employee_code: str = Field(min_length=1)
    department_id: Optional[str] = None
    designation: Optional[str] = None
    date_of_joining: Optional[date] = None
    date_of_birth: Optional[date] = None
    salary: Optional[float] = Field(default=None, ge=0)
    biometric_code: Optional[str] = Field(default=None, description="Code the attendance device reports")


class EmployeeUpdate(BaseModel):
    department_id: Optional[str] = None
    designation: Optional[str] = None
    date_of_joining: Optional[date] = None
    date_of_birth: Optional[date] = None
    salary: Optional[float] = Field(default=None, ge=0)
    biometric_code: Optional[str] = None


class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    employee_code: str
    department_id: Optional[str] = None
    designation: Optional[str] = None
    date_of_joining: Optional[date] = None
    date_of_birth: Optional[date] = None
    salary: Optional[float] = None
    biometric_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PunchIn(BaseModel):
    """A raw punch as reported by an attendance device."""

    employee_code: str
    log_date: datetime
    punch_direction: Union[str, int, None] = Field(default=None, description="in/out or 1/0")


class AttendanceIngestRequest(BaseModel):
    punches: List[PunchIn] = Field(default_factory=list)
    device_id: Optional[str] = None


class AttendanceIngestResult(BaseModel):
    ingested: int = 0
    duplicates: int = 0
    skipped_unknown: int = 0
    unknown_codes: List[str] = Field(default_factory=list)


class DailyAttendanceRead(BaseModel):
    """One employee's attendance for one day."""

    employee_id: str
    employee_code: Optional[str] = None
    day: date
    in_time: Optional[datetime] = None
    out_time: Optional[datetime] = None
    work_hours: Optional[float] = None
    is_late: bool = False
    punches: int = 0


class LeaveTypeCreate(BaseModel):
    name: str = Field(min_length=1, description="Unique leave type name")
    max_days: int = Field(ge=0, description="Days allocated to each employee")
    is_active: bool = True


class LeaveTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    max_days: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class LeaveTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    max_days: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class LeaveBalanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    leave_type_id: str
    leave_type_name: Optional[str] = None
    allocated: float
    used: float
    remaining: float


class LeaveApplyRequest(BaseModel):
    leave_type_id: str
    start_date: date
    end_date: date
    reason: Optional[str] = None


class LeaveDecisionRequest(BaseModel):
    status: Literal["APPROVED", "REJECTED"]
    remarks: Optional[str] = None


class LeaveRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    leave_type_id: str
    leave_type_name: Optional[str] = None
    start_date: date
    end_date: date
    days: int
    reason: Optional[str] = None
    status: LeaveStatus
    approved_by_id: Optional[str] = None
    approved_at: Optional[datetime] = None
    remarks: Optional[str] = None
    created_at: datetime


class LeaveRequestPage(BaseModel):
    data: List[LeaveRequestRead]
    pagination: PaginationMeta


class MyLeaves(BaseModel):
    """The caller's own leave requests and balances."""

    requests: List[LeaveRequestRead] = Field(default_factory=list)
    balances: List[LeaveBalanceRead] = Field(default_factory=list)
