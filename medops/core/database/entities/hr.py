"""
HR entity models.

Departments, employee profiles, the raw biometric attendance punches and
leave: the leave types, each employee's balance per type and leave requests.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class Department(Base, table=True):
    """Entity for a department.

    Table: mo_departments
    """

    __tablename__ = "mo_departments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=128, unique=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    head_id: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class Employee(Base, table=True):
    """Entity for an employee profile attached to a user.

    Table: mo_employees
    """

    __tablename__ = "mo_employees"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="mo_users.id", max_length=64, unique=True)
    employee_code: str = Field(max_length=32, unique=True, index=True)
    department_id: Optional[str] = Field(default=None, foreign_key="mo_departments.id", max_length=64, index=True)
    designation: Optional[str] = Field(default=None, max_length=128)
    date_of_joining: Optional[date] = Field(default=None)
    date_of_birth: Optional[date] = Field(default=None)
    salary: Optional[float] = Field(default=None)
    biometric_code: Optional[str] = Field(default=None, max_length=32, index=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class AttendanceLog(Base, table=True):
    """Entity for a single biometric punch.

    Table: mo_attendance_logs
    """

    __tablename__ = "mo_attendance_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    employee_id: str = Field(foreign_key="mo_employees.id", max_length=64, index=True)
    log_date: datetime = Field(index=True)
    punch_direction: str = Field(max_length=8)
    device_id: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)


class LeaveType(Base, table=True):
    """Entity for a kind of leave and its yearly allocation.

    Table: mo_leave_types
    """

    __tablename__ = "mo_leave_types"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=64, unique=True)
    max_days: int = Field(description="Days allocated to each employee")
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class LeaveBalance(Base, table=True):
    """Entity for an employee's allocation and usage of one leave type.

    Table: mo_leave_balances
    """

    __tablename__ = "mo_leave_balances"
    __table_args__ = (UniqueConstraint("employee_id", "leave_type_id"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    employee_id: str = Field(foreign_key="mo_employees.id", max_length=64, index=True)
    leave_type_id: str = Field(foreign_key="mo_leave_types.id", max_length=64, index=True)
    allocated: float = Field(default=0)
    used: float = Field(default=0)
    remaining: float = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class LeaveRequest(Base, table=True):
    """Entity for a leave application and its decision.

    Table: mo_leave_requests
    """

    __tablename__ = "mo_leave_requests"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    employee_id: str = Field(foreign_key="mo_employees.id", max_length=64, index=True)
    leave_type_id: str = Field(foreign_key="mo_leave_types.id", max_length=64, index=True)
    start_date: date
    end_date: date
    days: int
    reason: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="PENDING", max_length=16, index=True)
    approved_by_id: Optional[str] = Field(default=None, max_length=64)
    approved_at: Optional[datetime] = Field(default=None)
    remarks: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)
