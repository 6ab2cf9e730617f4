"""
Authentication, user and team I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from medops.core.models.domain import UserRole


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    email: str = Field(description="Account email")
    password: str = Field(description="Account password")


class UserRead(BaseModel):
    """Schema for reading a user from API. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole
    team_id: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    access_token: str = Field(description="Signed JWT bearer token")
    token_type: str = Field(default="bearer")
    user: UserRead


class UserCreate(BaseModel):
    """Schema for creating a user via API."""

    email: str = Field(description="Unique account email")
    name: str = Field(min_length=1, description="Display name")
    password: str = Field(min_length=8, description="Initial password, at least 8 characters")
    role: UserRole = Field(default=UserRole.USER, description="Role deciding the user's permissions")
    team_id: Optional[str] = Field(default=None, description="Sales team the user belongs to")


class UserUpdate(BaseModel):
    """Schema for updating a user via API."""

    name: Optional[str] = None
    role: Optional[UserRole] = None
    team_id: Optional[str] = None
    is_active: Optional[bool] = None


class PasswordReset(BaseModel):
    password: str = Field(min_length=8, description="New password, at least 8 characters")


class TeamRead(BaseModel):
    """Schema for reading a sales team from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    team_lead_id: Optional[str] = None
    department_id: Optional[str] = None
    created_at: datetime


class TeamCreate(BaseModel):
    """Schema for creating a sales team via API."""

    name: str = Field(min_length=1, description="Unique team name")
    team_lead_id: Optional[str] = Field(default=None, description="User leading the team")
    department_id: Optional[str] = Field(default=None, description="Department the team belongs to")
