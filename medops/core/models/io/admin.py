"""
Admin system observability I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import PaginationMeta


class DatabaseHealth(BaseModel):
    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class SystemHealth(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    timestamp: datetime
    version: str
    uptime: str = Field(description="Uptime formatted as 'Xd Yh Zm'")
    database: DatabaseHealth


class CPUMetrics(BaseModel):
    cores: int
    load_average: List[float]


class UsageMetrics(BaseModel):
    total: int
    used: int
    free: int
    usage_percent: float


class ProcessMetrics(BaseModel):
    pid: int
    python_version: str


class SystemMetrics(BaseModel):
    timestamp: datetime
    cpu: CPUMetrics
    memory: Optional[UsageMetrics] = None
    disk: UsageMetrics
    process: ProcessMetrics


class RequestLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    method: str
    path: str
    status_code: int
    duration_ms: float
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime


class RequestLogPage(BaseModel):
    data: List[RequestLogRead]
    pagination: PaginationMeta


class ErrorGroup(BaseModel):
    path: str
    count: int
    samples: List[RequestLogRead]


class ErrorSummary(BaseModel):
    hours: int
    total: int
    groups: List[ErrorGroup]
