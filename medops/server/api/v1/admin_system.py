"""
Admin System API Endpoints.

This module exposes service health, host metrics and the persisted request
log to MD and ADMIN users.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from medops.core.models.domain import UserRole
from medops.core.models.io.admin import ErrorSummary, RequestLogPage, RequestLogRead, SystemHealth, SystemMetrics
from medops.server.core.security import require_roles
from medops.server.services.deps import SystemServiceDep

router = APIRouter(dependencies=[Depends(require_roles(UserRole.MD))])


@router.get(
    "/health",
    response_model=SystemHealth,
    summary="System Health",
    description="Database connectivity and latency, uptime and version.",
    response_description="The health report; HTTP 503 when the database is unreachable.",
    responses={503: {"description": "Database check failed"}},
)
async def system_health(service: SystemServiceDep):
    health = await service.health()
    if health.status != "healthy":
        return JSONResponse(status_code=503, content=health.model_dump(mode="json"))
    return health


@router.get(
    "/metrics",
    response_model=SystemMetrics,
    summary="System Metrics",
    description="CPU load, memory, disk and process information of the host.",
    response_description="The host metrics.",
)
async def system_metrics(service: SystemServiceDep):
    return service.metrics()


@router.get(
    "/logs",
    response_model=RequestLogPage,
    summary="Request Logs",
    description="Page through persisted API request logs, newest first.",
    response_description="A page of request logs with pagination metadata.",
)
async def request_logs(
    service: SystemServiceDep,
    path: Optional[str] = Query(None, description="Substring of the request path"),
    status_code: Optional[int] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
):
    rows, pagination = await service.logs(
        page=page, limit=limit, path=path, status_code=status_code, start_date=start_date, end_date=end_date
    )
    return RequestLogPage(data=[RequestLogRead.model_validate(r) for r in rows], pagination=pagination)


@router.get(
    "/errors",
    response_model=ErrorSummary,
    summary="Recent Errors",
    description="Server errors of the last hours grouped by path, with up to three samples each.",
    response_description="The grouped errors.",
)
async def recent_errors(service: SystemServiceDep, hours: int = Query(24, ge=1, le=24 * 30)):
    return await service.errors(hours)
