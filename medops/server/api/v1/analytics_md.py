"""
MD Analytics API Endpoints.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from medops.core.models.domain import UserRole
from medops.core.models.io.analytics import MDFinanceAnalytics
from medops.server.core.security import require_roles
from medops.server.services.deps import AnalyticsServiceDep

router = APIRouter()


@router.get(
    "/finance",
    response_model=MDFinanceAnalytics,
    summary="MD Finance Analytics",
    description="Revenue, expenses, cash flow, approval figures and daily trends. Defaults to the last 30 days.",
    response_description="The finance analytics.",
    responses={403: {"description": "MD or ADMIN only"}},
    dependencies=[Depends(require_roles(UserRole.MD))],
)
async def md_finance(
    service: AnalyticsServiceDep, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
):
    return await service.md_finance(start_date, end_date)
