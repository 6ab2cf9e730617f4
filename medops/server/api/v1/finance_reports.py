"""
Finance Reports API Endpoints.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from medops.core.models.io.finance import FinanceSummary
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import FinanceReportServiceDep

router = APIRouter()


@router.get(
    "/summary",
    response_model=FinanceSummary,
    summary="Finance Summary",
    description=(
        "Approved credit and debit totals, pending entries and debit totals per head for a date range, "
        "plus a balance integrity check for every payment mode."
    ),
    response_description="The finance summary.",
    dependencies=[Depends(require_permission(Permission.FINANCE_READ))],
)
async def summary(
    service: FinanceReportServiceDep, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
):
    """
    Finance summary.

    A payment mode whose stored balance differs from opening balance plus its
    approved history by more than 0.01 is reported with ``integrity_ok`` false.
    """
    return await service.summary(start_date, end_date)
