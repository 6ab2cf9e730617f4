"""
Ledger API Endpoints.

This module provides the finance ledger: creating credits, debits and self
transfers, approving or rejecting debits, undoing a recent decision, the
edit request workflow and soft deletion. Balance changes happen on the
payment modes in the same transaction as the entry change.
"""

from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from medops.core.database.repositories.finance import LedgerFilters
from medops.core.models.domain import LedgerStatus, TransactionType
from medops.core.models.io.common import PaginationMeta
from medops.core.models.io.finance import (
    BulkDecisionRequest,
    BulkDecisionResult,
    EditRequestCreate,
    LedgerAuditRead,
    LedgerEntryCreate,
    LedgerEntryDetail,
    LedgerEntryRead,
    LedgerPage,
    LedgerReasonRequest,
)
from medops.server.core.config import settings
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import LedgerServiceDep

router = APIRouter()

_reader = require_permission(Permission.FINANCE_READ)
_writer = require_permission(Permission.FINANCE_WRITE)
_approver = require_permission(Permission.FINANCE_APPROVE)

_ENTRY_ERRORS = {
    400: {"description": "Entry is in the wrong state or the request breaks a ledger rule"},
    404: {"description": "Ledger entry not found"},
}


@router.post(
    "",
    response_model=LedgerEntryRead,
    status_code=201,
    summary="Create Ledger Entry",
    description=(
        "Create a credit, debit or self transfer. Credits and transfers are approved immediately and move "
        "balances; debits wait for approval."
    ),
    response_description="The created entry.",
    responses={400: {"description": "Invalid amounts or inactive master"}},
)
async def create_entry(payload: LedgerEntryCreate, service: LedgerServiceDep, user=Depends(_writer)):
    return await service.create_entry(user, payload)


@router.get(
    "",
    response_model=LedgerPage,
    summary="List Ledger Entries",
    description="Page through live ledger entries, newest transaction date first.",
    response_description="A page of entries with pagination metadata.",
    dependencies=[Depends(_reader)],
)
async def list_entries(
    service: LedgerServiceDep,
    transaction_type: Optional[TransactionType] = None,
    status: Optional[LedgerStatus] = None,
    edit_request_status: Optional[LedgerStatus] = None,
    party_id: Optional[str] = None,
    head_id: Optional[str] = None,
    payment_mode_id: Optional[str] = Query(None, description="Matches the mode, or either side of a transfer"),
    payment_type_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search: Optional[str] = Query(None, description="Description or serial number"),
    component_filter: Optional[Literal["all", "a_only", "b_only", "both"]] = Query(
        None, description="Debits by which components are non-zero"
    ),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=500),
):
    limit = limit or settings.finance.page_size
    filters = LedgerFilters(
        transaction_type=transaction_type.value if transaction_type else None,
        status=status.value if status else None,
        edit_request_status=edit_request_status.value if edit_request_status else None,
        party_id=party_id,
        head_id=head_id,
        payment_mode_id=payment_mode_id,
        payment_type_id=payment_type_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
        component_filter=component_filter,
    )
    entries, total = await service.list_entries(filters, page, limit)
    return LedgerPage(
        data=[LedgerEntryRead.model_validate(e) for e in entries], pagination=PaginationMeta.build(page, limit, total)
    )


@router.post(
    "/bulk-approve",
    response_model=BulkDecisionResult,
    summary="Bulk Approve or Reject",
    description="Approve or reject several pending debits. Any id that is not a pending debit fails the whole request.",
    response_description="Counts of approved, rejected and failed entries.",
    responses={400: {"description": "Some ids are not pending debits, or reason missing"}},
)
async def bulk_decide(payload: BulkDecisionRequest, service: LedgerServiceDep, user=Depends(_approver)):
    return await service.bulk_decide(user, payload)


@router.get(
    "/{entry_id}",
    response_model=LedgerEntryDetail,
    summary="Get Ledger Entry",
    description="Retrieve an entry with its audit trail.",
    response_description="The entry and its audit trail.",
    responses={404: {"description": "Ledger entry not found"}},
    dependencies=[Depends(_reader)],
)
async def get_entry(entry_id: str, service: LedgerServiceDep):
    entry = await service.get_entry(entry_id)
    trail = await service.audit_trail(entry.id)
    return LedgerEntryDetail(
        **LedgerEntryRead.model_validate(entry).model_dump(),
        audit_trail=[LedgerAuditRead.model_validate(a) for a in trail],
    )


@router.post(
    "/{entry_id}/approve",
    response_model=LedgerEntryRead,
    summary="Approve Debit",
    description="Approve a pending debit and take the amount from its payment mode.",
    response_description="The approved entry.",
    responses=_ENTRY_ERRORS,
)
async def approve(entry_id: str, service: LedgerServiceDep, user=Depends(_approver)):
    return await service.approve(user, entry_id)


@router.post(
    "/{entry_id}/reject",
    response_model=LedgerEntryRead,
    summary="Reject Debit",
    description="Reject a pending debit with a reason. Balances do not change.",
    response_description="The rejected entry.",
    responses=_ENTRY_ERRORS,
)
async def reject(entry_id: str, payload: LedgerReasonRequest, service: LedgerServiceDep, user=Depends(_approver)):
    return await service.reject(user, entry_id, payload.reason)


@router.post(
    "/{entry_id}/undo",
    response_model=LedgerEntryRead,
    summary="Undo Decision",
    description=(
        "Undo the latest approval or rejection on an entry. Only the user who decided may undo, "
        "within the configured window."
    ),
    response_description="The entry back in its pending state.",
    responses={**_ENTRY_ERRORS, 403: {"description": "Decision made by another user"}},
)
async def undo(entry_id: str, service: LedgerServiceDep, user=Depends(_approver)):
    return await service.undo(user, entry_id)


@router.post(
    "/{entry_id}/request-edit",
    response_model=LedgerEntryRead,
    summary="Request Edit",
    description="Ask for a change to an approved entry. The change applies once another user approves it.",
    response_description="The entry with its pending edit request.",
    responses=_ENTRY_ERRORS,
)
async def request_edit(entry_id: str, payload: EditRequestCreate, service: LedgerServiceDep, user=Depends(_writer)):
    return await service.request_edit(user, entry_id, payload.reason, payload.changes)


@router.post(
    "/{entry_id}/approve-edit",
    response_model=LedgerEntryRead,
    summary="Approve Edit",
    description="Apply a pending edit request. The entry's balance effect is recomputed.",
    response_description="The edited entry.",
    responses=_ENTRY_ERRORS,
)
async def approve_edit(
    entry_id: str, payload: LedgerReasonRequest, service: LedgerServiceDep, user=Depends(_approver)
):
    return await service.approve_edit(user, entry_id, payload.reason)


@router.post(
    "/{entry_id}/reject-edit",
    response_model=LedgerEntryRead,
    summary="Reject Edit",
    description="Decline a pending edit request. The entry is unchanged.",
    response_description="The entry with its rejected edit request.",
    responses=_ENTRY_ERRORS,
)
async def reject_edit(entry_id: str, payload: LedgerReasonRequest, service: LedgerServiceDep, user=Depends(_approver)):
    return await service.reject_edit(user, entry_id, payload.reason)


@router.delete(
    "/{entry_id}",
    response_model=LedgerEntryRead,
    summary="Delete Ledger Entry",
    description="Soft-delete an entry. An approved entry's balance effect is reversed.",
    response_description="The deleted entry.",
    responses={404: {"description": "Ledger entry not found"}},
)
async def delete_entry(
    entry_id: str, service: LedgerServiceDep, reason: Optional[str] = None, user=Depends(_approver)
):
    return await service.delete_entry(user, entry_id, reason)
