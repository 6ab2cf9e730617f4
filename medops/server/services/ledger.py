"""
Service for the finance ledger.

Balances live on payment modes and only move here. Credits and self
transfers take effect when created; debits wait for approval. Approved
entries change through an edit request that a second person approves, and
every change leaves a ledger audit row. All balance changes of one operation
are committed together with the entry and its audit row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.finance import LedgerAuditLog, LedgerEntry
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.database.repositories.base import page_offset
from medops.core.database.repositories.finance import LedgerFilters
from medops.core.errors import (
    InvalidStateError,
    MedOpsError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from medops.core.logging_config import get_logger
from medops.core.models.domain import LedgerAuditAction, LedgerStatus, TransactionType
from medops.core.models.io.finance import BulkDecisionRequest, BulkDecisionResult, LedgerEntryCreate
from medops.core.monitoring import log_workflow_event
from medops.core.rules import ledger as ledger_rules
from medops.core.rules.money import round_money
from medops.server.core.config import FinanceConfig

logger = get_logger(__name__)

_AMOUNT_FIELDS = ("received_amount", "payment_amount", "component_a", "component_b", "transfer_amount")

# Fields kept per transaction type; the rest are cleared
_TYPE_FIELDS = {
    TransactionType.CREDIT: {"payment_mode_id", "received_amount"},
    TransactionType.DEBIT: {"payment_mode_id", "payment_amount", "component_a", "component_b"},
    TransactionType.SELF_TRANSFER: {"from_payment_mode_id", "to_payment_mode_id", "transfer_amount"},
}
_TYPED_FIELDS = set().union(*_TYPE_FIELDS.values())


def _jsonable(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


def snapshot(entry: LedgerEntry) -> Dict[str, Any]:
    """JSON-safe copy of an entry's editable fields and status, for the audit trail."""
    data = {field: _jsonable(getattr(entry, field)) for field in sorted(ledger_rules.EDITABLE_FIELDS)}
    data["status"] = entry.status
    data["current_balance"] = entry.current_balance
    return data


def normalize_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Round amounts and clear the fields that do not belong to the transaction type."""
    transaction_type = TransactionType(values["transaction_type"])
    normalized = dict(values)
    normalized["transaction_type"] = transaction_type.value
    for field in _AMOUNT_FIELDS:
        if normalized.get(field) is not None:
            normalized[field] = round_money(normalized[field])
    for field in _TYPED_FIELDS - _TYPE_FIELDS[transaction_type]:
        normalized[field] = None
    if isinstance(normalized.get("transaction_date"), str):
        try:
            normalized["transaction_date"] = datetime.fromisoformat(normalized["transaction_date"])
        except ValueError:
            raise ValidationFailedError(f"Invalid transaction date: {normalized['transaction_date']}")
    return normalized


def amounts_of(values: Dict[str, Any]) -> ledger_rules.LedgerAmounts:
    return ledger_rules.LedgerAmounts(
        transaction_type=TransactionType(values["transaction_type"]),
        payment_mode_id=values.get("payment_mode_id"),
        received_amount=values.get("received_amount"),
        payment_amount=values.get("payment_amount"),
        component_a=values.get("component_a"),
        component_b=values.get("component_b"),
        from_payment_mode_id=values.get("from_payment_mode_id"),
        to_payment_mode_id=values.get("to_payment_mode_id"),
        transfer_amount=values.get("transfer_amount"),
    )


def entry_values(entry: LedgerEntry) -> Dict[str, Any]:
    return {field: getattr(entry, field) for field in ledger_rules.EDITABLE_FIELDS}


def primary_mode_id(values: Dict[str, Any]) -> Optional[str]:
    """The mode whose balance an entry reports: the source mode for transfers."""
    if TransactionType(values["transaction_type"]) == TransactionType.SELF_TRANSFER:
        return values.get("from_payment_mode_id")
    return values.get("payment_mode_id")


@dataclass
class _Decision:
    kind: str
    decided_at: Optional[datetime]
    decided_by_id: Optional[str]


class LedgerService:
    """Service for ledger entries, approvals, edit requests and undo."""

    def __init__(self, repos: SqlRepoBundle, config: FinanceConfig):
        self.repos = repos
        self.config = config

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def get_entry(self, entry_id: str) -> LedgerEntry:
        entry = await self.repos.ledger.get_by_id(entry_id)
        if entry is None or entry.is_deleted:
            raise NotFoundError("Ledger entry", entry_id)
        return entry

    async def _ensure_active(self, repo, label: str, master_id: Optional[str]) -> None:
        if not master_id:
            return
        master = await repo.get_by_id(master_id)
        if master is None or not master.is_active:
            raise ValidationFailedError(f"{label} not found or inactive: '{master_id}'")

    async def _validate_references(self, values: Dict[str, Any]) -> None:
        await self._ensure_active(self.repos.parties, "Party", values.get("party_id"))
        await self._ensure_active(self.repos.heads, "Head", values.get("head_id"))
        await self._ensure_active(self.repos.payment_types, "Payment type", values.get("payment_type_id"))
        for field in ("payment_mode_id", "from_payment_mode_id", "to_payment_mode_id"):
            await self._ensure_active(self.repos.payment_modes, "Payment mode", values.get(field))

    async def _apply_effects(self, *effect_maps: Dict[str, float]) -> Dict[str, float]:
        """Apply the combined balance deltas and return the new balance per touched mode."""
        combined: Dict[str, float] = {}
        for effects in effect_maps:
            for mode_id, delta in effects.items():
                combined[mode_id] = round_money(combined.get(mode_id, 0) + delta)
        balances = {}
        for mode_id, delta in combined.items():
            if mode_id is None:
                continue
            balances[mode_id] = await self.repos.payment_modes.adjust_balance(mode_id, delta)
        return balances

    async def _current_balance(self, values: Dict[str, Any], balances: Dict[str, float]) -> Optional[float]:
        mode_id = primary_mode_id(values)
        if mode_id is None:
            return None
        if mode_id in balances:
            return balances[mode_id]
        mode = await self.repos.payment_modes.get_by_id(mode_id)
        return mode.current_balance if mode else None

    async def _audit(
        self,
        entry: LedgerEntry,
        action: LedgerAuditAction,
        user: User,
        previous: Optional[Dict[str, Any]] = None,
        new: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
    ) -> None:
        await self.repos.ledger_audit.stage(
            LedgerAuditLog(
                ledger_entry_id=entry.id,
                action=action.value,
                previous_data=previous,
                new_data=new,
                reason=reason,
                performed_by_id=user.id,
            )
        )

    @staticmethod
    def _require_reason(reason: Optional[str], what: str) -> str:
        if not reason or not reason.strip():
            raise ValidationFailedError(f"Reason is required to {what}")
        return reason.strip()

    @staticmethod
    def _ensure_pending_debit(entry: LedgerEntry) -> None:
        if entry.transaction_type != TransactionType.DEBIT.value or entry.status != LedgerStatus.PENDING.value:
            raise InvalidStateError(
                f"Only pending debit entries can be approved or rejected; {entry.serial_number} is "
                f"{entry.status} {entry.transaction_type}"
            )

    # ------------------------------------------------------------------
    # Create and read
    # ------------------------------------------------------------------

    async def create_entry(self, user: User, data: LedgerEntryCreate) -> LedgerEntry:
        """
        Create a ledger entry.

        Credits and self transfers are approved on creation and move balances
        immediately. Debits start PENDING and move nothing until approved.
        """
        values = normalize_values(data.model_dump())
        ledger_rules.validate_amounts(amounts_of(values))
        await self._validate_references(values)

        transaction_type = TransactionType(values["transaction_type"])
        prefix = ledger_rules.SERIAL_PREFIXES[transaction_type]
        serial = ledger_rules.next_serial(transaction_type, await self.repos.ledger.serials_for_prefix(prefix))

        entry = LedgerEntry(serial_number=serial, created_by_id=user.id, **values)
        if transaction_type == TransactionType.DEBIT:
            entry.status = LedgerStatus.PENDING.value
        else:
            balances = await self._apply_effects(ledger_rules.balance_effects(amounts_of(values)))
            entry.status = LedgerStatus.APPROVED.value
            entry.approved_by_id = user.id
            entry.approved_at = utc_now_naive()
            entry.current_balance = await self._current_balance(values, balances)

        await self.repos.ledger.stage(entry)
        await self._audit(entry, LedgerAuditAction.CREATED, user, new=snapshot(entry))
        await self.repos.commit()
        log_workflow_event("ledger_entry_created", entry.id, actor_id=user.id, serial=serial, status=entry.status)
        logger.info(f"Ledger entry {serial} created by {user.id} as {entry.status}")
        return entry

    async def list_entries(self, filters: LedgerFilters, page: int, limit: int) -> Tuple[List[LedgerEntry], int]:
        return await self.repos.ledger.search(filters, limit=limit, offset=page_offset(page, limit))

    async def audit_trail(self, entry_id: str) -> List[LedgerAuditLog]:
        return await self.repos.ledger_audit.list_for_entry(entry_id)

    # ------------------------------------------------------------------
    # Approval
    # ------------------------------------------------------------------

    async def _approve(self, user: User, entry: LedgerEntry) -> None:
        self._ensure_pending_debit(entry)
        await self._ensure_active(self.repos.payment_modes, "Payment mode", entry.payment_mode_id)
        previous = snapshot(entry)
        values = entry_values(entry)
        balances = await self._apply_effects(ledger_rules.balance_effects(amounts_of(values)))
        entry.status = LedgerStatus.APPROVED.value
        entry.approved_by_id = user.id
        entry.approved_at = utc_now_naive()
        entry.rejection_reason = None
        entry.current_balance = await self._current_balance(values, balances)
        await self.repos.ledger.stage(entry)
        await self._audit(entry, LedgerAuditAction.APPROVED, user, previous=previous, new=snapshot(entry))

    async def _reject(self, user: User, entry: LedgerEntry, reason: str) -> None:
        """Reject a pending debit. The decider and time go in the approval fields so the decision can be undone."""
        self._ensure_pending_debit(entry)
        previous = snapshot(entry)
        entry.status = LedgerStatus.REJECTED.value
        entry.approved_by_id = user.id
        entry.approved_at = utc_now_naive()
        entry.rejection_reason = reason
        await self.repos.ledger.stage(entry)
        await self._audit(
            entry, LedgerAuditAction.REJECTED, user, previous=previous, new=snapshot(entry), reason=reason
        )

    async def approve(self, user: User, entry_id: str) -> LedgerEntry:
        entry = await self.get_entry(entry_id)
        await self._approve(user, entry)
        await self.repos.commit()
        log_workflow_event("ledger_entry_approved", entry.id, actor_id=user.id, amount=entry.payment_amount)
        return entry

    async def reject(self, user: User, entry_id: str, reason: Optional[str]) -> LedgerEntry:
        reason = self._require_reason(reason, "reject an entry")
        entry = await self.get_entry(entry_id)
        await self._reject(user, entry, reason)
        await self.repos.commit()
        log_workflow_event("ledger_entry_rejected", entry.id, actor_id=user.id)
        return entry

    async def bulk_decide(self, user: User, request: BulkDecisionRequest) -> BulkDecisionResult:
        """
        Approve or reject several pending debits at once.

        Every id is checked up front; one that is missing or not a pending
        debit fails the whole request before anything changes.
        """
        reason = None
        if request.action == "reject":
            reason = self._require_reason(request.rejection_reason, "reject entries")

        entries = []
        problems = []
        for entry_id in dict.fromkeys(request.ids):
            entry = await self.repos.ledger.get_by_id(entry_id)
            if entry is None or entry.is_deleted:
                problems.append(f"{entry_id}: not found")
            elif entry.transaction_type != TransactionType.DEBIT.value or entry.status != LedgerStatus.PENDING.value:
                problems.append(f"{entry.serial_number}: not a pending debit")
            else:
                entries.append(entry)
        if problems:
            raise ValidationFailedError("Bulk action rejected. " + "; ".join(problems))

        result = BulkDecisionResult()
        for entry in entries:
            try:
                if request.action == "approve":
                    await self._approve(user, entry)
                    result.approved += 1
                else:
                    await self._reject(user, entry, reason)
                    result.rejected += 1
            except MedOpsError as e:
                result.failed += 1
                result.errors.append(f"{entry.serial_number}: {e.detail}")
        await self.repos.commit()
        log_workflow_event(
            "ledger_bulk_decision",
            ",".join(e.id for e in entries),
            actor_id=user.id,
            action=request.action,
            approved=result.approved,
            rejected=result.rejected,
            failed=result.failed,
        )
        return result

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    @staticmethod
    def _latest_decision(entry: LedgerEntry) -> Optional[_Decision]:
        decisions = []
        if entry.transaction_type == TransactionType.DEBIT.value and entry.status in (
            LedgerStatus.APPROVED.value,
            LedgerStatus.REJECTED.value,
        ):
            decisions.append(_Decision(f"debit_{entry.status.lower()}", entry.approved_at, entry.approved_by_id))
        if entry.edit_request_status in (LedgerStatus.APPROVED.value, LedgerStatus.REJECTED.value):
            decisions.append(
                _Decision(f"edit_{entry.edit_request_status.lower()}", entry.edit_decided_at, entry.edit_decided_by_id)
            )
        decisions = [d for d in decisions if d.decided_at is not None]
        if not decisions:
            return None
        return max(decisions, key=lambda d: d.decided_at)

    async def undo(self, user: User, entry_id: str) -> LedgerEntry:
        """
        Undo the latest decision on an entry.

        Only the user who decided may undo, and only within the configured
        window. A debit approval is reversed on the balance; a debit rejection
        or an edit rejection goes back to PENDING. Approved edits are final.
        """
        entry = await self.get_entry(entry_id)
        decision = self._latest_decision(entry)
        if decision is None:
            raise InvalidStateError("There is no decision to undo on this entry")
        if decision.kind == "edit_approved":
            raise InvalidStateError("Approved edits cannot be undone")
        if decision.decided_by_id != user.id:
            raise PermissionDeniedError("Only the user who made the decision can undo it")
        if not ledger_rules.within_undo_window(decision.decided_at, utc_now_naive(), self.config.undo_window_seconds):
            raise InvalidStateError(f"Undo is only possible within {self.config.undo_window_seconds} seconds")

        if decision.kind == "debit_approved" and entry.edit_request_status == LedgerStatus.PENDING.value:
            raise InvalidStateError("Decide the pending edit request before undoing the approval")

        previous = snapshot(entry)
        if decision.kind == "debit_approved":
            effects = ledger_rules.balance_effects(amounts_of(entry_values(entry)))
            await self._apply_effects(ledger_rules.reverse_effects(effects))
            entry.current_balance = None
        if decision.kind in ("debit_approved", "debit_rejected"):
            entry.status = LedgerStatus.PENDING.value
            entry.approved_by_id = None
            entry.approved_at = None
            entry.rejection_reason = None
        else:
            entry.edit_request_status = LedgerStatus.PENDING.value
            entry.edit_decided_by_id = None
            entry.edit_decided_at = None
            entry.edit_decision_reason = None

        await self.repos.ledger.stage(entry)
        await self._audit(
            entry, LedgerAuditAction.UNDONE, user, previous=previous, new=snapshot(entry), reason=decision.kind
        )
        await self.repos.commit()
        log_workflow_event("ledger_decision_undone", entry.id, actor_id=user.id, decision=decision.kind)
        return entry

    # ------------------------------------------------------------------
    # Edit requests
    # ------------------------------------------------------------------

    async def _merged_values(self, entry: LedgerEntry, changes: Dict[str, Any]) -> Dict[str, Any]:
        """The entry's values with ``changes`` applied, normalized and fully validated."""
        merged = entry_values(entry)
        merged.update(changes)
        try:
            TransactionType(merged["transaction_type"])
        except ValueError:
            raise ValidationFailedError(f"Invalid transaction type: {merged['transaction_type']}")
        values = normalize_values(merged)
        ledger_rules.validate_amounts(amounts_of(values))
        await self._validate_references(values)
        if not values.get("description"):
            raise ValidationFailedError("Description cannot be empty")
        return values

    async def request_edit(
        self, user: User, entry_id: str, reason: Optional[str], changes: Dict[str, Any]
    ) -> LedgerEntry:
        reason = self._require_reason(reason, "request an edit")
        entry = await self.get_entry(entry_id)
        if entry.status != LedgerStatus.APPROVED.value:
            raise InvalidStateError("Only approved entries can be edited")
        if entry.edit_request_status == LedgerStatus.PENDING.value:
            raise InvalidStateError("An edit request is already pending for this entry")
        if entry.edit_count >= self.config.max_edits:
            raise InvalidStateError(f"This entry has reached the maximum of {self.config.max_edits} edits")
        if not changes:
            raise ValidationFailedError("At least one change is required")
        not_allowed = sorted(set(changes) - ledger_rules.EDITABLE_FIELDS)
        if not_allowed:
            raise ValidationFailedError(f"Fields cannot be edited: {', '.join(not_allowed)}")

        await self._merged_values(entry, changes)

        previous = snapshot(entry)
        entry.edit_request_status = LedgerStatus.PENDING.value
        entry.edit_requested_changes = {key: _jsonable(value) for key, value in changes.items()}
        entry.edit_request_reason = reason
        entry.edit_requested_by_id = user.id
        entry.edit_requested_at = utc_now_naive()
        entry.edit_decided_by_id = None
        entry.edit_decided_at = None
        entry.edit_decision_reason = None
        await self.repos.ledger.stage(entry)
        await self._audit(
            entry,
            LedgerAuditAction.EDIT_REQUESTED,
            user,
            previous=previous,
            new=entry.edit_requested_changes,
            reason=reason,
        )
        await self.repos.commit()
        log_workflow_event("ledger_edit_requested", entry.id, actor_id=user.id, fields=sorted(changes))
        return entry

    async def approve_edit(self, user: User, entry_id: str, reason: Optional[str]) -> LedgerEntry:
        """
        Apply a pending edit request.

        The entry's old balance effect is reversed and the edited entry's
        effect applied in the same unit of work.
        """
        reason = self._require_reason(reason, "approve an edit")
        entry = await self.get_entry(entry_id)
        if entry.edit_request_status != LedgerStatus.PENDING.value:
            raise InvalidStateError("There is no pending edit request for this entry")
        if entry.status != LedgerStatus.APPROVED.value:
            raise InvalidStateError("Only approved entries can be edited")

        values = await self._merged_values(entry, entry.edit_requested_changes or {})
        previous = snapshot(entry)
        old_effects = ledger_rules.balance_effects(amounts_of(entry_values(entry)))
        new_effects = ledger_rules.balance_effects(amounts_of(values))
        balances = await self._apply_effects(ledger_rules.reverse_effects(old_effects), new_effects)

        for key, value in values.items():
            setattr(entry, key, value)
        entry.current_balance = await self._current_balance(values, balances)
        entry.edit_count += 1
        entry.edit_request_status = LedgerStatus.APPROVED.value
        entry.edit_decided_by_id = user.id
        entry.edit_decided_at = utc_now_naive()
        entry.edit_decision_reason = reason
        await self.repos.ledger.stage(entry)
        await self._audit(
            entry, LedgerAuditAction.EDIT_APPROVED, user, previous=previous, new=snapshot(entry), reason=reason
        )
        await self.repos.commit()
        log_workflow_event("ledger_edit_approved", entry.id, actor_id=user.id, edit_count=entry.edit_count)
        return entry

    async def reject_edit(self, user: User, entry_id: str, reason: Optional[str]) -> LedgerEntry:
        reason = self._require_reason(reason, "reject an edit")
        entry = await self.get_entry(entry_id)
        if entry.edit_request_status != LedgerStatus.PENDING.value:
            raise InvalidStateError("There is no pending edit request for this entry")

        previous = snapshot(entry)
        entry.edit_request_status = LedgerStatus.REJECTED.value
        entry.edit_decided_by_id = user.id
        entry.edit_decided_at = utc_now_naive()
        entry.edit_decision_reason = reason
        await self.repos.ledger.stage(entry)
        await self._audit(entry, LedgerAuditAction.EDIT_REJECTED, user, previous=previous, reason=reason)
        await self.repos.commit()
        log_workflow_event("ledger_edit_rejected", entry.id, actor_id=user.id)
        return entry

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_entry(self, user: User, entry_id: str, reason: Optional[str] = None) -> LedgerEntry:
        """Soft-delete an entry, reversing its balance effect when it was approved."""
        entry = await self.get_entry(entry_id)
        previous = snapshot(entry)
        if entry.status == LedgerStatus.APPROVED.value:
            effects = ledger_rules.balance_effects(amounts_of(entry_values(entry)))
            await self._apply_effects(ledger_rules.reverse_effects(effects))
        entry.is_deleted = True
        await self.repos.ledger.stage(entry)
        await self._audit(entry, LedgerAuditAction.DELETED, user, previous=previous, reason=reason)
        await self.repos.commit()
        log_workflow_event("ledger_entry_deleted", entry.id, actor_id=user.id, was_status=previous["status"])
        logger.info(f"Ledger entry {entry.serial_number} deleted by {user.id}")
        return entry
