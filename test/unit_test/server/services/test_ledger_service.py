"""
Unit tests for the ledger workflow.

Tests cover:
- Creation of credits, debits and self transfers and their balance effects
- Debit approval, rejection and bulk decisions
- Undo of the latest decision within the window
- Edit requests and their approval or rejection
- Soft delete and the audit trail
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from medops.core.database.base import utc_now_naive
from medops.core.errors import InvalidStateError, NotFoundError, PermissionDeniedError, ValidationFailedError
from medops.core.models.io.finance import BulkDecisionRequest, LedgerEntryCreate
from medops.server.core.config import FinanceConfig
from medops.server.services.ledger import LedgerService, normalize_values, snapshot

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(repos):
    return LedgerService(repos, FinanceConfig(undo_window_seconds=120, max_edits=2, page_size=50))


def _data(masters, transaction_type, **amounts) -> LedgerEntryCreate:
    return LedgerEntryCreate(
        transaction_type=transaction_type,
        transaction_date=datetime(2026, 2, 10, 11, 30),
        description=f"{transaction_type} entry",
        party_id=masters["party"].id,
        head_id=masters["head"].id,
        payment_type_id=masters["payment_type"].id,
        **amounts,
    )


async def _balance(session, mode) -> float:
    await session.refresh(mode)
    return mode.current_balance


async def _pending_debit(service, user, masters, amount=300.0, mode="cash"):
    return await service.create_entry(
        user,
        _data(masters, "DEBIT", payment_mode_id=masters[mode].id, payment_amount=amount, component_a=amount),
    )


class TestCreate:
    async def test_credit_is_approved_and_applied(self, service, session, masters, finance_head):
        entry = await service.create_entry(
            finance_head, _data(masters, "CREDIT", payment_mode_id=masters["cash"].id, received_amount=250.555)
        )

        assert entry.serial_number == "CR-0001"
        assert entry.status == "APPROVED"
        assert entry.approved_by_id == finance_head.id
        assert entry.received_amount == 250.56
        assert entry.current_balance == 1250.56
        assert await _balance(session, masters["cash"]) == 1250.56

    async def test_debit_waits_for_approval(self, service, session, masters, finance_head):
        entry = await _pending_debit(service, finance_head, masters)

        assert entry.serial_number == "DR-0001"
        assert entry.status == "PENDING"
        assert entry.current_balance is None
        assert await _balance(session, masters["cash"]) == 1000

    async def test_self_transfer_moves_both_balances(self, service, session, masters, finance_head):
        entry = await service.create_entry(
            finance_head,
            _data(
                masters,
                "SELF_TRANSFER",
                from_payment_mode_id=masters["bank"].id,
                to_payment_mode_id=masters["cash"].id,
                transfer_amount=700,
            ),
        )

        assert entry.serial_number == "ST-0001"
        assert entry.current_balance == 4300
        assert await _balance(session, masters["bank"]) == 4300
        assert await _balance(session, masters["cash"]) == 1700

    async def test_serials_count_per_prefix(self, service, masters, finance_head):
        await _pending_debit(service, finance_head, masters)
        await service.create_entry(
            finance_head, _data(masters, "CREDIT", payment_mode_id=masters["cash"].id, received_amount=10)
        )
        second = await _pending_debit(service, finance_head, masters)
        assert second.serial_number == "DR-0002"

    async def test_fields_of_other_types_are_cleared(self, service, masters, finance_head):
        entry = await service.create_entry(
            finance_head,
            _data(
                masters,
                "CREDIT",
                payment_mode_id=masters["cash"].id,
                received_amount=10,
                component_a=5,
                to_payment_mode_id=masters["bank"].id,
            ),
        )
        assert entry.component_a is None
        assert entry.to_payment_mode_id is None

    async def test_debit_amount_must_match_components(self, service, masters, finance_head):
        with pytest.raises(ValidationFailedError, match="component A"):
            await service.create_entry(
                finance_head,
                _data(
                    masters,
                    "DEBIT",
                    payment_mode_id=masters["cash"].id,
                    payment_amount=100,
                    component_a=60,
                    component_b=30,
                ),
            )

    async def test_inactive_master_is_rejected(self, service, session, masters, finance_head):
        masters["party"].is_active = False
        session.add(masters["party"])
        await session.commit()
        with pytest.raises(ValidationFailedError, match="Party not found or inactive"):
            await _pending_debit(service, finance_head, masters)

    async def test_unknown_payment_mode_is_rejected(self, service, masters, finance_head):
        with pytest.raises(ValidationFailedError, match="Payment mode"):
            await service.create_entry(
                finance_head, _data(masters, "CREDIT", payment_mode_id="missing", received_amount=10)
            )

    async def test_creation_is_audited(self, service, masters, finance_head):
        entry = await _pending_debit(service, finance_head, masters)
        [log] = await service.audit_trail(entry.id)
        assert log.action == "CREATED"
        assert log.new_data["status"] == "PENDING"
        assert log.new_data["transaction_date"] == "2026-02-10T11:30:00"


class TestApproval:
    async def test_approve_debit_applies_balance(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters, amount=300)
        approved = await service.approve(md, entry.id)

        assert approved.status == "APPROVED"
        assert approved.approved_by_id == md.id
        assert approved.current_balance == 700
        assert await _balance(session, masters["cash"]) == 700
        assert [log.action for log in await service.audit_trail(entry.id)] == ["CREATED", "APPROVED"]

    async def test_debit_may_overdraw(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters, amount=1500)
        await service.approve(md, entry.id)
        assert await _balance(session, masters["cash"]) == -500

    async def test_reject_needs_reason(self, service, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters)
        with pytest.raises(ValidationFailedError, match="Reason is required"):
            await service.reject(md, entry.id, "  ")

    async def test_reject_keeps_balance(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters)
        rejected = await service.reject(md, entry.id, "Duplicate bill")

        assert rejected.status == "REJECTED"
        assert rejected.rejection_reason == "Duplicate bill"
        assert await _balance(session, masters["cash"]) == 1000

    async def test_only_pending_debits_can_be_decided(self, service, masters, finance_head, md):
        credit = await service.create_entry(
            finance_head, _data(masters, "CREDIT", payment_mode_id=masters["cash"].id, received_amount=10)
        )
        with pytest.raises(InvalidStateError, match="Only pending debit"):
            await service.approve(md, credit.id)

        debit = await _pending_debit(service, finance_head, masters)
        await service.reject(md, debit.id, "No")
        with pytest.raises(InvalidStateError):
            await service.approve(md, debit.id)

    async def test_approve_missing_entry(self, service, md):
        with pytest.raises(NotFoundError):
            await service.approve(md, "missing")


class TestBulkDecisions:
    async def test_bulk_approve(self, service, session, masters, finance_head, md):
        first = await _pending_debit(service, finance_head, masters, amount=100)
        second = await _pending_debit(service, finance_head, masters, amount=200, mode="bank")

        request = BulkDecisionRequest(ids=[first.id, second.id, first.id], action="approve")
        result = await service.bulk_decide(md, request)

        assert (result.approved, result.rejected, result.failed) == (2, 0, 0)
        assert await _balance(session, masters["cash"]) == 900
        assert await _balance(session, masters["bank"]) == 4800

    async def test_bulk_reject_needs_reason(self, service, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters)
        with pytest.raises(ValidationFailedError):
            await service.bulk_decide(md, BulkDecisionRequest(ids=[entry.id], action="reject"))

    async def test_bulk_is_all_or_nothing(self, service, session, masters, finance_head, md):
        pending = await _pending_debit(service, finance_head, masters)
        credit = await service.create_entry(
            finance_head, _data(masters, "CREDIT", payment_mode_id=masters["cash"].id, received_amount=10)
        )

        with pytest.raises(ValidationFailedError) as exc_info:
            await service.bulk_decide(
                md, BulkDecisionRequest(ids=[pending.id, credit.id, "missing"], action="approve")
            )
        assert "CR-0001: not a pending debit" in exc_info.value.detail
        assert "missing: not found" in exc_info.value.detail
        assert (await service.get_entry(pending.id)).status == "PENDING"
        assert await _balance(session, masters["cash"]) == 1010


class TestUndo:
    async def test_undo_approval_reverses_balance(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters, amount=300)
        await service.approve(md, entry.id)

        undone = await service.undo(md, entry.id)

        assert undone.status == "PENDING"
        assert undone.approved_by_id is None
        assert undone.current_balance is None
        assert await _balance(session, masters["cash"]) == 1000
        assert (await service.audit_trail(entry.id))[-1].action == "UNDONE"

    async def test_undo_rejection(self, service, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters)
        await service.reject(md, entry.id, "Wrong head")

        undone = await service.undo(md, entry.id)
        assert undone.status == "PENDING"
        assert undone.rejection_reason is None

    async def test_only_the_decider_may_undo(self, service, masters, finance_head, md, make_user):
        entry = await _pending_debit(service, finance_head, masters)
        await service.approve(md, entry.id)
        other_md = await make_user("MD")
        with pytest.raises(PermissionDeniedError):
            await service.undo(other_md, entry.id)

    async def test_undo_window_expires(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters)
        await service.approve(md, entry.id)
        entry.approved_at = utc_now_naive() - timedelta(seconds=121)
        session.add(entry)
        await session.commit()

        with pytest.raises(InvalidStateError, match="within 120 seconds"):
            await service.undo(md, entry.id)

    async def test_undo_approval_waits_for_pending_edit(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters, amount=300)
        await service.approve(md, entry.id)
        await service.request_edit(finance_head, entry.id, "Smaller bill", {"payment_amount": 100, "component_a": 100})

        with pytest.raises(InvalidStateError, match="pending edit request"):
            await service.undo(md, entry.id)

        edited = await service.approve_edit(md, entry.id, "Bill checked")
        assert edited.status == "APPROVED"
        assert await _balance(session, masters["cash"]) == 900

    async def test_edit_is_not_applied_to_unapproved_entry(self, service, session, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters, amount=300)
        await service.approve(md, entry.id)
        await service.request_edit(finance_head, entry.id, "Smaller bill", {"payment_amount": 100, "component_a": 100})
        entry.status = "PENDING"
        session.add(entry)
        await session.commit()

        with pytest.raises(InvalidStateError, match="Only approved entries"):
            await service.approve_edit(md, entry.id, "Bill checked")
        assert await _balance(session, masters["cash"]) == 700

    async def test_nothing_to_undo(self, service, masters, finance_head, md):
        entry = await _pending_debit(service, finance_head, masters)
        with pytest.raises(InvalidStateError, match="no decision"):
            await service.undo(md, entry.id)


class TestEditRequests:
    @pytest.fixture
    async def credit(self, service, masters, finance_head):
        return await service.create_entry(
            finance_head, _data(masters, "CREDIT", payment_mode_id=masters["cash"].id, received_amount=500)
        )

    async def test_edit_needs_approved_entry(self, service, masters, finance_head):
        entry = await _pending_debit(service, finance_head, masters)
        with pytest.raises(InvalidStateError, match="Only approved entries"):
            await service.request_edit(finance_head, entry.id, "Typo", {"description": "Fixed"})

    async def test_edit_needs_reason_and_changes(self, service, credit, finance_head):
        with pytest.raises(ValidationFailedError, match="Reason is required"):
            await service.request_edit(finance_head, credit.id, "", {"description": "Fixed"})
        with pytest.raises(ValidationFailedError, match="At least one change"):
            await service.request_edit(finance_head, credit.id, "Typo", {})

    async def test_only_editable_fields(self, service, credit, finance_head):
        with pytest.raises(ValidationFailedError, match="serial_number, status"):
            await service.request_edit(finance_head, credit.id, "Hack", {"status": "PENDING", "serial_number": "X"})

    async def test_changes_are_validated_up_front(self, service, credit, finance_head):
        with pytest.raises(ValidationFailedError, match="Received amount"):
            await service.request_edit(finance_head, credit.id, "Oops", {"received_amount": -5})

    async def test_one_pending_request_at_a_time(self, service, credit, finance_head):
        await service.request_edit(finance_head, credit.id, "Typo", {"description": "Fixed"})
        with pytest.raises(InvalidStateError, match="already pending"):
            await service.request_edit(finance_head, credit.id, "Again", {"description": "Fixed again"})

    async def test_approve_edit_rebalances(self, service, session, masters, credit, finance_head, md):
        changes = {"payment_mode_id": masters["bank"].id, "received_amount": 650}
        await service.request_edit(finance_head, credit.id, "Wrong mode and amount", changes)
        assert await _balance(session, masters["cash"]) == 1500

        edited = await service.approve_edit(md, credit.id, "Checked with bank statement")

        assert edited.payment_mode_id == masters["bank"].id
        assert edited.received_amount == 650
        assert edited.edit_count == 1
        assert edited.edit_request_status == "APPROVED"
        assert edited.current_balance == 5650
        assert await _balance(session, masters["cash"]) == 1000
        assert await _balance(session, masters["bank"]) == 5650

    async def test_edit_can_change_transaction_date_from_iso_string(self, service, credit, finance_head, md):
        await service.request_edit(finance_head, credit.id, "Date", {"transaction_date": "2026-02-01T09:00:00"})
        edited = await service.approve_edit(md, credit.id, "ok")
        assert edited.transaction_date == datetime(2026, 2, 1, 9, 0)

    async def test_reject_edit_keeps_values(self, service, credit, finance_head, md):
        await service.request_edit(finance_head, credit.id, "Typo", {"received_amount": 50})
        rejected = await service.reject_edit(md, credit.id, "Amount is right")

        assert rejected.edit_request_status == "REJECTED"
        assert rejected.received_amount == 500
        assert rejected.edit_count == 0

    async def test_undo_edit_rejection_reopens_request(self, service, credit, finance_head, md):
        await service.request_edit(finance_head, credit.id, "Typo", {"received_amount": 50})
        await service.reject_edit(md, credit.id, "No")
        undone = await service.undo(md, credit.id)
        assert undone.edit_request_status == "PENDING"

    async def test_approved_edit_is_final(self, service, credit, finance_head, md):
        await service.request_edit(finance_head, credit.id, "Typo", {"description": "Fixed"})
        await service.approve_edit(md, credit.id, "ok")
        with pytest.raises(InvalidStateError, match="cannot be undone"):
            await service.undo(md, credit.id)

    async def test_edit_limit(self, service, credit, finance_head, md):
        for n in range(2):
            await service.request_edit(finance_head, credit.id, "Typo", {"description": f"Fix {n}"})
            await service.approve_edit(md, credit.id, "ok")
        with pytest.raises(InvalidStateError, match="maximum of 2 edits"):
            await service.request_edit(finance_head, credit.id, "Typo", {"description": "Fix 3"})

    async def test_no_pending_request_to_decide(self, service, credit, md):
        with pytest.raises(InvalidStateError, match="no pending edit request"):
            await service.approve_edit(md, credit.id, "ok")
        with pytest.raises(InvalidStateError, match="no pending edit request"):
            await service.reject_edit(md, credit.id, "no")


class TestDelete:
    async def test_delete_approved_entry_reverses_balance(self, service, session, masters, finance_head):
        credit = await service.create_entry(
            finance_head, _data(masters, "CREDIT", payment_mode_id=masters["cash"].id, received_amount=500)
        )
        await service.delete_entry(finance_head, credit.id, "Entered twice")

        assert await _balance(session, masters["cash"]) == 1000
        with pytest.raises(NotFoundError):
            await service.get_entry(credit.id)
        trail = await service.audit_trail(credit.id)
        assert trail[-1].action == "DELETED"
        assert trail[-1].reason == "Entered twice"

    async def test_delete_pending_entry_keeps_balance(self, service, session, masters, finance_head):
        entry = await _pending_debit(service, finance_head, masters)
        await service.delete_entry(finance_head, entry.id)
        assert await _balance(session, masters["cash"]) == 1000

    async def test_deleted_serials_are_not_reused(self, service, masters, finance_head):
        entry = await _pending_debit(service, finance_head, masters)
        await service.delete_entry(finance_head, entry.id)
        assert (await _pending_debit(service, finance_head, masters)).serial_number == "DR-0002"


class TestHelpers:
    def test_normalize_rejects_bad_date(self):
        with pytest.raises(ValidationFailedError, match="Invalid transaction date"):
            normalize_values({"transaction_type": "CREDIT", "transaction_date": "yesterday"})

    async def test_snapshot_is_json_safe(self, service, masters, finance_head):
        entry = await _pending_debit(service, finance_head, masters)
        data = snapshot(entry)
        assert data["transaction_date"] == "2026-02-10T11:30:00"
        assert data["status"] == "PENDING"
        assert "serial_number" not in data
