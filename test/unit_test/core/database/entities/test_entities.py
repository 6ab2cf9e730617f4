"""Unit tests for the MedOps entity models.

Covers generated identifiers, workflow defaults and the unique constraints
the services rely on.
"""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from medops.core.database.base import new_id, utc_now_naive
from medops.core.database.entities.finance import LedgerEntry, PaymentMode
from medops.core.database.entities.leads import CaseStageHistory, KYPSubmission, Lead
from medops.core.database.entities.pre_auth import PreAuthorization
from medops.core.database.entities.users import Team, User


def test_new_id_is_unique_hex():
    first, second = new_id(), new_id()
    assert first != second
    assert len(first) == 32
    int(first, 16)


def test_utc_now_is_naive():
    assert utc_now_naive().tzinfo is None


class TestDefaults:
    def test_lead_starts_as_new_sales_lead(self):
        lead = Lead(lead_ref="L-1", patient_name="Ravi Kumar", bd_id="bd-1")

        assert (lead.case_stage, lead.pipeline_stage) == ("NEW_LEAD", "SALES")
        assert lead.id
        assert isinstance(lead.created_at, datetime)
        assert "L-1" in repr(lead)

    def test_pre_auth_starts_pending(self):
        pre_auth = PreAuthorization(kyp_submission_id="kyp-1")
        assert pre_auth.approval_status == "PENDING"
        assert pre_auth.is_new_hospital_request is False

    def test_ledger_entry_starts_pending_and_live(self):
        entry = LedgerEntry(
            serial_number="DR-0001",
            transaction_type="DEBIT",
            transaction_date=utc_now_naive(),
            description="Hospital payout",
            party_id="p-1",
            head_id="h-1",
            payment_type_id="t-1",
            payment_amount=100,
        )
        assert entry.status == "PENDING"
        assert entry.is_deleted is False
        assert entry.edit_count == 0

    def test_payment_mode_balances_default_to_zero(self):
        mode = PaymentMode(name="Cash")
        assert (mode.opening_balance, mode.current_balance) == (0, 0)

    def test_user_is_active(self):
        user = User(email="a@medops.test", name="A", password_hash="x", role="BD")
        assert user.is_active is True
        assert "BD" in repr(user)


class TestConstraints:
    async def test_lead_reference_unique(self, in_memory_session, bd_user):
        in_memory_session.add(Lead(lead_ref="L-1", patient_name="A", bd_id=bd_user.id))
        await in_memory_session.commit()

        in_memory_session.add(Lead(lead_ref="L-1", patient_name="B", bd_id=bd_user.id))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_one_kyp_per_lead(self, in_memory_session, bd_user):
        lead = Lead(lead_ref="L-2", patient_name="A", bd_id=bd_user.id)
        in_memory_session.add(lead)
        await in_memory_session.commit()

        in_memory_session.add(KYPSubmission(lead_id=lead.id, location="Delhi", submitted_by_id=bd_user.id))
        await in_memory_session.commit()
        in_memory_session.add(KYPSubmission(lead_id=lead.id, location="Pune", submitted_by_id=bd_user.id))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_team_name_unique(self, in_memory_session):
        in_memory_session.add(Team(name="North"))
        await in_memory_session.commit()

        in_memory_session.add(Team(name="North"))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_stage_history_round_trip(self, in_memory_session, bd_user):
        lead = Lead(lead_ref="L-3", patient_name="A", bd_id=bd_user.id)
        in_memory_session.add(lead)
        in_memory_session.add(
            CaseStageHistory(lead_id=lead.id, from_stage="NEW_LEAD", to_stage="KYP_BASIC_COMPLETE", note="KYP")
        )
        await in_memory_session.commit()

        stored = (await in_memory_session.exec(select(CaseStageHistory))).one()
        assert (stored.from_stage, stored.to_stage) == ("NEW_LEAD", "KYP_BASIC_COMPLETE")

