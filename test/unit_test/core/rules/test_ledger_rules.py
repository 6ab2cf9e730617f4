"""Unit tests for ledger serials, amount validation and balance effects."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from medops.core.errors import ValidationFailedError
from medops.core.models.domain import TransactionType
from medops.core.rules.ledger import (
    LedgerAmounts,
    apply_balance,
    balance_effects,
    balance_integrity,
    next_serial,
    reverse_effects,
    validate_amounts,
    within_undo_window,
)


class TestNextSerial:
    def test_first_serial(self):
        assert next_serial(TransactionType.DEBIT, []) == "DR-0001"

    def test_one_past_highest_of_same_prefix(self):
        existing = ["DR-0001", "DR-0007", "CR-0042", "ST-0100", None, "garbage"]
        assert next_serial(TransactionType.DEBIT, existing) == "DR-0008"
        assert next_serial(TransactionType.CREDIT, existing) == "CR-0043"
        assert next_serial(TransactionType.SELF_TRANSFER, existing) == "ST-0101"

    def test_grows_past_four_digits(self):
        assert next_serial(TransactionType.CREDIT, ["CR-9999"]) == "CR-10000"


class TestValidateAmounts:
    def test_valid_credit(self):
        validate_amounts(LedgerAmounts(TransactionType.CREDIT, payment_mode_id="m1", received_amount=100))

    @pytest.mark.parametrize("amount", [None, 0, -5])
    def test_credit_needs_positive_amount(self, amount):
        with pytest.raises(ValidationFailedError, match="Received amount"):
            validate_amounts(LedgerAmounts(TransactionType.CREDIT, payment_mode_id="m1", received_amount=amount))

    def test_credit_needs_mode(self):
        with pytest.raises(ValidationFailedError, match="Payment mode is required"):
            validate_amounts(LedgerAmounts(TransactionType.CREDIT, received_amount=100))

    def test_valid_debit_within_tolerance(self):
        validate_amounts(
            LedgerAmounts(
                TransactionType.DEBIT, payment_mode_id="m1", payment_amount=300.004, component_a=100, component_b=200
            )
        )

    def test_debit_payment_must_match_components(self):
        with pytest.raises(ValidationFailedError, match="must equal component A"):
            validate_amounts(
                LedgerAmounts(
                    TransactionType.DEBIT, payment_mode_id="m1", payment_amount=250, component_a=100, component_b=200
                )
            )

    def test_debit_components_cannot_be_negative(self):
        with pytest.raises(ValidationFailedError, match="cannot be negative"):
            validate_amounts(
                LedgerAmounts(
                    TransactionType.DEBIT, payment_mode_id="m1", payment_amount=50, component_a=100, component_b=-50
                )
            )

    def test_debit_needs_a_positive_component(self):
        with pytest.raises(ValidationFailedError, match="At least one component"):
            validate_amounts(
                LedgerAmounts(TransactionType.DEBIT, payment_mode_id="m1", payment_amount=0, component_a=0)
            )

    def test_debit_only_one_component(self):
        validate_amounts(
            LedgerAmounts(TransactionType.DEBIT, payment_mode_id="m1", payment_amount=75, component_b=75)
        )

    def test_self_transfer_needs_distinct_modes(self):
        with pytest.raises(ValidationFailedError, match="must be different"):
            validate_amounts(
                LedgerAmounts(
                    TransactionType.SELF_TRANSFER,
                    from_payment_mode_id="m1",
                    to_payment_mode_id="m1",
                    transfer_amount=10,
                )
            )

    def test_self_transfer_needs_both_modes(self):
        with pytest.raises(ValidationFailedError, match="Source and target"):
            validate_amounts(
                LedgerAmounts(TransactionType.SELF_TRANSFER, from_payment_mode_id="m1", transfer_amount=10)
            )

    def test_self_transfer_needs_positive_amount(self):
        with pytest.raises(ValidationFailedError, match="Transfer amount"):
            validate_amounts(
                LedgerAmounts(
                    TransactionType.SELF_TRANSFER,
                    from_payment_mode_id="m1",
                    to_payment_mode_id="m2",
                    transfer_amount=0,
                )
            )


class TestBalanceEffects:
    def test_credit_adds(self):
        effects = balance_effects(LedgerAmounts(TransactionType.CREDIT, payment_mode_id="m1", received_amount=10.555))
        assert effects == {"m1": 10.56}

    def test_debit_subtracts(self):
        effects = balance_effects(LedgerAmounts(TransactionType.DEBIT, payment_mode_id="m1", payment_amount=40))
        assert effects == {"m1": -40.0}

    def test_transfer_moves_between_modes(self):
        effects = balance_effects(
            LedgerAmounts(
                TransactionType.SELF_TRANSFER, from_payment_mode_id="a", to_payment_mode_id="b", transfer_amount=25
            )
        )
        assert effects == {"a": -25.0, "b": 25.0}

    def test_reverse(self):
        assert reverse_effects({"a": -25.0, "b": 25.0}) == {"a": 25.0, "b": -25.0}

    def test_apply_balance(self):
        assert apply_balance(100, TransactionType.CREDIT, 0.1) == 100.1
        assert apply_balance(100, TransactionType.DEBIT, 100.5) == -0.5

    def test_apply_balance_rejects_transfers(self):
        with pytest.raises(ValidationFailedError):
            apply_balance(100, TransactionType.SELF_TRANSFER, 10)


class TestUndoWindow:
    now = datetime(2026, 3, 1, 12, 0, 0)

    def test_inside_window(self):
        assert within_undo_window(self.now - timedelta(seconds=119), self.now, 120)

    def test_window_edge_is_inclusive(self):
        assert within_undo_window(self.now - timedelta(seconds=120), self.now, 120)

    def test_outside_window(self):
        assert not within_undo_window(self.now - timedelta(seconds=121), self.now, 120)

    def test_no_decision(self):
        assert not within_undo_window(None, self.now, 120)

    def test_decision_in_the_future(self):
        assert not within_undo_window(self.now + timedelta(seconds=5), self.now, 120)


class TestBalanceIntegrity:
    def test_consistent(self):
        check = balance_integrity(1000, 500, 200, 1300)
        assert check.expected_balance == 1300.0
        assert check.integrity_ok

    def test_mismatch(self):
        check = balance_integrity(1000, 500, 200, 1250)
        assert check.expected_balance == 1300.0
        assert not check.integrity_ok

    def test_tolerates_float_noise(self):
        assert balance_integrity(0.1, 0.2, 0, 0.3).integrity_ok
