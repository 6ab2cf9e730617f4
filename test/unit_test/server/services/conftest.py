"""Fixtures shared by the service tests."""

from __future__ import annotations

import pytest

from medops.core.database.entities.finance import Head, Party, PaymentMode, PaymentType


@pytest.fixture
async def masters(session):
    """A party, head, payment type and two payment modes with opening balances."""
    items = {
        "party": Party(name="City Hospital", party_type="VENDOR"),
        "head": Head(name="Hospital payouts"),
        "payment_type": PaymentType(name="NEFT"),
        "cash": PaymentMode(name="Cash", opening_balance=1000, current_balance=1000),
        "bank": PaymentMode(name="Bank", opening_balance=5000, current_balance=5000),
    }
    for item in items.values():
        session.add(item)
    await session.commit()
    return items


@pytest.fixture
async def finance_head(make_user):
    return await make_user("FINANCE_HEAD")


@pytest.fixture
async def md(make_user):
    return await make_user("MD")
