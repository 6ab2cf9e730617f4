"""API tests for finance masters, the ledger and the finance summary."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

V1 = "/api/v1/finance"


@pytest.fixture
async def finance_headers(make_user, auth_headers):
    return auth_headers(await make_user("FINANCE_HEAD"))


@pytest.fixture
async def md_headers(make_user, auth_headers):
    return auth_headers(await make_user("MD"))


@pytest.fixture
async def masters(client: AsyncClient, finance_headers):
    async def create(path, payload):
        response = await client.post(f"{V1}/{path}", json=payload, headers=finance_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return {
        "party": await create("parties", {"name": "City Hospital", "party_type": "VENDOR"}),
        "head": await create("heads", {"name": "Hospital payouts"}),
        "payment_type": await create("payment-types", {"name": "NEFT"}),
        "cash": await create("payment-modes", {"name": "Cash", "opening_balance": 1000}),
        "bank": await create("payment-modes", {"name": "Bank", "opening_balance": 5000}),
    }


def _entry(masters, transaction_type, date="2026-02-10T11:30:00", **amounts):
    return {
        "transaction_type": transaction_type,
        "transaction_date": date,
        "description": f"{transaction_type.lower()} entry",
        "party_id": masters["party"]["id"],
        "head_id": masters["head"]["id"],
        "payment_type_id": masters["payment_type"]["id"],
        **amounts,
    }


async def _balance(client: AsyncClient, headers, mode) -> float:
    response = await client.get(f"{V1}/payment-modes/{mode['id']}", headers=headers)
    return response.json()["current_balance"]


class TestMasters:
    async def test_payment_mode_starts_at_opening_balance(self, masters):
        assert masters["cash"]["current_balance"] == masters["cash"]["opening_balance"] == 1000

    async def test_negative_opening_balance(self, client: AsyncClient, finance_headers):
        response = await client.post(
            f"{V1}/payment-modes", json={"name": "Petty", "opening_balance": -5}, headers=finance_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Opening balance cannot be negative"

    async def test_balances_are_not_editable(self, client: AsyncClient, masters, finance_headers):
        url = f"{V1}/payment-modes/{masters['cash']['id']}"
        opening = await client.patch(url, json={"opening_balance": 10}, headers=finance_headers)
        current = await client.patch(url, json={"current_balance": 10}, headers=finance_headers)
        renamed = await client.patch(url, json={"name": "Cash drawer"}, headers=finance_headers)

        assert opening.json()["detail"] == "Opening balance cannot be changed after creation"
        assert current.json()["detail"] == "Current balance can only change through ledger entries"
        assert renamed.json()["name"] == "Cash drawer"

    async def test_unique_names(self, client: AsyncClient, masters, finance_headers):
        duplicate = await client.post(f"{V1}/heads", json={"name": "Hospital payouts"}, headers=finance_headers)
        same_party = await client.post(f"{V1}/parties", json={"name": "City Hospital"}, headers=finance_headers)

        assert duplicate.status_code == 400
        assert duplicate.json()["detail"] == "Head with name 'Hospital payouts' already exists"
        assert same_party.status_code == 201

    async def test_deactivate_and_active_only(self, client: AsyncClient, masters, finance_headers):
        deleted = await client.delete(f"{V1}/heads/{masters['head']['id']}", headers=finance_headers)
        assert deleted.json()["is_active"] is False

        active = await client.get(f"{V1}/heads", params={"active_only": True}, headers=finance_headers)
        everything = await client.get(f"{V1}/heads", headers=finance_headers)
        assert active.json() == []
        assert len(everything.json()) == 1

    async def test_inactive_master_is_refused_by_ledger(self, client: AsyncClient, masters, finance_headers):
        await client.delete(f"{V1}/parties/{masters['party']['id']}", headers=finance_headers)
        response = await client.post(
            f"{V1}/ledger",
            json=_entry(masters, "CREDIT", payment_mode_id=masters["cash"]["id"], received_amount=10),
            headers=finance_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Party not found or inactive")

    async def test_md_reads_but_cannot_write_masters(self, client: AsyncClient, masters, md_headers):
        assert (await client.get(f"{V1}/parties", headers=md_headers)).status_code == 200
        response = await client.post(f"{V1}/heads", json={"name": "Rent"}, headers=md_headers)
        assert response.status_code == 403

    async def test_unknown_master(self, client: AsyncClient, finance_headers):
        response = await client.get(f"{V1}/payment-types/nope", headers=finance_headers)
        assert response.status_code == 404


class TestLedger:
    async def test_credit_moves_balance_at_once(self, client: AsyncClient, masters, finance_headers):
        response = await client.post(
            f"{V1}/ledger",
            json=_entry(masters, "CREDIT", payment_mode_id=masters["cash"]["id"], received_amount=250),
            headers=finance_headers,
        )
        assert response.status_code == 201
        entry = response.json()
        assert (entry["serial_number"], entry["status"], entry["current_balance"]) == ("CR-0001", "APPROVED", 1250)
        assert await _balance(client, finance_headers, masters["cash"]) == 1250

    async def test_debit_waits_for_approval(self, client: AsyncClient, masters, finance_headers, md_headers):
        bank = masters["bank"]["id"]
        payload = _entry(masters, "DEBIT", payment_mode_id=bank, payment_amount=900, component_a=600, component_b=300)
        entry = (await client.post(f"{V1}/ledger", json=payload, headers=finance_headers)).json()
        assert (entry["serial_number"], entry["status"]) == ("DR-0001", "PENDING")
        assert await _balance(client, finance_headers, masters["bank"]) == 5000

        forbidden = await client.post(f"{V1}/ledger/{entry['id']}/approve", headers=finance_headers)
        assert forbidden.status_code == 403

        approved = await client.post(f"{V1}/ledger/{entry['id']}/approve", headers=md_headers)
        assert approved.json()["status"] == "APPROVED"
        assert await _balance(client, finance_headers, masters["bank"]) == 4100

        detail = (await client.get(f"{V1}/ledger/{entry['id']}", headers=finance_headers)).json()
        assert [a["action"] for a in detail["audit_trail"]] == ["CREATED", "APPROVED"]

    async def test_debit_components_must_add_up(self, client: AsyncClient, masters, finance_headers):
        bank = masters["bank"]["id"]
        payload = _entry(masters, "DEBIT", payment_mode_id=bank, payment_amount=900, component_a=100, component_b=1)
        response = await client.post(f"{V1}/ledger", json=payload, headers=finance_headers)
        assert response.status_code == 400

    async def test_md_cannot_create_entries(self, client: AsyncClient, masters, md_headers):
        payload = _entry(masters, "CREDIT", payment_mode_id=masters["cash"]["id"], received_amount=10)
        response = await client.post(f"{V1}/ledger", json=payload, headers=md_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Missing permission: finance:write"

    async def test_transfer_and_listing(self, client: AsyncClient, masters, finance_headers):
        transfer = _entry(
            masters,
            "SELF_TRANSFER",
            date="2026-02-12T09:00:00",
            from_payment_mode_id=masters["bank"]["id"],
            to_payment_mode_id=masters["cash"]["id"],
            transfer_amount=1000,
        )
        credit = _entry(masters, "CREDIT", payment_mode_id=masters["cash"]["id"], received_amount=50)
        assert (await client.post(f"{V1}/ledger", json=transfer, headers=finance_headers)).status_code == 201
        assert (await client.post(f"{V1}/ledger", json=credit, headers=finance_headers)).status_code == 201

        everything = (await client.get(f"{V1}/ledger", headers=finance_headers)).json()
        assert [e["transaction_type"] for e in everything["data"]] == ["SELF_TRANSFER", "CREDIT"]
        assert everything["pagination"]["total"] == 2

        by_bank = await client.get(
            f"{V1}/ledger", params={"payment_mode_id": masters["bank"]["id"]}, headers=finance_headers
        )
        assert [e["serial_number"] for e in by_bank.json()["data"]] == ["ST-0001"]
        by_serial = await client.get(f"{V1}/ledger", params={"search": "CR-0001"}, headers=finance_headers)
        assert by_serial.json()["pagination"]["total"] == 1

        assert await _balance(client, finance_headers, masters["bank"]) == 4000
        assert await _balance(client, finance_headers, masters["cash"]) == 2050

    async def test_bulk_reject_needs_reason(self, client: AsyncClient, masters, finance_headers, md_headers):
        payload = _entry(masters, "DEBIT", payment_mode_id=masters["cash"]["id"], payment_amount=10, component_a=10)
        ids = [(await client.post(f"{V1}/ledger", json=payload, headers=finance_headers)).json()["id"] for _ in "ab"]

        missing = await client.post(
            f"{V1}/ledger/bulk-approve", json={"ids": ids, "action": "reject"}, headers=md_headers
        )
        assert missing.status_code == 400

        done = await client.post(
            f"{V1}/ledger/bulk-approve",
            json={"ids": ids, "action": "reject", "rejection_reason": "Duplicate bills"},
            headers=md_headers,
        )
        assert done.json() == {"approved": 0, "rejected": 2, "failed": 0, "errors": []}

    async def test_undo_and_delete(self, client: AsyncClient, masters, finance_headers, md_headers):
        payload = _entry(masters, "DEBIT", payment_mode_id=masters["cash"]["id"], payment_amount=300, component_a=300)
        entry = (await client.post(f"{V1}/ledger", json=payload, headers=finance_headers)).json()
        await client.post(f"{V1}/ledger/{entry['id']}/approve", headers=md_headers)
        assert await _balance(client, finance_headers, masters["cash"]) == 700

        undone = await client.post(f"{V1}/ledger/{entry['id']}/undo", headers=md_headers)
        assert undone.json()["status"] == "PENDING"
        assert await _balance(client, finance_headers, masters["cash"]) == 1000

        await client.post(f"{V1}/ledger/{entry['id']}/approve", headers=md_headers)
        deleted = await client.delete(
            f"{V1}/ledger/{entry['id']}", params={"reason": "Entered twice"}, headers=md_headers
        )
        assert deleted.status_code == 200
        assert await _balance(client, finance_headers, masters["cash"]) == 1000
        assert (await client.get(f"{V1}/ledger", headers=finance_headers)).json()["data"] == []

    async def test_edit_request_round_trip(self, client: AsyncClient, masters, finance_headers, md_headers):
        credit = _entry(masters, "CREDIT", payment_mode_id=masters["cash"]["id"], received_amount=500)
        entry = (await client.post(f"{V1}/ledger", json=credit, headers=finance_headers)).json()

        requested = await client.post(
            f"{V1}/ledger/{entry['id']}/request-edit",
            json={"reason": "Typo in amount", "changes": {"received_amount": 450}},
            headers=finance_headers,
        )
        assert requested.json()["edit_request_status"] == "PENDING"

        approved = await client.post(
            f"{V1}/ledger/{entry['id']}/approve-edit", json={"reason": "Checked the receipt"}, headers=md_headers
        )
        assert approved.json()["received_amount"] == 450
        assert approved.json()["edit_count"] == 1
        assert await _balance(client, finance_headers, masters["cash"]) == 1450

    async def test_unknown_entry(self, client: AsyncClient, finance_headers):
        response = await client.get(f"{V1}/ledger/nope", headers=finance_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Ledger entry not found: 'nope'"


class TestSummary:
    async def test_summary(self, client: AsyncClient, masters, finance_headers, md_headers):
        credit = _entry(masters, "CREDIT", payment_mode_id=masters["cash"]["id"], received_amount=400)
        debit = _entry(masters, "DEBIT", payment_mode_id=masters["bank"]["id"], payment_amount=900, component_a=900)
        await client.post(f"{V1}/ledger", json=credit, headers=finance_headers)
        entry = (await client.post(f"{V1}/ledger", json=debit, headers=finance_headers)).json()
        await client.post(f"{V1}/ledger/{entry['id']}/approve", headers=md_headers)

        summary = (await client.get(f"{V1}/reports/summary", headers=md_headers)).json()

        assert (summary["total_credits"], summary["total_debits"], summary["pending_count"]) == (400, 900, 0)
        modes = {m["name"]: m for m in summary["payment_modes"]}
        assert modes["Cash"]["current_balance"] == 1400
        assert modes["Bank"]["current_balance"] == 4100
        assert all(m["integrity_ok"] for m in summary["payment_modes"])
        assert summary["heads"] == [{"head_id": masters["head"]["id"], "name": "Hospital payouts", "total_debits": 900}]

    async def test_summary_needs_finance_read(self, client: AsyncClient, make_user, auth_headers):
        headers = auth_headers(await make_user("BD"))
        assert (await client.get(f"{V1}/reports/summary", headers=headers)).status_code == 403
