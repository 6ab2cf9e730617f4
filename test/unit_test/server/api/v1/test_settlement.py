"""API tests for the discharge sheet and the P/L record of a case."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

V1 = "/api/v1"


@pytest.fixture
async def pl_headers(make_user, auth_headers):
    return auth_headers(await make_user("PL_HEAD"))


@pytest.fixture
async def discharged(driver):
    return await driver.to_discharged()


async def _sheet(client: AsyncClient, driver, lead_id: str, **amounts):
    payload = {"lead_id": lead_id, **amounts}
    response = await client.post(f"{V1}/discharge-sheet", json=payload, headers=driver.insurance)
    assert response.status_code == 201, response.text
    return response.json()


class TestDischargeSheet:
    async def test_final_approved_amount_drives_net(self, client: AsyncClient, driver, discharged):
        sheet = await _sheet(
            client,
            driver,
            discharged["lead_id"],
            room_rent_amount=40000,
            implants_amount=60000,
            final_approved_amount=90000,
            deduction_amount=2000,
            waived_off_amount=1000,
            hospital_share_amount=50000,
            mediend_share_pct=10,
        )
        assert sheet["total_bill_amount"] == 100000
        assert sheet["total_deductions"] == 3000
        assert sheet["net_settlement_amount"] == 87000
        assert sheet["hospital_share_amount"] == 50000
        assert sheet["mediend_share_amount"] == 8700

    async def test_update_recomputes(self, client: AsyncClient, driver, discharged):
        sheet = await _sheet(client, driver, discharged["lead_id"], pharmacy_amount=10000, mediend_share_pct=20)

        response = await client.patch(
            f"{V1}/discharge-sheet/{sheet['id']}", json={"pharmacy_amount": 15000}, headers=driver.insurance
        )

        assert response.status_code == 200
        assert response.json()["net_settlement_amount"] == 15000
        assert response.json()["mediend_share_amount"] == 3000

    async def test_one_sheet_per_lead(self, client: AsyncClient, driver, discharged):
        await _sheet(client, driver, discharged["lead_id"])
        response = await client.post(
            f"{V1}/discharge-sheet", json={"lead_id": discharged["lead_id"]}, headers=driver.insurance
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "ConflictError"

    async def test_sheet_needs_admitted_case(self, client: AsyncClient, driver):
        lead = await driver.create_lead()
        response = await client.post(f"{V1}/discharge-sheet", json={"lead_id": lead["id"]}, headers=driver.insurance)
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Cannot create a discharge sheet. Current stage: NEW_LEAD.")

    async def test_list_and_get(self, client: AsyncClient, driver, discharged):
        sheet = await _sheet(client, driver, discharged["lead_id"])

        listed = await client.get(
            f"{V1}/discharge-sheet", params={"lead_id": discharged["lead_id"]}, headers=driver.insurance
        )
        fetched = await client.get(f"{V1}/discharge-sheet/{sheet['id']}", headers=driver.insurance)
        missing = await client.get(f"{V1}/discharge-sheet/nope", headers=driver.insurance)

        assert [s["id"] for s in listed.json()] == [sheet["id"]]
        assert fetched.json()["lead_id"] == discharged["lead_id"]
        assert missing.status_code == 404

    async def test_bd_cannot_write_sheets(self, client: AsyncClient, driver, discharged):
        response = await client.post(
            f"{V1}/discharge-sheet", json={"lead_id": discharged["lead_id"]}, headers=driver.bd
        )
        assert response.status_code == 403


class TestPLRecord:
    @pytest.fixture
    async def record(self, client: AsyncClient, driver, discharged, pl_headers):
        sheet = await _sheet(
            client, driver, discharged["lead_id"], room_rent_amount=100000, hospital_share_pct=70, mediend_share_pct=25
        )
        response = await client.post(f"{V1}/discharge-sheet/{sheet['id']}/create-pnl", headers=pl_headers)
        assert response.status_code == 201
        return response.json()

    async def test_opened_from_sheet(self, record):
        assert record["bill_amount"] == 100000
        assert (record["hospital_share_amount"], record["mediend_share_amount"]) == (70000, 25000)
        assert record["net_profit"] == record["final_profit"] == 25000
        assert (record["hospital_payout_status"], record["doctor_payout_status"]) == ("PENDING", "PENDING")

    async def test_created_once(self, client: AsyncClient, record, pl_headers):
        url = f"{V1}/discharge-sheet/{record['discharge_sheet_id']}/create-pnl"
        response = await client.post(url, headers=pl_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "P/L record already exists for this lead"

    async def test_costs_and_final_profit_override(self, client: AsyncClient, record, pl_headers):
        response = await client.patch(
            f"{V1}/pl/{record['lead_id']}",
            json={"referral_amount": 2500, "implant_cost": 500, "final_profit": 21000},
            headers=pl_headers,
        )
        assert response.json()["net_profit"] == 22000
        assert response.json()["final_profit"] == 21000
        assert response.json()["closed_at"] is None

    async def test_final_profit_override_survives_later_updates(self, client: AsyncClient, record, pl_headers):
        url = f"{V1}/pl/{record['lead_id']}"
        await client.patch(url, json={"final_profit": 555}, headers=pl_headers)

        paid = await client.patch(url, json={"hospital_payout_status": "PAID"}, headers=pl_headers)
        assert paid.json()["final_profit"] == 555

        cleared = await client.patch(url, json={"final_profit": None}, headers=pl_headers)
        assert cleared.json()["final_profit"] == cleared.json()["net_profit"] == 25000

    async def test_reopened_when_payout_reverts(self, client: AsyncClient, record, pl_headers, driver):
        url = f"{V1}/pl/{record['lead_id']}"
        paid = {"hospital_payout_status": "PAID", "doctor_payout_status": "PAID"}
        assert (await client.patch(url, json=paid, headers=pl_headers)).json()["closed_at"] is not None

        reopened = await client.patch(url, json={"doctor_payout_status": "PENDING"}, headers=pl_headers)

        assert reopened.json()["closed_at"] is None

    async def test_list_filters_by_payout(self, client: AsyncClient, record, pl_headers):
        await client.patch(f"{V1}/pl/{record['lead_id']}", json={"hospital_payout_status": "PAID"}, headers=pl_headers)

        paid = await client.get(f"{V1}/pl", params={"hospital_payout_status": "PAID"}, headers=pl_headers)
        pending = await client.get(f"{V1}/pl", params={"hospital_payout_status": "PENDING"}, headers=pl_headers)

        assert paid.json()["total"] == 1
        assert paid.json()["data"][0]["lead_id"] == record["lead_id"]
        assert pending.json() == {"data": [], "total": 0}

    async def test_get_and_missing(self, client: AsyncClient, record, pl_headers):
        assert (await client.get(f"{V1}/pl/{record['lead_id']}", headers=pl_headers)).json()["id"] == record["id"]
        missing = await client.get(f"{V1}/pl/unknown", headers=pl_headers)
        assert missing.status_code == 404
        assert missing.json()["detail"] == "P/L record for lead not found: 'unknown'"

    async def test_bd_cannot_read_pl(self, client: AsyncClient, record, driver):
        assert (await client.get(f"{V1}/pl", headers=driver.bd)).status_code == 403
