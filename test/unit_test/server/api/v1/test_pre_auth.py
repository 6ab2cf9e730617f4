"""API tests for insurance decisions on raised pre-auths and the initiate form."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

V1 = "/api/v1"


class TestDecisions:
    async def test_reject_needs_reason_and_keeps_stage(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        url = f"{V1}/pre-auth/{case['kyp_id']}/reject"

        missing = await client.post(url, json={"reason": ""}, headers=driver.insurance)
        assert missing.status_code == 400
        assert missing.json()["detail"] == "Cannot reject pre-auth in status PENDING: rejection reason is required"

        rejected = await client.post(url, json={"reason": "Policy lapsed"}, headers=driver.insurance)
        assert rejected.status_code == 200
        body = rejected.json()
        assert body["approval_status"] == "REJECTED"
        assert body["rejection_reason"] == "Policy lapsed"
        assert body["case_stage"] == "PREAUTH_RAISED"
        assert body["available_actions"] == []

        notes = (await client.get(f"{V1}/notifications", headers=driver.bd)).json()
        assert "PRE_AUTH_REJECTED" in {n["type"] for n in notes}

    async def test_rejected_is_terminal(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        base = f"{V1}/pre-auth/{case['kyp_id']}"
        await client.post(f"{base}/reject", json={"reason": "No cover"}, headers=driver.insurance)

        response = await client.post(f"{base}/temp-approve", headers=driver.insurance)

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Cannot temp-approve pre-auth in status REJECTED: pre-auth already rejected",
            "error_type": "TransitionError",
        }

    async def test_temp_approve_only_from_pending(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        base = f"{V1}/pre-auth/{case['kyp_id']}"
        assert (await client.post(f"{base}/temp-approve", headers=driver.insurance)).status_code == 200

        again = await client.post(f"{base}/temp-approve", headers=driver.insurance)

        expected = "Cannot temp-approve pre-auth in status TEMP_APPROVED: not allowed from TEMP_APPROVED"
        assert again.json()["detail"] == expected

    async def test_form_with_zero_bill_blocks_approval(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        await driver.create_form(case["lead_id"], total_bill_amount=0, copay=10)

        response = await client.post(f"{V1}/pre-auth/{case['kyp_id']}/approve", headers=driver.insurance)

        assert response.status_code == 400
        assert response.json()["error_type"] == "TransitionError"

    async def test_decisions_need_insurance_write(self, client: AsyncClient, driver, make_user, auth_headers):
        case = await driver.to_preauth_raised()
        md_headers = auth_headers(await make_user("MD"))

        response = await client.post(f"{V1}/pre-auth/{case['kyp_id']}/temp-approve", headers=md_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Missing permission: insurance:write"

    async def test_unknown_kyp(self, client: AsyncClient, driver):
        response = await client.post(f"{V1}/pre-auth/missing/temp-approve", headers=driver.insurance)
        assert response.status_code == 404


class TestNewHospitalRequest:
    async def test_decisions_wait_for_hospital_to_be_raised(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised(
            requested_hospital_name=None, is_new_hospital_request=True, new_hospital_name="Fortis"
        )
        base = f"{V1}/pre-auth/{case['kyp_id']}"

        detail = (await client.get(base, headers=driver.insurance)).json()
        assert detail["is_new_hospital_request"] is True
        assert detail["requested_hospital_name"] == "Fortis"
        assert detail["available_actions"] == []

        blocked = await client.post(f"{base}/temp-approve", headers=driver.insurance)
        assert blocked.status_code == 400
        assert "new hospital request must be marked as raised first" in blocked.json()["detail"]

        raised = await client.post(f"{base}/mark-new-hospital-raised", headers=driver.insurance)
        assert raised.status_code == 200
        stamp = raised.json()["new_hospital_request_raised_at"]
        assert stamp is not None
        assert raised.json()["available_actions"] == ["TEMP_APPROVE", "REJECT"]

        repeated = await client.post(f"{base}/mark-new-hospital-raised", headers=driver.insurance)
        assert repeated.json()["new_hospital_request_raised_at"] == stamp

    async def test_mark_raised_on_regular_request(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        response = await client.post(
            f"{V1}/pre-auth/{case['kyp_id']}/mark-new-hospital-raised", headers=driver.insurance
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "This pre-auth is not a new hospital request"

    async def test_new_hospital_needs_a_name(self, client: AsyncClient, driver):
        lead = await driver.create_lead()
        kyp = await driver.submit_kyp(lead["id"])
        await driver.add_suggestions(kyp["id"])
        await driver.submit_detailed(lead["id"])

        response = await client.post(
            f"{V1}/leads/{lead['id']}/raise-preauth", json={"is_new_hospital_request": True}, headers=driver.bd
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "New hospital name is required for a new hospital request"


class TestVisibility:
    async def test_owner_bd_can_view(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        response = await client.get(f"{V1}/pre-auth/{case['kyp_id']}", headers=driver.bd)
        assert response.status_code == 200
        assert response.json()["lead_id"] == case["lead_id"]

    async def test_other_bd_cannot_view(self, client: AsyncClient, driver, make_user, auth_headers):
        case = await driver.to_preauth_raised()
        other = auth_headers(await make_user("BD"))
        response = await client.get(f"{V1}/pre-auth/{case['kyp_id']}", headers=other)
        assert response.status_code == 403


class TestInitiateForm:
    async def test_create_read_update(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        form = await driver.create_form(case["lead_id"], total_bill_amount=90000, copay=None)
        assert form["copay"] is None

        fetched = await client.get(
            f"{V1}/insurance-initiate-form", params={"lead_id": case["lead_id"]}, headers=driver.insurance
        )
        assert fetched.json()["id"] == form["id"]

        updated = await client.patch(
            f"{V1}/insurance-initiate-form/{form['id']}", json={"copay": 5}, headers=driver.insurance
        )
        assert updated.status_code == 200
        assert (updated.json()["copay"], updated.json()["total_bill_amount"]) == (5, 90000)

    async def test_one_form_per_lead(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        await driver.create_form(case["lead_id"])
        response = await client.post(
            f"{V1}/insurance-initiate-form", json={"lead_id": case["lead_id"]}, headers=driver.insurance
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "ConflictError"

    async def test_form_needs_raised_pre_auth(self, client: AsyncClient, driver):
        lead = await driver.create_lead()
        response = await client.post(
            f"{V1}/insurance-initiate-form", json={"lead_id": lead["id"]}, headers=driver.insurance
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "InvalidStateError"

    async def test_form_is_insurance_only(self, client: AsyncClient, driver):
        case = await driver.to_preauth_raised()
        response = await client.post(
            f"{V1}/insurance-initiate-form", json={"lead_id": case["lead_id"]}, headers=driver.bd
        )
        assert response.status_code == 403

    async def test_missing_form(self, client: AsyncClient, driver):
        response = await client.get(
            f"{V1}/insurance-initiate-form", params={"lead_id": "nope"}, headers=driver.insurance
        )
        assert response.status_code == 404
