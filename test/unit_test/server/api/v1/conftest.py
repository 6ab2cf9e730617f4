"""Fixtures for walking a case through the lead workflow over HTTP."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import pytest
from httpx import AsyncClient

V1 = "/api/v1"

ADMISSION = {
    "admission_date": "2026-03-02T00:00:00",
    "admission_time": "09:00",
    "admitting_hospital": "Apollo",
    "hospital_address": "Sarita Vihar, Delhi",
    "surgery_date": "2026-03-03T00:00:00",
    "surgery_time": "11:00",
    "tpa": "Medi Assist",
}


def ok(response, status: int = 200) -> Dict[str, Any]:
    assert response.status_code == status, response.text
    return response.json()


@dataclass
class CaseDriver:
    """Drives one lead through the workflow as its BD and the insurance head."""

    client: AsyncClient
    bd: Dict[str, str]
    insurance: Dict[str, str]

    async def create_lead(self, lead_ref: str = "L-001", patient_name: str = "Ravi Kumar") -> Dict[str, Any]:
        response = await self.client.post(
            f"{V1}/leads", json={"lead_ref": lead_ref, "patient_name": patient_name}, headers=self.bd
        )
        return ok(response, 201)

    async def submit_kyp(self, lead_id: str) -> Dict[str, Any]:
        response = await self.client.post(
            f"{V1}/leads/{lead_id}/kyp", json={"aadhar": "aadhar.pdf", "location": "Delhi"}, headers=self.bd
        )
        return ok(response, 201)

    async def add_suggestions(self, kyp_id: str, hospitals=("Apollo",)) -> Dict[str, Any]:
        payload = {"sum_insured": "5L", "hospitals": [{"hospital_name": name} for name in hospitals]}
        response = await self.client.post(
            f"{V1}/leads/kyp/{kyp_id}/suggestions", json=payload, headers=self.insurance
        )
        return ok(response)

    async def submit_detailed(self, lead_id: str) -> Dict[str, Any]:
        response = await self.client.post(
            f"{V1}/leads/{lead_id}/kyp/detailed", json={"payload": {"policy_no": "P-77"}}, headers=self.bd
        )
        return ok(response)

    async def raise_pre_auth(self, lead_id: str, **overrides) -> Dict[str, Any]:
        payload = {"requested_hospital_name": "Apollo", "requested_room_type": "Private", **overrides}
        response = await self.client.post(f"{V1}/leads/{lead_id}/raise-preauth", json=payload, headers=self.bd)
        return ok(response)

    async def to_preauth_raised(self, lead_ref: str = "L-001", **raise_overrides) -> Dict[str, str]:
        lead = await self.create_lead(lead_ref)
        kyp = await self.submit_kyp(lead["id"])
        await self.add_suggestions(kyp["id"])
        await self.submit_detailed(lead["id"])
        await self.raise_pre_auth(lead["id"], **raise_overrides)
        return {"lead_id": lead["id"], "kyp_id": kyp["id"]}

    async def create_form(self, lead_id: str, total_bill_amount: float = 120000, copay: Optional[float] = 10):
        payload = {"lead_id": lead_id, "total_bill_amount": total_bill_amount, "copay": copay}
        response = await self.client.post(f"{V1}/insurance-initiate-form", json=payload, headers=self.insurance)
        return ok(response, 201)

    async def to_preauth_complete(self, lead_ref: str = "L-001") -> Dict[str, str]:
        case = await self.to_preauth_raised(lead_ref)
        await self.create_form(case["lead_id"])
        ok(await self.client.post(f"{V1}/pre-auth/{case['kyp_id']}/approve", headers=self.insurance))
        return case

    async def to_discharged(self, lead_ref: str = "L-001") -> Dict[str, str]:
        case = await self.to_preauth_complete(lead_ref)
        lead_id = case["lead_id"]
        ok(await self.client.post(f"{V1}/leads/{lead_id}/initiate", json=ADMISSION, headers=self.bd), 201)
        ok(await self.client.post(f"{V1}/leads/{lead_id}/discharge", headers=self.bd))
        return case


@pytest.fixture
async def bd_user(make_user):
    return await make_user("BD", name="Asha BD")


@pytest.fixture
async def insurance_user(make_user):
    return await make_user("INSURANCE_HEAD", name="Ira Insurance")


@pytest.fixture
def driver(client: AsyncClient, bd_user, insurance_user, auth_headers) -> CaseDriver:
    return CaseDriver(client=client, bd=auth_headers(bd_user), insurance=auth_headers(insurance_user))


@pytest.fixture
def admission() -> Dict[str, str]:
    return dict(ADMISSION)
