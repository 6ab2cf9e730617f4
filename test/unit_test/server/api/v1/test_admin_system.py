"""API tests for the MD system observability endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.request_logs import RequestLog
from medops.server.core.constant import VERSION

pytestmark = pytest.mark.asyncio

V1 = "/api/v1/admin/system"


@pytest.fixture
async def md_headers(make_user, auth_headers):
    return auth_headers(await make_user("MD"))


@pytest.fixture
async def request_logs(session):
    now = utc_now_naive()
    rows = [
        RequestLog(method="GET", path="/api/v1/leads", status_code=200, duration_ms=4.2, created_at=now),
        RequestLog(
            method="POST",
            path="/api/v1/finance/ledger",
            status_code=500,
            duration_ms=12.0,
            error="boom",
            created_at=now - timedelta(minutes=5),
        ),
        RequestLog(
            method="GET",
            path="/api/v1/leads/abc",
            status_code=404,
            duration_ms=1.1,
            created_at=now - timedelta(hours=30),
        ),
    ]
    for row in rows:
        session.add(row)
    await session.commit()
    return rows


async def test_health(client: AsyncClient, md_headers):
    response = await client.get(f"{V1}/health", headers=md_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == VERSION
    assert body["database"]["status"] == "healthy"
    assert body["uptime"].endswith("m")


async def test_metrics_shape(client: AsyncClient, md_headers):
    body = (await client.get(f"{V1}/metrics", headers=md_headers)).json()

    assert body["cpu"]["cores"] >= 1
    assert body["disk"]["total"] > 0
    assert set(body["process"]) == {"pid", "python_version"}


async def test_logs_filters(client: AsyncClient, md_headers, request_logs):
    by_path = await client.get(f"{V1}/logs", params={"path": "/leads"}, headers=md_headers)
    by_status = await client.get(f"{V1}/logs", params={"status_code": 500}, headers=md_headers)
    paged = await client.get(f"{V1}/logs", params={"path": "/api/v1/", "limit": 1, "page": 2}, headers=md_headers)

    assert [r["path"] for r in by_path.json()["data"]] == ["/api/v1/leads", "/api/v1/leads/abc"]
    assert [r["error"] for r in by_status.json()["data"]] == ["boom"]
    assert len(paged.json()["data"]) == 1
    assert paged.json()["pagination"]["page"] == 2


async def test_recent_errors(client: AsyncClient, md_headers, request_logs):
    body = (await client.get(f"{V1}/errors", params={"hours": 1}, headers=md_headers)).json()

    assert body["hours"] == 1
    assert body["total"] == 1
    assert [(g["path"], g["count"]) for g in body["groups"]] == [("/api/v1/finance/ledger", 1)]


@pytest.mark.parametrize("path", ["/health", "/metrics", "/logs", "/errors"])
async def test_md_only(client: AsyncClient, make_user, auth_headers, path):
    response = await client.get(f"{V1}{path}", headers=auth_headers(await make_user("FINANCE_HEAD")))
    assert response.status_code == 403


async def test_requires_token(client: AsyncClient):
    response = await client.get(f"{V1}/health")
    assert response.status_code == 401
