"""API tests for the current user's notifications."""

import pytest
from httpx import AsyncClient

from medops.core.models.domain import NotificationType
from medops.server.services.notifications import NotificationService

pytestmark = pytest.mark.asyncio

V1 = "/api/v1/notifications"


@pytest.fixture
async def recipient(make_user):
    return await make_user("BD")


@pytest.fixture
async def inbox(repos, recipient):
    service = NotificationService(repos)
    created = [
        await service.notify(recipient.id, NotificationType.KYP_SUBMITTED, "KYP submitted", "Lead L-1"),
        await service.notify(recipient.id, NotificationType.IPD_MARKED, "IPD marked", "Lead L-2", link="/leads/2"),
    ]
    await repos.commit()
    return created


async def test_list_and_unread_count(client: AsyncClient, inbox, recipient, auth_headers):
    headers = auth_headers(recipient)

    listed = await client.get(V1, headers=headers)
    count = await client.get(f"{V1}/unread-count", headers=headers)

    assert sorted(n["title"] for n in listed.json()) == ["IPD marked", "KYP submitted"]
    assert all(n["is_read"] is False for n in listed.json())
    assert count.json() == {"count": 2}


async def test_mark_one_read(client: AsyncClient, inbox, recipient, auth_headers):
    headers = auth_headers(recipient)

    response = await client.post(f"{V1}/{inbox[0].id}/read", headers=headers)

    assert response.json()["is_read"] is True
    unread = await client.get(V1, params={"unread_only": True}, headers=headers)
    assert [n["id"] for n in unread.json()] == [inbox[1].id]
    assert (await client.get(f"{V1}/unread-count", headers=headers)).json() == {"count": 1}


async def test_read_all(client: AsyncClient, inbox, recipient, auth_headers):
    headers = auth_headers(recipient)

    first = await client.post(f"{V1}/read-all", headers=headers)
    second = await client.post(f"{V1}/read-all", headers=headers)

    assert first.json() == {"updated": 2}
    assert second.json() == {"updated": 0}


async def test_limit(client: AsyncClient, inbox, recipient, auth_headers):
    response = await client.get(V1, params={"limit": 1}, headers=auth_headers(recipient))
    assert len(response.json()) == 1


async def test_other_users_notification_is_missing(client: AsyncClient, inbox, make_user, auth_headers):
    stranger = auth_headers(await make_user("BD"))

    response = await client.post(f"{V1}/{inbox[0].id}/read", headers=stranger)

    assert response.status_code == 404
    assert (await client.get(V1, headers=stranger)).json() == []
