"""API tests for personal and assigned tasks."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from medops.core.database.base import utc_now_naive

pytestmark = pytest.mark.asyncio

V1 = "/api/v1/tasks"


@pytest.fixture
async def md(make_user):
    return await make_user("MD", name="Dr. Rao")


@pytest.fixture
async def bd(make_user):
    return await make_user("BD", name="Asha")


async def _create(client: AsyncClient, headers, **payload):
    payload.setdefault("title", "Call the TPA desk")
    response = await client.post(V1, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:
    async def test_creator_is_default_assignee(self, client: AsyncClient, bd, auth_headers):
        task = await _create(client, auth_headers(bd))

        assert task["assigned_to_id"] == task["created_by_id"] == bd.id
        assert (task["status"], task["priority"]) == ("PENDING", "MEDIUM")
        assert task["due_status"] == "normal"

    async def test_blank_title_rejected(self, client: AsyncClient, bd, auth_headers):
        response = await client.post(V1, json={"title": ""}, headers=auth_headers(bd))
        assert response.status_code == 422

    async def test_only_managers_assign_to_others(self, client: AsyncClient, bd, md, auth_headers):
        response = await client.post(V1, json={"title": "Review", "assigned_to_id": md.id}, headers=auth_headers(bd))

        assert response.status_code == 403
        assert response.json()["detail"] == "Only MD or ADMIN can assign tasks to other users"

    async def test_assignment_notifies_assignee(self, client: AsyncClient, bd, md, auth_headers):
        task = await _create(client, auth_headers(md), assigned_to_id=bd.id)

        notes = (await client.get("/api/v1/notifications", headers=auth_headers(bd))).json()
        assert [(n["type"], n["related_id"]) for n in notes] == [("TASK_ASSIGNED", task["id"])]
        assert notes[0]["message"] == "Dr. Rao assigned you: Call the TPA desk"

    async def test_unknown_assignee(self, client: AsyncClient, md, auth_headers):
        response = await client.post(V1, json={"title": "X", "assigned_to_id": "ghost"}, headers=auth_headers(md))
        assert response.status_code == 400
        assert response.json()["detail"] == "Assignee not found or inactive: 'ghost'"

    async def test_overdue_task_is_expired(self, client: AsyncClient, bd, auth_headers):
        yesterday = (utc_now_naive() - timedelta(days=1)).isoformat()
        task = await _create(client, auth_headers(bd), due_date=yesterday)
        assert task["due_status"] == "expired"


class TestVisibility:
    async def test_tasks_scoped_to_creator_and_assignee(self, client: AsyncClient, bd, md, make_user, auth_headers):
        assigned = await _create(client, auth_headers(md), title="Assigned", assigned_to_id=bd.id)
        await _create(client, auth_headers(md), title="MD only")
        outsider = await make_user("BD")

        mine = await client.get(V1, headers=auth_headers(bd))
        everything = await client.get(V1, headers=auth_headers(md))
        peek = await client.get(f"{V1}/{assigned['id']}", headers=auth_headers(outsider))

        assert [t["title"] for t in mine.json()] == ["Assigned"]
        assert sorted(t["title"] for t in everything.json()) == ["Assigned", "MD only"]
        assert peek.status_code == 403

    async def test_pending_lists_open_assigned_tasks(self, client: AsyncClient, bd, auth_headers):
        headers = auth_headers(bd)
        open_task = await _create(client, headers, title="Open")
        done = await _create(client, headers, title="Done")
        await client.patch(f"{V1}/{done['id']}", json={"status": "COMPLETED"}, headers=headers)

        pending = await client.get(f"{V1}/pending", headers=headers)

        assert [t["id"] for t in pending.json()] == [open_task["id"]]

    async def test_filter_by_priority(self, client: AsyncClient, bd, auth_headers):
        headers = auth_headers(bd)
        await _create(client, headers, title="Low", priority="LOW")
        await _create(client, headers, title="Urgent", priority="URGENT")

        response = await client.get(V1, params={"priority": "URGENT"}, headers=headers)

        assert [t["title"] for t in response.json()] == ["Urgent"]

    async def test_unknown_task(self, client: AsyncClient, bd, auth_headers):
        response = await client.get(f"{V1}/missing", headers=auth_headers(bd))
        assert response.status_code == 404


class TestUpdate:
    async def test_complete_then_reopen(self, client: AsyncClient, bd, auth_headers):
        headers = auth_headers(bd)
        task = await _create(client, headers)

        completed = await client.patch(f"{V1}/{task['id']}", json={"status": "COMPLETED"}, headers=headers)
        assert completed.json()["completed_at"] is not None

        reopened = await client.patch(f"{V1}/{task['id']}", json={"status": "IN_PROGRESS"}, headers=headers)
        assert reopened.json()["status"] == "IN_PROGRESS"
        assert reopened.json()["completed_at"] is None

    async def test_reassignment_by_bd_refused(self, client: AsyncClient, bd, md, auth_headers):
        task = await _create(client, auth_headers(bd))
        response = await client.patch(
            f"{V1}/{task['id']}", json={"assigned_to_id": md.id}, headers=auth_headers(bd)
        )
        assert response.status_code == 403


class TestDelete:
    async def test_assignee_cannot_delete(self, client: AsyncClient, bd, md, auth_headers):
        task = await _create(client, auth_headers(md), assigned_to_id=bd.id)

        response = await client.delete(f"{V1}/{task['id']}", headers=auth_headers(bd))

        assert response.status_code == 403
        assert response.json()["detail"] == "Only the creator, MD or ADMIN can delete a task"

    async def test_creator_deletes(self, client: AsyncClient, bd, auth_headers):
        headers = auth_headers(bd)
        task = await _create(client, headers)

        response = await client.delete(f"{V1}/{task['id']}", headers=headers)

        assert response.json() == {"message": "Task deleted"}
        assert (await client.get(f"{V1}/{task['id']}", headers=headers)).status_code == 404
