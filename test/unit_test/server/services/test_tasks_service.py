"""Unit tests for task visibility, assignment and completion."""

from __future__ import annotations

from datetime import timedelta

import pytest

from medops.core.database.base import utc_now_naive
from medops.core.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from medops.core.models.io.tasks import TaskCreate, TaskUpdate
from medops.server.services.tasks import TaskService, to_read

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(repos):
    return TaskService(repos)


@pytest.fixture
async def bd(make_user):
    return await make_user("BD")


async def test_task_defaults_to_creator(service, repos, bd):
    task = await service.create_task(bd, TaskCreate(title="Call patient family"))

    assert task.assigned_to_id == bd.id
    assert task.status == "PENDING"
    assert task.priority == "MEDIUM"
    assert await repos.notifications.unread_count(bd.id) == 0


async def test_only_managers_assign_to_others(service, bd, make_user):
    colleague = await make_user("BD")
    with pytest.raises(PermissionDeniedError):
        await service.create_task(bd, TaskCreate(title="Collect documents", assigned_to_id=colleague.id))


async def test_assignment_notifies_assignee(service, repos, md, bd):
    task = await service.create_task(md, TaskCreate(title="Collect documents", assigned_to_id=bd.id))

    [notification] = await repos.notifications.list_for_user(bd.id)
    assert notification.type == "TASK_ASSIGNED"
    assert notification.related_id == task.id
    assert task.title in notification.message


async def test_inactive_assignee_is_rejected(service, md, make_user):
    gone = await make_user("BD", is_active=False)
    with pytest.raises(ValidationFailedError):
        await service.create_task(md, TaskCreate(title="x", assigned_to_id=gone.id))


async def test_visibility(service, md, bd, make_user):
    mine = await service.create_task(bd, TaskCreate(title="Mine"))
    theirs = await service.create_task(md, TaskCreate(title="For MD"))
    outsider = await make_user("BD")

    assert [t.id for t in await service.list_tasks(bd)] == [mine.id]
    assert {t.id for t in await service.list_tasks(md)} == {mine.id, theirs.id}
    with pytest.raises(PermissionDeniedError):
        await service.get_task(outsider, mine.id)
    with pytest.raises(NotFoundError):
        await service.get_task(md, "missing")


async def test_soonest_due_first_undated_last(service, bd):
    now = utc_now_naive()
    undated = await service.create_task(bd, TaskCreate(title="Someday"))
    later = await service.create_task(bd, TaskCreate(title="Later", due_date=now + timedelta(days=5)))
    sooner = await service.create_task(bd, TaskCreate(title="Sooner", due_date=now + timedelta(days=1)))

    assert [t.id for t in await service.list_tasks(bd)] == [sooner.id, later.id, undated.id]


async def test_complete_and_reopen(service, bd):
    task = await service.create_task(bd, TaskCreate(title="Follow up"))

    done = await service.update_task(bd, task.id, TaskUpdate(status="COMPLETED"))
    assert done.status == "COMPLETED"
    assert done.completed_at is not None
    assert await service.list_pending(bd) == []

    reopened = await service.update_task(bd, task.id, TaskUpdate(status="IN_PROGRESS"))
    assert reopened.completed_at is None
    assert [t.id for t in await service.list_pending(bd)] == [task.id]


async def test_due_status_on_read(service, bd):
    task = await service.create_task(
        bd, TaskCreate(title="Overdue", due_date=utc_now_naive() - timedelta(hours=1), priority="HIGH")
    )
    assert to_read(task).due_status == "expired"

    await service.update_task(bd, task.id, TaskUpdate(status="COMPLETED"))
    assert to_read(task).due_status == "normal"


async def test_only_creator_or_manager_deletes(service, repos, md, bd):
    task = await service.create_task(md, TaskCreate(title="Assigned", assigned_to_id=bd.id))
    with pytest.raises(PermissionDeniedError):
        await service.delete_task(bd, task.id)

    await service.delete_task(md, task.id)
    assert await repos.tasks.get_by_id(task.id) is None
