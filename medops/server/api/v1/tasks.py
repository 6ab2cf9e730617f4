"""
Tasks API Endpoints.

Every task in a response carries its due status: expired, due-today,
expiring-soon or normal.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter

from medops.core.models.domain import TaskPriority, TaskStatus
from medops.core.models.io.common import MessageResponse
from medops.core.models.io.tasks import TaskCreate, TaskRead, TaskUpdate
from medops.server.services.deps import CurrentUserDep, TaskServiceDep
from medops.server.services.tasks import to_read

router = APIRouter()


@router.get(
    "",
    response_model=List[TaskRead],
    summary="List Tasks",
    description="Tasks the caller created or is assigned; MD and ADMIN see all tasks.",
    response_description="A list of tasks, soonest due first.",
)
async def list_tasks(
    user: CurrentUserDep,
    service: TaskServiceDep,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    tasks = await service.list_tasks(
        user,
        status=status,
        priority=priority.value if priority else None,
        assigned_to_id=assigned_to,
        start_date=start_date,
        end_date=end_date,
    )
    return [to_read(task) for task in tasks]


@router.get(
    "/pending",
    response_model=List[TaskRead],
    summary="Pending Tasks",
    description="Open tasks assigned to the caller.",
    response_description="A list of pending and in-progress tasks.",
)
async def pending_tasks(user: CurrentUserDep, service: TaskServiceDep):
    return [to_read(task) for task in await service.list_pending(user)]


@router.post(
    "",
    response_model=TaskRead,
    status_code=201,
    summary="Create Task",
    description="Create a task. Only MD or ADMIN may assign it to someone else; the assignee is notified.",
    response_description="The created task.",
    responses={403: {"description": "Not allowed to assign to others"}},
)
async def create_task(payload: TaskCreate, user: CurrentUserDep, service: TaskServiceDep):
    return to_read(await service.create_task(user, payload))


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    summary="Get Task",
    description="Retrieve a task the caller may see.",
    response_description="The task.",
    responses={403: {"description": "Task not visible"}, 404: {"description": "Task not found"}},
)
async def get_task(task_id: str, user: CurrentUserDep, service: TaskServiceDep):
    return to_read(await service.get_task(user, task_id))


@router.patch(
    "/{task_id}",
    response_model=TaskRead,
    summary="Update Task",
    description="Update a task. Completing it records the completion time.",
    response_description="The updated task.",
    responses={403: {"description": "Task not visible"}, 404: {"description": "Task not found"}},
)
async def update_task(task_id: str, payload: TaskUpdate, user: CurrentUserDep, service: TaskServiceDep):
    return to_read(await service.update_task(user, task_id, payload))


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete Task",
    description="Delete a task. Allowed for its creator, MD and ADMIN.",
    response_description="Confirmation message.",
    responses={403: {"description": "Not allowed to delete"}, 404: {"description": "Task not found"}},
)
async def delete_task(task_id: str, user: CurrentUserDep, service: TaskServiceDep):
    await service.delete_task(user, task_id)
    return MessageResponse(message="Task deleted")
