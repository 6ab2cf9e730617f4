"""
Service for personal and assigned tasks.
"""

from __future__ import annotations

from typing import List, Optional

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.tasks import Task
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from medops.core.logging_config import get_logger
from medops.core.models.domain import NotificationType, TaskStatus, UserRole
from medops.core.models.io.tasks import TaskCreate, TaskRead, TaskUpdate
from medops.core.rules.tasks import due_status

from .notifications import NotificationService

logger = get_logger(__name__)

# Roles that see every task and may assign tasks to others
TASK_MANAGER_ROLES = {UserRole.MD.value, UserRole.ADMIN.value}


def to_read(task: Task) -> TaskRead:
    """Task response with its due status as of now."""
    read = TaskRead.model_validate(task)
    read.due_status = due_status(task.due_date, task.status, utc_now_naive())
    return read


class TaskService:
    """Service for creating, listing and completing tasks."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos
        self.notifications = NotificationService(repos)

    @staticmethod
    def _is_manager(user: User) -> bool:
        return user.role in TASK_MANAGER_ROLES

    def _ensure_visible(self, user: User, task: Task) -> None:
        if not self._is_manager(user) and user.id not in (task.created_by_id, task.assigned_to_id):
            raise PermissionDeniedError("You do not have access to this task")

    async def _resolve_assignee(self, user: User, assigned_to_id: Optional[str]) -> str:
        if not assigned_to_id or assigned_to_id == user.id:
            return user.id
        if not self._is_manager(user):
            raise PermissionDeniedError("Only MD or ADMIN can assign tasks to other users")
        assignee = await self.repos.users.get_by_id(assigned_to_id)
        if assignee is None or not assignee.is_active:
            raise ValidationFailedError(f"Assignee not found or inactive: '{assigned_to_id}'")
        return assignee.id

    async def _notify_assignee(self, user: User, task: Task) -> None:
        if task.assigned_to_id != user.id:
            await self.notifications.notify(
                task.assigned_to_id,
                NotificationType.TASK_ASSIGNED,
                "New task assigned",
                f"{user.name} assigned you: {task.title}",
                link=f"/tasks/{task.id}",
                related_id=task.id,
            )

    async def get_task(self, user: User, task_id: str) -> Task:
        task = await self.repos.tasks.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        self._ensure_visible(user, task)
        return task

    async def list_tasks(
        self,
        user: User,
        status: Optional[TaskStatus] = None,
        priority: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        start_date=None,
        end_date=None,
    ) -> List[Task]:
        return await self.repos.tasks.search(
            visible_to=None if self._is_manager(user) else user.id,
            statuses=[TaskStatus(status).value] if status else None,
            priority=priority,
            assigned_to_id=assigned_to_id,
            start_date=start_date,
            end_date=end_date,
        )

    async def list_pending(self, user: User) -> List[Task]:
        """Open tasks assigned to the user."""
        return await self.repos.tasks.search(
            statuses=[TaskStatus.PENDING.value, TaskStatus.IN_PROGRESS.value], assigned_to_id=user.id
        )

    async def create_task(self, user: User, data: TaskCreate) -> Task:
        task = Task(
            title=data.title,
            description=data.description,
            due_date=data.due_date.replace(tzinfo=None) if data.due_date else None,
            priority=data.priority.value,
            created_by_id=user.id,
            assigned_to_id=await self._resolve_assignee(user, data.assigned_to_id),
        )
        await self.repos.tasks.stage(task)
        await self._notify_assignee(user, task)
        await self.repos.commit()
        logger.info(f"Task {task.id} created by {user.id} for {task.assigned_to_id}")
        return task

    async def update_task(self, user: User, task_id: str, data: TaskUpdate) -> Task:
        task = await self.get_task(user, task_id)
        changes = data.model_dump(exclude_unset=True)
        reassigned = False
        if "assigned_to_id" in changes:
            assignee = await self._resolve_assignee(user, changes.pop("assigned_to_id"))
            reassigned = assignee != task.assigned_to_id
            task.assigned_to_id = assignee
        if changes.get("status") is not None:
            status = TaskStatus(changes.pop("status"))
            if status == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED.value:
                task.completed_at = utc_now_naive()
            elif status != TaskStatus.COMPLETED:
                task.completed_at = None
            task.status = status.value
        if changes.get("priority") is not None:
            changes["priority"] = changes["priority"].value
        if changes.get("due_date") is not None:
            changes["due_date"] = changes["due_date"].replace(tzinfo=None)
        for key, value in changes.items():
            setattr(task, key, value)

        await self.repos.tasks.stage(task)
        if reassigned:
            await self._notify_assignee(user, task)
        await self.repos.commit()
        return task

    async def delete_task(self, user: User, task_id: str) -> None:
        task = await self.get_task(user, task_id)
        if not self._is_manager(user) and task.created_by_id != user.id:
            raise PermissionDeniedError("Only the creator, MD or ADMIN can delete a task")
        await self.repos.tasks.delete(task.id)
        logger.info(f"Task {task.id} deleted by {user.id}")
