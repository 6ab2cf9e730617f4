"""
Service for in-app notifications.

Workflow services call ``notify`` and ``notify_role`` while building their
unit of work; the notification rows are committed together with the change
that caused them.
"""

from __future__ import annotations

from typing import List, Optional

from medops.core.database.entities.notifications import Notification
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import NotFoundError
from medops.core.logging_config import get_logger
from medops.core.models.domain import NotificationType, UserRole

logger = get_logger(__name__)


class NotificationService:
    """Service for creating and reading notifications."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def notify(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None,
        related_id: Optional[str] = None,
    ) -> Notification:
        """Stage a notification for one user without committing."""
        notification = Notification(
            user_id=user_id,
            type=NotificationType(type).value,
            title=title,
            message=message,
            link=link,
            related_id=related_id,
        )
        await self.repos.notifications.stage(notification)
        logger.debug(f"Queued {notification.type} notification for user {user_id}")
        return notification

    async def notify_role(
        self,
        role: UserRole,
        type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None,
        related_id: Optional[str] = None,
    ) -> List[Notification]:
        """Stage the same notification for every active user holding ``role``."""
        users = await self.repos.users.list_by_role(UserRole(role).value)
        return [await self.notify(user.id, type, title, message, link, related_id) for user in users]

    async def list_for_user(self, user_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        return await self.repos.notifications.list_for_user(user_id, unread_only=unread_only, limit=limit)

    async def unread_count(self, user_id: str) -> int:
        return await self.repos.notifications.unread_count(user_id)

    async def mark_read(self, user_id: str, notification_id: str) -> Notification:
        """Mark one of the user's notifications as read.

        Another user's notification is reported as missing.
        """
        notification = await self.repos.notifications.get_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification", notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification = await self.repos.notifications.update(notification)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        updated = await self.repos.notifications.mark_all_read(user_id)
        logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated
