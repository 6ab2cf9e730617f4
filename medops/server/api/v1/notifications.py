"""
Notifications API Endpoints.

All endpoints act on the current user's own notifications.
"""

from typing import List

from fastapi import APIRouter, Query

from medops.core.models.io.notifications import NotificationRead, ReadAllResult, UnreadCount
from medops.server.services.deps import CurrentUserDep, NotificationServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=List[NotificationRead],
    summary="List Notifications",
    description="The current user's notifications, newest first.",
    response_description="A list of notifications.",
)
async def list_notifications(
    user: CurrentUserDep,
    service: NotificationServiceDep,
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
):
    return await service.list_for_user(user.id, unread_only=unread_only, limit=limit)


@router.get(
    "/unread-count",
    response_model=UnreadCount,
    summary="Unread Count",
    description="Number of unread notifications of the current user.",
    response_description="The unread count.",
)
async def unread_count(user: CurrentUserDep, service: NotificationServiceDep):
    return UnreadCount(count=await service.unread_count(user.id))


@router.post(
    "/read-all",
    response_model=ReadAllResult,
    summary="Mark All Read",
    description="Mark every notification of the current user as read.",
    response_description="How many notifications changed.",
)
async def read_all(user: CurrentUserDep, service: NotificationServiceDep):
    return ReadAllResult(updated=await service.mark_all_read(user.id))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark Read",
    description="Mark one of the current user's notifications as read.",
    response_description="The notification.",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: str, user: CurrentUserDep, service: NotificationServiceDep):
    return await service.mark_read(user.id, notification_id)
