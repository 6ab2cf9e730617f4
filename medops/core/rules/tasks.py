"""Task due-status classification."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from medops.core.models.domain import TaskStatus

EXPIRED = "expired"
DUE_TODAY = "due-today"
EXPIRING_SOON = "expiring-soon"
NORMAL = "normal"

EXPIRING_SOON_DAYS = 3


def due_status(due_date: Optional[datetime], status: Optional[str], now: datetime) -> str:
    """Classify how urgent a task is relative to ``now``.

    Completed and undated tasks are always ``normal``. A task whose due moment
    has passed is ``expired`` even when it was due earlier today.
    """
    if due_date is None or status == TaskStatus.COMPLETED.value:
        return NORMAL
    if due_date < now:
        return EXPIRED
    if due_date.date() == now.date():
        return DUE_TODAY
    if (due_date - now).days <= EXPIRING_SOON_DAYS:
        return EXPIRING_SOON
    return NORMAL
