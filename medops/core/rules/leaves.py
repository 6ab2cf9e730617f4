"""Leave application rules.

A leave covers whole calendar days, both ends included. New joiners may not
apply until their probation ends, and a request may not share a day with one
that is already pending or approved.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Optional

from medops.core.errors import ValidationFailedError

PROBATION_MONTHS = 6


def leave_days(start: date, end: date) -> int:
    """Number of days a leave covers, inclusive of both ends."""
    return (end - start).days + 1


def add_months(day: date, months: int) -> date:
    """Same day of the month ``months`` later, clamped to the last day of a shorter month."""
    month_index = day.month - 1 + months
    year, month = day.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def probation_end(date_of_joining: date, months: int = PROBATION_MONTHS) -> date:
    return add_months(date_of_joining, months)


def check_probation(date_of_joining: Optional[date], today: date) -> None:
    """Refuse applications from employees still on probation. No joining date means no probation."""
    if date_of_joining is None:
        return
    ends = probation_end(date_of_joining)
    if today < ends:
        raise ValidationFailedError(
            "You are in probation period. Leave applications will be available after "
            f"{ends.strftime('%d %B %Y').lstrip('0')}"
        )


def check_dates(start: date, end: date, today: date) -> int:
    """Validate the requested range and return its length in days."""
    if start > end:
        raise ValidationFailedError("Start date must be before end date")
    if start < today:
        raise ValidationFailedError("Cannot apply for leave in the past")
    return leave_days(start, end)


def check_balance(remaining: float, requested: int) -> None:
    if remaining < requested:
        raise ValidationFailedError(f"Insufficient leave balance. Available: {remaining:g}, Requested: {requested}")


def overlaps(start: date, end: date, other_start: date, other_end: date) -> bool:
    return start <= other_end and other_start <= end
