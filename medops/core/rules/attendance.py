"""Attendance aggregation from biometric punches.

Devices report raw punches. A working day is summarized per employee as the
earliest IN punch, the latest OUT punch and the hours between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional, Tuple

from medops.core.models.domain import PunchDirection

DEFAULT_LATE_CUTOFF = time(10, 0)


def normalize_punch_direction(direction: Optional[str]) -> PunchDirection:
    """Map device punch codes to a direction. Unknown codes count as IN."""
    value = str(direction).strip().lower() if direction is not None else ""
    if value in ("out", "0"):
        return PunchDirection.OUT
    return PunchDirection.IN


def is_late_arrival(punch_time: datetime, cutoff: time = DEFAULT_LATE_CUTOFF) -> bool:
    """An arrival is late when it is after the cutoff minute."""
    return punch_time.time().replace(second=0, microsecond=0) > cutoff


def work_hours(in_time: Optional[datetime], out_time: Optional[datetime]) -> Optional[float]:
    if in_time is None or out_time is None:
        return None
    return round((out_time - in_time).total_seconds() / 3600, 2)


@dataclass
class DailyAttendance:
    employee_id: str
    day: date
    in_time: Optional[datetime] = None
    out_time: Optional[datetime] = None
    work_hours: Optional[float] = None
    is_late: bool = False
    punches: int = 0
    log_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Punch:
    id: str
    employee_id: str
    log_date: datetime
    punch_direction: PunchDirection


def aggregate_daily(punches: Iterable[Punch], late_cutoff: time = DEFAULT_LATE_CUTOFF) -> List[DailyAttendance]:
    """Group punches by employee and calendar day.

    Returns:
        One summary per employee per day, newest day first
    """
    grouped: Dict[Tuple[str, date], DailyAttendance] = {}
    for punch in punches:
        key = (punch.employee_id, punch.log_date.date())
        day = grouped.setdefault(key, DailyAttendance(employee_id=punch.employee_id, day=key[1]))
        day.punches += 1
        day.log_ids.append(punch.id)
        if PunchDirection(punch.punch_direction) == PunchDirection.IN:
            if day.in_time is None or punch.log_date < day.in_time:
                day.in_time = punch.log_date
                day.is_late = is_late_arrival(punch.log_date, late_cutoff)
        elif day.out_time is None or punch.log_date > day.out_time:
            day.out_time = punch.log_date

    for day in grouped.values():
        day.work_hours = work_hours(day.in_time, day.out_time)

    return sorted(grouped.values(), key=lambda d: (d.day, d.employee_id), reverse=True)
