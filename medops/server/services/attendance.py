"""
Service for biometric attendance.

Devices push raw punches; reads summarize them per employee and day.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.hr import AttendanceLog
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import ValidationFailedError
from medops.core.logging_config import get_logger
from medops.core.models.io.hr import AttendanceIngestRequest, AttendanceIngestResult, DailyAttendanceRead
from medops.core.rules.attendance import Punch, aggregate_daily, normalize_punch_direction

logger = get_logger(__name__)


class AttendanceService:
    """Service for ingesting punches and reporting daily attendance."""

    def __init__(self, repos: SqlRepoBundle, late_cutoff: time):
        self.repos = repos
        self.late_cutoff = late_cutoff

    async def ingest(self, request: AttendanceIngestRequest) -> AttendanceIngestResult:
        """
        Store a batch of device punches.

        Punches whose code matches no employee are skipped and reported.
        A punch already stored for the same employee and moment is counted as
        a duplicate, so devices may resend overlapping batches.
        """
        result = AttendanceIngestResult()
        employees: Dict[str, Optional[str]] = {}
        seen = set()
        for punch in request.punches:
            code = punch.employee_code.strip()
            if code not in employees:
                employee = await self.repos.employees.get_by_code(code)
                employees[code] = employee.id if employee else None
            employee_id = employees[code]
            if employee_id is None:
                result.skipped_unknown += 1
                if code not in result.unknown_codes:
                    result.unknown_codes.append(code)
                continue

            log_date = punch.log_date.replace(tzinfo=None)
            key = (employee_id, log_date)
            if key in seen or await self.repos.attendance.exists(employee_id, log_date):
                result.duplicates += 1
                continue
            seen.add(key)
            await self.repos.attendance.stage(
                AttendanceLog(
                    employee_id=employee_id,
                    log_date=log_date,
                    punch_direction=normalize_punch_direction(punch.punch_direction).value,
                    device_id=request.device_id,
                )
            )
            result.ingested += 1

        await self.repos.commit()
        if result.unknown_codes:
            logger.warning(f"Attendance ingest skipped unknown codes: {', '.join(result.unknown_codes)}")
        logger.info(
            f"Attendance ingest from {request.device_id or 'unknown device'}: {result.ingested} stored, "
            f"{result.duplicates} duplicates, {result.skipped_unknown} unknown"
        )
        return result

    async def daily(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> List[DailyAttendanceRead]:
        """Daily summaries for a date range, today by default. Both ends are inclusive."""
        today = utc_now_naive().date()
        start_date = start_date or today
        end_date = end_date or start_date
        if start_date > end_date:
            raise ValidationFailedError("start_date must not be after end_date")

        employee_ids = None
        if department_id:
            employee_ids = set(await self.repos.employees.ids_in_department(department_id))
        if employee_id:
            employee_ids = {employee_id} if employee_ids is None else employee_ids & {employee_id}

        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date + timedelta(days=1), time.min)
        logs = await self.repos.attendance.list_between(start, end, employee_ids)
        punches = [Punch(log.id, log.employee_id, log.log_date, log.punch_direction) for log in logs]

        codes: Dict[str, str] = {}
        rows = []
        for day in aggregate_daily(punches, self.late_cutoff):
            if day.employee_id not in codes:
                employee = await self.repos.employees.get_by_id(day.employee_id)
                codes[day.employee_id] = employee.employee_code if employee else None
            rows.append(
                DailyAttendanceRead(
                    employee_id=day.employee_id,
                    employee_code=codes[day.employee_id],
                    day=day.day,
                    in_time=day.in_time,
                    out_time=day.out_time,
                    work_hours=day.work_hours,
                    is_late=day.is_late,
                    punches=day.punches,
                )
            )
        return rows
