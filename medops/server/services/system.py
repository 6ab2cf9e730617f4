"""
Service for admin system observability: health, host metrics and request logs.

Host metrics are read from the standard library and ``/proc`` so they work
without extra system packages; memory figures are omitted where ``/proc``
is not available.
"""

from __future__ import annotations

import os
import platform
import shutil
import time
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import literal
from sqlmodel import select

from medops.core.database.base import utc_now_naive
from medops.core.database.repositories import SqlRepoBundle
from medops.core.database.repositories.base import page_offset
from medops.core.logging_config import get_logger
from medops.core.models.io.admin import (
    CPUMetrics,
    DatabaseHealth,
    ErrorGroup,
    ErrorSummary,
    ProcessMetrics,
    RequestLogRead,
    SystemHealth,
    SystemMetrics,
    UsageMetrics,
)
from medops.core.models.io.common import PaginationMeta
from medops.server.core.constant import VERSION

logger = get_logger(__name__)

# Process start, used for uptime
STARTED_AT = time.monotonic()

ERROR_SAMPLES = 3
ERROR_ROW_LIMIT = 100
MEMINFO_PATH = "/proc/meminfo"


def format_uptime(seconds: float) -> str:
    """Format a duration as ``"Xd Yh Zm"``."""
    minutes = int(seconds // 60)
    days, minutes = divmod(minutes, 24 * 60)
    hours, minutes = divmod(minutes, 60)
    return f"{days}d {hours}h {minutes}m"


def read_meminfo(path: str = MEMINFO_PATH) -> Optional[UsageMetrics]:
    """Memory usage from ``/proc/meminfo``, or None where it cannot be read."""
    try:
        with open(path, encoding="utf-8") as f:
            values: Dict[str, int] = {}
            for line in f:
                key, _, rest = line.partition(":")
                parts = rest.split()
                if parts and parts[0].isdigit():
                    values[key] = int(parts[0]) * 1024
    except OSError:
        return None
    total = values.get("MemTotal")
    if not total:
        return None
    free = values.get("MemAvailable", values.get("MemFree", 0))
    used = total - free
    return UsageMetrics(total=total, used=used, free=free, usage_percent=round(used / total * 100, 1))


class SystemService:
    """Service behind the admin system endpoints."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def health(self) -> SystemHealth:
        started = time.perf_counter()
        try:
            await self.repos.session.exec(select(literal(1)))
            database = DatabaseHealth(status="healthy", latency_ms=round((time.perf_counter() - started) * 1000, 2))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            database = DatabaseHealth(status="unhealthy", error=str(e))
        return SystemHealth(
            status="healthy" if database.status == "healthy" else "unhealthy",
            timestamp=utc_now_naive(),
            version=VERSION,
            uptime=format_uptime(time.monotonic() - STARTED_AT),
            database=database,
        )

    def metrics(self) -> SystemMetrics:
        try:
            load_average = [round(v, 2) for v in os.getloadavg()]
        except OSError:
            load_average = []
        disk = shutil.disk_usage("/")
        return SystemMetrics(
            timestamp=utc_now_naive(),
            cpu=CPUMetrics(cores=os.cpu_count() or 1, load_average=load_average),
            memory=read_meminfo(),
            disk=UsageMetrics(
                total=disk.total,
                used=disk.used,
                free=disk.free,
                usage_percent=round(disk.used / disk.total * 100, 1) if disk.total else 0.0,
            ),
            process=ProcessMetrics(pid=os.getpid(), python_version=platform.python_version()),
        )

    async def logs(
        self,
        page: int = 1,
        limit: int = 50,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ):
        rows, total = await self.repos.request_logs.search(
            path=path,
            status_code=status_code,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=page_offset(page, limit),
        )
        return rows, PaginationMeta.build(page, limit, total)

    async def errors(self, hours: int = 24) -> ErrorSummary:
        """Server errors of the last ``hours`` grouped by path, most frequent first."""
        rows = await self.repos.request_logs.errors_since(utc_now_naive() - timedelta(hours=hours), ERROR_ROW_LIMIT)
        groups: "OrderedDict[str, ErrorGroup]" = OrderedDict()
        for row in rows:
            group = groups.setdefault(row.path, ErrorGroup(path=row.path, count=0, samples=[]))
            group.count += 1
            if len(group.samples) < ERROR_SAMPLES:
                group.samples.append(RequestLogRead.model_validate(row))
        ordered = sorted(groups.values(), key=lambda g: g.count, reverse=True)
        return ErrorSummary(hours=hours, total=len(rows), groups=ordered)
