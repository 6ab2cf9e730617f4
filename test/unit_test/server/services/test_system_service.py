"""Unit tests for the admin system service."""

from __future__ import annotations

from datetime import timedelta

import pytest

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.request_logs import RequestLog
from medops.server.core.constant import VERSION
from medops.server.services.system import SystemService, format_uptime, read_meminfo


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0d 0h 0m"),
        (59, "0d 0h 0m"),
        (3 * 3600 + 7 * 60, "0d 3h 7m"),
        (2 * 86400 + 3600 + 60, "2d 1h 1m"),
    ],
)
def test_format_uptime(seconds, expected):
    assert format_uptime(seconds) == expected


def test_read_meminfo(tmp_path):
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemTotal:       1000 kB\nMemFree:         100 kB\nMemAvailable:    250 kB\n")

    usage = read_meminfo(str(meminfo))

    assert usage.total == 1000 * 1024
    assert usage.free == 250 * 1024
    assert usage.usage_percent == 75.0


def test_read_meminfo_missing_file(tmp_path):
    assert read_meminfo(str(tmp_path / "absent")) is None


def test_metrics(repos):
    metrics = SystemService(repos).metrics()
    assert metrics.cpu.cores >= 1
    assert metrics.disk.total > 0
    assert metrics.process.pid > 0


@pytest.mark.asyncio
async def test_health_reports_database(repos):
    health = await SystemService(repos).health()

    assert health.status == "healthy"
    assert health.version == VERSION
    assert health.database.status == "healthy"
    assert health.database.latency_ms is not None


@pytest.mark.asyncio
async def test_errors_grouped_by_path(repos, session):
    now = utc_now_naive()
    rows = [RequestLog(method="GET", path="/api/v1/leads", status_code=500, duration_ms=3.0) for _ in range(4)]
    rows.append(RequestLog(method="POST", path="/api/v1/ledger", status_code=503, duration_ms=9.0))
    rows.append(RequestLog(method="GET", path="/api/v1/tasks", status_code=404, duration_ms=1.0))
    stale = now - timedelta(days=2)
    rows.append(RequestLog(method="GET", path="/api/v1/old", status_code=500, duration_ms=1.0, created_at=stale))
    for row in rows:
        session.add(row)
    await session.commit()

    summary = await SystemService(repos).errors(hours=24)

    assert summary.total == 5
    assert [(g.path, g.count) for g in summary.groups] == [("/api/v1/leads", 4), ("/api/v1/ledger", 1)]
    assert len(summary.groups[0].samples) == 3


@pytest.mark.asyncio
async def test_logs_paginate(repos, session):
    for n in range(3):
        session.add(RequestLog(method="GET", path=f"/api/v1/tasks/{n}", status_code=200, duration_ms=1.0))
    await session.commit()

    rows, meta = await SystemService(repos).logs(page=2, limit=2)

    assert len(rows) == 1
    assert meta.total == 3
    assert meta.page == 2
