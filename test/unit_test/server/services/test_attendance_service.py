"""Unit tests for attendance ingestion and the daily report."""

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from medops.core.database.entities.hr import Department, Employee
from medops.core.errors import ValidationFailedError
from medops.core.models.io.hr import AttendanceIngestRequest, PunchIn
from medops.server.services.attendance import AttendanceService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(repos):
    return AttendanceService(repos, time(10, 0))


@pytest.fixture
async def staff(session, make_user):
    """Two employees in different departments."""
    ops = Department(name="Operations")
    accounts = Department(name="Accounts")
    session.add(ops)
    session.add(accounts)
    await session.commit()

    asha = Employee(
        user_id=(await make_user("BD")).id, employee_code="EMP001", biometric_code="17", department_id=ops.id
    )
    ravi = Employee(user_id=(await make_user("FINANCE")).id, employee_code="EMP002", department_id=accounts.id)
    session.add(asha)
    session.add(ravi)
    await session.commit()
    return {"asha": asha, "ravi": ravi, "ops": ops, "accounts": accounts}


def _punch(code, moment, direction=None):
    return PunchIn(employee_code=code, log_date=moment, punch_direction=direction)


class TestIngest:
    async def test_stores_punches_by_code_or_biometric_code(self, service, repos, staff):
        result = await service.ingest(
            AttendanceIngestRequest(
                device_id="gate-1",
                punches=[
                    _punch("EMP001", datetime(2026, 4, 1, 9, 55), "in"),
                    _punch("17", datetime(2026, 4, 1, 18, 5), 0),
                    _punch(" EMP002 ", datetime(2026, 4, 1, 10, 20), 1),
                ],
            )
        )

        assert (result.ingested, result.duplicates, result.skipped_unknown) == (3, 0, 0)
        assert await repos.attendance.exists(staff["asha"].id, datetime(2026, 4, 1, 18, 5))

    async def test_unknown_codes_are_reported_once(self, service, staff):
        result = await service.ingest(
            AttendanceIngestRequest(
                punches=[
                    _punch("GHOST", datetime(2026, 4, 1, 9, 0)),
                    _punch("GHOST", datetime(2026, 4, 1, 18, 0)),
                ]
            )
        )
        assert result.skipped_unknown == 2
        assert result.unknown_codes == ["GHOST"]

    async def test_resent_punches_are_duplicates(self, service, staff):
        punches = [_punch("EMP001", datetime(2026, 4, 1, 9, 55)), _punch("EMP001", datetime(2026, 4, 1, 9, 55))]
        first = await service.ingest(AttendanceIngestRequest(punches=punches))
        second = await service.ingest(AttendanceIngestRequest(punches=punches[:1]))

        assert (first.ingested, first.duplicates) == (1, 1)
        assert (second.ingested, second.duplicates) == (0, 1)


class TestDaily:
    @pytest.fixture(autouse=True)
    async def punches(self, service, staff):
        await service.ingest(
            AttendanceIngestRequest(
                punches=[
                    _punch("EMP001", datetime(2026, 4, 1, 9, 30), "in"),
                    _punch("EMP001", datetime(2026, 4, 1, 13, 0), "out"),
                    _punch("EMP001", datetime(2026, 4, 1, 18, 0), "out"),
                    _punch("EMP002", datetime(2026, 4, 1, 10, 15), "in"),
                    _punch("EMP001", datetime(2026, 4, 2, 10, 0), "in"),
                ]
            )
        )

    async def test_summarizes_each_employee_day(self, service, staff):
        rows = await service.daily(date(2026, 4, 1))
        by_code = {row.employee_code: row for row in rows}

        asha = by_code["EMP001"]
        assert asha.in_time == datetime(2026, 4, 1, 9, 30)
        assert asha.out_time == datetime(2026, 4, 1, 18, 0)
        assert asha.work_hours == 8.5
        assert asha.is_late is False
        assert asha.punches == 3

        ravi = by_code["EMP002"]
        assert ravi.is_late is True
        assert ravi.out_time is None
        assert ravi.work_hours is None

    async def test_range_is_inclusive(self, service, staff):
        rows = await service.daily(date(2026, 4, 1), date(2026, 4, 2))
        assert [(row.day, row.employee_code) for row in rows if row.employee_code == "EMP001"] == [
            (date(2026, 4, 2), "EMP001"),
            (date(2026, 4, 1), "EMP001"),
        ]
        second_day = next(row for row in rows if row.day == date(2026, 4, 2))
        assert second_day.is_late is False

    async def test_filters_by_department_and_employee(self, service, staff):
        rows = await service.daily(date(2026, 4, 1), department_id=staff["accounts"].id)
        assert [row.employee_code for row in rows] == ["EMP002"]

        rows = await service.daily(date(2026, 4, 1), department_id=staff["accounts"].id, employee_id=staff["asha"].id)
        assert rows == []

    async def test_rejects_inverted_range(self, service):
        with pytest.raises(ValidationFailedError):
            await service.daily(date(2026, 4, 2), date(2026, 4, 1))
