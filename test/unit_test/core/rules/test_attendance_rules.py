"""Unit tests for biometric punch normalization and daily aggregation."""

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from medops.core.models.domain import PunchDirection
from medops.core.rules.attendance import (
    Punch,
    aggregate_daily,
    is_late_arrival,
    normalize_punch_direction,
    work_hours,
)


class TestPunchDirection:
    @pytest.mark.parametrize("raw", ["out", "OUT", " Out ", "0", 0])
    def test_out_codes(self, raw):
        assert normalize_punch_direction(raw) == PunchDirection.OUT

    @pytest.mark.parametrize("raw", ["in", "IN", "1", 1, None, "", "weird"])
    def test_everything_else_is_in(self, raw):
        assert normalize_punch_direction(raw) == PunchDirection.IN


class TestLateArrival:
    def test_exactly_at_cutoff_is_on_time(self):
        assert not is_late_arrival(datetime(2026, 1, 5, 10, 0, 59))

    def test_after_cutoff_minute_is_late(self):
        assert is_late_arrival(datetime(2026, 1, 5, 10, 1))

    def test_custom_cutoff(self):
        assert is_late_arrival(datetime(2026, 1, 5, 9, 31), cutoff=time(9, 30))


def test_work_hours():
    assert work_hours(datetime(2026, 1, 5, 9, 0), datetime(2026, 1, 5, 17, 20)) == 8.33
    assert work_hours(datetime(2026, 1, 5, 9, 0), None) is None


class TestAggregateDaily:
    def test_first_in_and_last_out(self):
        punches = [
            Punch("p1", "e1", datetime(2026, 1, 5, 9, 45), PunchDirection.IN),
            Punch("p2", "e1", datetime(2026, 1, 5, 13, 0), PunchDirection.OUT),
            Punch("p3", "e1", datetime(2026, 1, 5, 9, 30), PunchDirection.IN),
            Punch("p4", "e1", datetime(2026, 1, 5, 18, 30), PunchDirection.OUT),
        ]
        [day] = aggregate_daily(punches)
        assert day.day == date(2026, 1, 5)
        assert day.in_time == datetime(2026, 1, 5, 9, 30)
        assert day.out_time == datetime(2026, 1, 5, 18, 30)
        assert day.work_hours == 9.0
        assert day.is_late is False
        assert day.punches == 4
        assert sorted(day.log_ids) == ["p1", "p2", "p3", "p4"]

    def test_lateness_follows_earliest_in(self):
        punches = [
            Punch("p1", "e1", datetime(2026, 1, 5, 11, 0), PunchDirection.IN),
            Punch("p2", "e1", datetime(2026, 1, 5, 10, 30), PunchDirection.IN),
        ]
        [day] = aggregate_daily(punches)
        assert day.is_late is True
        assert day.work_hours is None

    def test_grouped_per_employee_and_day_newest_first(self):
        punches = [
            Punch("p1", "e1", datetime(2026, 1, 5, 9, 0), PunchDirection.IN),
            Punch("p2", "e2", datetime(2026, 1, 5, 9, 0), PunchDirection.IN),
            Punch("p3", "e1", datetime(2026, 1, 6, 9, 0), PunchDirection.IN),
        ]
        days = aggregate_daily(punches)
        assert [(d.day, d.employee_id) for d in days] == [
            (date(2026, 1, 6), "e1"),
            (date(2026, 1, 5), "e2"),
            (date(2026, 1, 5), "e1"),
        ]

    def test_out_only_day(self):
        [day] = aggregate_daily([Punch("p1", "e1", datetime(2026, 1, 5, 18, 0), PunchDirection.OUT)])
        assert day.in_time is None
        assert day.out_time == datetime(2026, 1, 5, 18, 0)
        assert day.is_late is False

    def test_custom_cutoff(self):
        punches = [Punch("p1", "e1", datetime(2026, 1, 5, 9, 45), PunchDirection.IN)]
        [day] = aggregate_daily(punches, late_cutoff=time(9, 30))
        assert day.is_late is True
