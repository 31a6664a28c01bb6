from __future__ import annotations

from datetime import date, time

import pytest

from src.qr_attendance.qr_attendance.attendance.model import AttendanceRecord
from src.qr_attendance.qr_attendance.core.enums import AttendanceStatus
from src.qr_attendance.qr_attendance.core.exceptions import NegativeDuration
from src.qr_attendance.qr_attendance.reports.duration import DurationCalculator, format_hours
from src.qr_attendance.qr_attendance.schedules.model import Schedule

MONDAY = date(2024, 1, 15)


def _schedule(**kwargs):
    return Schedule(schedule_id=1, user_id=2, day_of_week=1, start_time=time(9, 0), end_time=time(17, 0), **kwargs)


def _record(time_in, time_out):
    return AttendanceRecord(user_id=2, work_date=MONDAY, status=AttendanceStatus.PRESENT, time_in=time_in, time_out=time_out)


def test_hours_and_overtime(tz, clock):
    duration = DurationCalculator(tz).calculate(
        _record(clock(2024, 1, 15, 9, 10), clock(2024, 1, 15, 17, 30)), _schedule()
    )

    assert duration.total_hours == 8.33
    assert duration.overtime_hours == 0.5
    assert duration.is_overtime


def test_break_is_subtracted_once_reached(tz, clock):
    schedule = _schedule(break_start=time(12, 0), break_hours=1.0)
    calc = DurationCalculator(tz)

    full_day = calc.calculate(_record(clock(2024, 1, 15, 9, 0), clock(2024, 1, 15, 17, 0)), schedule)
    morning = calc.calculate(_record(clock(2024, 1, 15, 9, 0), clock(2024, 1, 15, 11, 0)), schedule)

    assert full_day.total_hours == 7.0
    assert not full_day.is_overtime
    assert morning.total_hours == 2.0


def test_break_never_makes_hours_negative(tz, clock):
    schedule = _schedule(break_start=time(12, 0), break_hours=1.0)

    duration = DurationCalculator(tz).calculate(
        _record(clock(2024, 1, 15, 11, 50), clock(2024, 1, 15, 12, 20)), schedule
    )

    assert duration.total_hours == 0.0


def test_missing_time_out_has_no_duration(tz, clock):
    assert DurationCalculator(tz).calculate(_record(clock(2024, 1, 15, 9, 0), None), _schedule()) is None


def test_time_out_before_time_in_is_an_error(tz, clock):
    with pytest.raises(NegativeDuration) as exc:
        DurationCalculator(tz).calculate(_record(clock(2024, 1, 15, 17, 0), clock(2024, 1, 15, 9, 0)), _schedule())

    assert exc.value.user_id == 2
    assert "before time in" in str(exc.value)


def test_without_schedule_there_is_no_overtime(tz, clock):
    duration = DurationCalculator(tz).calculate(_record(clock(2024, 1, 15, 9, 0), clock(2024, 1, 15, 20, 0)), None)

    assert duration.total_hours == 11.0
    assert duration.overtime_hours == 0.0


def test_format_hours():
    assert format_hours(8.333) == "8.33 Hours"
    assert format_hours(None) == "-"
