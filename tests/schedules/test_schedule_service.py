from __future__ import annotations

from datetime import date, time

import pytest

from src.qr_attendance.qr_attendance.core.exceptions import ValidationError
from src.qr_attendance.qr_attendance.schedules.model import Schedule
from src.qr_attendance.qr_attendance.schedules.service import ScheduleService


def test_replace_week_parses_and_sorts(schedules):
    svc = ScheduleService(schedules)

    saved = svc.replace_week(
        user_id=2,
        entries=[
            {"day_of_week": 3, "start_time": "09:00", "end_time": "17:00", "break_start": "12:00", "break_hours": 1},
            {"day_of_week": 1, "start_time": "22:00", "end_time": "06:00"},
        ],
    )

    assert [s.day_of_week for s in saved] == [1, 3]
    assert saved[0].is_overnight
    assert saved[1].break_start == time(12, 0)
    assert [s.day_of_week for s in svc.list_for_user(2)] == [1, 3]


@pytest.mark.parametrize(
    "entry",
    [
        {"day_of_week": 7, "start_time": "09:00", "end_time": "17:00"},
        {"day_of_week": 1, "start_time": "9am", "end_time": "17:00"},
        {"day_of_week": 1, "start_time": "09:00", "end_time": "09:00"},
        {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00", "break_hours": -1},
        {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00", "break_hours": 1},
    ],
)
def test_replace_week_rejects_invalid_entries(schedules, entry):
    with pytest.raises(ValidationError):
        ScheduleService(schedules).replace_week(user_id=2, entries=[entry])


def test_replace_week_rejects_duplicate_days(schedules):
    entry = {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00"}

    with pytest.raises(ValidationError):
        ScheduleService(schedules).replace_week(user_id=2, entries=[entry, entry])


def test_overnight_window_ends_next_day(tz, clock):
    schedule = Schedule(
        schedule_id=1,
        user_id=2,
        day_of_week=1,
        start_time=time(22, 0),
        end_time=time(6, 0),
        break_start=time(2, 0),
        break_hours=0.5,
    )

    window = schedule.window_on(date(2024, 1, 15), tz)

    assert window.start == clock(2024, 1, 15, 22, 0)
    assert window.end == clock(2024, 1, 16, 6, 0)
    assert window.break_start == clock(2024, 1, 16, 2, 0)
