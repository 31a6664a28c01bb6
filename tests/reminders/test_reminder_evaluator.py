from __future__ import annotations

from datetime import date, time

import pytest

from src.qr_attendance.qr_attendance.attendance.model import AttendanceRecord
from src.qr_attendance.qr_attendance.core.enums import AttendanceStatus, ReminderType
from src.qr_attendance.qr_attendance.reminders.evaluator import evaluate_reminders
from src.qr_attendance.qr_attendance.reminders.notifier import build_message
from src.qr_attendance.qr_attendance.schedules.model import Schedule

MONDAY = date(2024, 1, 15)


@pytest.fixture
def window(tz):
    schedule = Schedule(schedule_id=1, user_id=2, day_of_week=1, start_time=time(9, 0), end_time=time(17, 0))
    return schedule.window_on(MONDAY, tz)


@pytest.fixture
def checked_in(clock):
    return AttendanceRecord(user_id=2, work_date=MONDAY, status=AttendanceStatus.PRESENT, time_in=clock(2024, 1, 15, 9, 0))


def _types(due):
    return [d.reminder_type for d in due]


@pytest.mark.parametrize(
    "hour, minute, second, expected",
    [
        (8, 44, 59, []),
        (8, 45, 0, [ReminderType.CHECK_IN]),
        (8, 59, 59, [ReminderType.CHECK_IN]),
        (9, 0, 0, []),
        (9, 29, 59, []),
        (9, 30, 0, [ReminderType.LATE_CHECK_IN]),
        (9, 44, 59, [ReminderType.LATE_CHECK_IN]),
        (9, 45, 0, []),
    ],
)
def test_check_in_windows_without_record(window, clock, hour, minute, second, expected):
    assert _types(evaluate_reminders(window, None, clock(2024, 1, 15, hour, minute, second))) == expected


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (16, 44, []),
        (16, 45, [ReminderType.CHECK_OUT]),
        (17, 0, []),
        (18, 0, [ReminderType.MISSED_CHECK_OUT]),
        (18, 14, [ReminderType.MISSED_CHECK_OUT]),
        (18, 15, []),
    ],
)
def test_check_out_windows_after_time_in(window, checked_in, clock, hour, minute, expected):
    assert _types(evaluate_reminders(window, checked_in, clock(2024, 1, 15, hour, minute))) == expected


def test_no_check_in_reminders_once_timed_in(window, checked_in, clock):
    assert evaluate_reminders(window, checked_in, clock(2024, 1, 15, 9, 30)) == []


def test_no_check_out_reminders_once_timed_out(window, checked_in, clock):
    done = AttendanceRecord(
        user_id=2,
        work_date=MONDAY,
        status=AttendanceStatus.PRESENT,
        time_in=checked_in.time_in,
        time_out=clock(2024, 1, 15, 16, 40),
    )

    assert evaluate_reminders(window, done, clock(2024, 1, 15, 16, 50)) == []


def test_check_out_reminder_on_overnight_shift_fires_next_morning(tz, clock):
    schedule = Schedule(schedule_id=1, user_id=2, day_of_week=1, start_time=time(22, 0), end_time=time(6, 0))
    window = schedule.window_on(MONDAY, tz)
    record = AttendanceRecord(user_id=2, work_date=MONDAY, status=AttendanceStatus.PRESENT, time_in=clock(2024, 1, 15, 22, 0))

    due = evaluate_reminders(window, record, clock(2024, 1, 16, 5, 50))

    assert _types(due) == [ReminderType.CHECK_OUT]
    assert due[0].scheduled_time == clock(2024, 1, 16, 6, 0)


def test_reminder_message_texts(clock):
    msg = build_message(ReminderType.MISSED_CHECK_OUT, clock(2024, 1, 15, 17, 0))

    assert msg.subject == "Alert: You Haven't Checked Out Yet"
    assert "17:00" in msg.body
