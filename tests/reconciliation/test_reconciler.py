from __future__ import annotations

from datetime import date, time

import pytest

from src.qr_attendance.qr_attendance.attendance.model import AttendanceRecord
from src.qr_attendance.qr_attendance.attendance.service import ScanResolver
from src.qr_attendance.qr_attendance.core.enums import AttendanceStatus, HolidayType, Role
from src.qr_attendance.qr_attendance.holidays.model import Holiday
from src.qr_attendance.qr_attendance.holidays.service import HolidayCalendar
from src.qr_attendance.qr_attendance.reconciliation.service import EndOfDayReconciler
from src.qr_attendance.qr_attendance.users.model import User

MONDAY = date(2024, 1, 15)


@pytest.fixture
def reconciler(attendance, users, week_schedule, holidays, tz):
    return EndOfDayReconciler(attendance, users, week_schedule, HolidayCalendar(holidays), tz=tz)


def test_no_scan_after_shift_end_creates_absent(reconciler, attendance, clock):
    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    rec = attendance.get_for_user_and_date(2, MONDAY)
    assert rec.status == AttendanceStatus.ABSENT
    assert rec.time_in is None and rec.time_out is None
    assert report.absent == 1
    assert report.ok


def test_no_scan_before_shift_end_is_left_alone(reconciler, attendance, clock):
    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 16, 0), backfill=False)

    assert attendance.rows == {}
    assert report.skipped == 1


def test_forgotten_checkout_gets_extended_time_out(reconciler, attendance, clock):
    attendance.put(
        AttendanceRecord(user_id=2, work_date=MONDAY, status=AttendanceStatus.PRESENT, time_in=clock(2024, 1, 15, 9, 0))
    )

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    rec = attendance.get_for_user_and_date(2, MONDAY)
    assert rec.status == AttendanceStatus.NO_TIME_OUT
    assert rec.time_out == clock(2024, 1, 15, 18, 0)
    assert report.no_time_out == 1
    assert report.auto_checked_out == 1


def test_forgotten_checkout_before_extension_keeps_time_out_open(reconciler, attendance, clock):
    attendance.put(
        AttendanceRecord(user_id=2, work_date=MONDAY, status=AttendanceStatus.LATE, time_in=clock(2024, 1, 15, 9, 30))
    )

    reconciler.run(MONDAY, now=clock(2024, 1, 15, 17, 30), backfill=False)
    rec = attendance.get_for_user_and_date(2, MONDAY)
    assert rec.status == AttendanceStatus.NO_TIME_OUT
    assert rec.time_out is None

    reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)
    assert attendance.get_for_user_and_date(2, MONDAY).time_out == clock(2024, 1, 15, 18, 0)


def test_complete_day_is_never_touched(reconciler, attendance, clock):
    done = attendance.put(
        AttendanceRecord(
            user_id=2,
            work_date=MONDAY,
            status=AttendanceStatus.LATE,
            time_in=clock(2024, 1, 15, 9, 30),
            time_out=clock(2024, 1, 15, 17, 0),
        )
    )

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    assert attendance.get_for_user_and_date(2, MONDAY) == done
    assert report.skipped == 1


def test_second_run_with_same_now_changes_nothing(reconciler, attendance, users, week_schedule, clock):
    users.add(User(user_id=3, name="Maria", email="maria@example.com", role=Role.USER))
    week_schedule.add(3, 1, time(8, 0), time(16, 0))
    attendance.put(
        AttendanceRecord(user_id=3, work_date=MONDAY, status=AttendanceStatus.PRESENT, time_in=clock(2024, 1, 15, 9, 0))
    )
    now = clock(2024, 1, 15, 23, 59)

    reconciler.run(MONDAY, now=now)
    after_first = dict(attendance.rows)
    reconciler.run(MONDAY, now=now)

    assert attendance.rows == after_first


def test_holiday_is_skipped(reconciler, attendance, holidays, clock):
    holidays.create(name="Founders Day", holiday_date=MONDAY, holiday_type=HolidayType.COMPANY, is_recurring=False)

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    assert report.is_holiday
    assert attendance.rows == {}


def test_admins_are_not_swept(reconciler, attendance, week_schedule, clock):
    week_schedule.add(1, 1, time(9, 0), time(17, 0))

    reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    assert attendance.get_for_user_and_date(1, MONDAY) is None


def test_one_failing_user_does_not_stop_the_sweep(reconciler, attendance, users, week_schedule, clock):
    users.add(User(user_id=3, name="Maria", email="maria@example.com", role=Role.USER))
    week_schedule.add(3, 1, time(8, 0), time(16, 0))
    attendance.fail_for.add(2)

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    assert attendance.get_for_user_and_date(3, MONDAY).status == AttendanceStatus.ABSENT
    assert not report.ok
    assert [(e.user_id, e.work_date) for e in report.errors] == [(2, MONDAY)]
    assert "storage unavailable" in report.to_dict()["errors"][0]["message"]


def test_backfill_fills_missing_scheduled_days_since_last_record(reconciler, attendance, clock):
    attendance.put(
        AttendanceRecord(
            user_id=2,
            work_date=date(2024, 1, 8),
            status=AttendanceStatus.PRESENT,
            time_in=clock(2024, 1, 8, 9, 0),
            time_out=clock(2024, 1, 8, 17, 0),
        )
    )

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59))

    # Tue..Fri are backfilled, the weekend has no schedule.
    assert report.backfilled == 4
    for day in (9, 10, 11, 12):
        assert attendance.get_for_user_and_date(2, date(2024, 1, day)).status == AttendanceStatus.ABSENT
    assert attendance.get_for_user_and_date(2, date(2024, 1, 13)) is None
    assert attendance.get_for_user_and_date(2, MONDAY).status == AttendanceStatus.ABSENT


def test_backfill_is_bounded_by_lookback(attendance, users, week_schedule, holidays, tz, clock):
    reconciler = EndOfDayReconciler(
        attendance, users, week_schedule, HolidayCalendar(holidays), tz=tz, max_lookback_days=3
    )

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 8, 0))

    # Window is Fri 12th..Sun 14th; only Friday is scheduled.
    assert report.backfilled == 1
    assert sorted(d for (_, d) in attendance.rows) == [date(2024, 1, 12)]


def test_backfill_skips_holidays_and_existing_rows(reconciler, attendance, holidays, clock):
    holidays.holidays.append(Holiday(1, "Holiday", date(2024, 1, 10), HolidayType.PUBLIC, False))
    attendance.put(AttendanceRecord(user_id=2, work_date=date(2024, 1, 8), status=AttendanceStatus.ABSENT))
    attendance.put(
        AttendanceRecord(user_id=2, work_date=date(2024, 1, 9), status=AttendanceStatus.PRESENT, time_in=clock(2024, 1, 9, 9, 0))
    )

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 10, 0))

    assert report.backfilled == 2
    assert attendance.get_for_user_and_date(2, date(2024, 1, 10)) is None
    assert attendance.get_for_user_and_date(2, date(2024, 1, 9)).status == AttendanceStatus.PRESENT


def test_overnight_shift_is_not_absent_before_it_ends(attendance, users, schedules, holidays, tz, clock):
    schedules.add(2, 1, time(22, 0), time(6, 0))
    reconciler = EndOfDayReconciler(attendance, users, schedules, HolidayCalendar(holidays), tz=tz)

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 23, 59), backfill=False)

    assert attendance.rows == {}
    assert report.skipped == 1


def test_open_record_mid_shift_is_left_alone(reconciler, attendance, clock):
    checked_in = attendance.put(
        AttendanceRecord(user_id=2, work_date=MONDAY, status=AttendanceStatus.LATE, time_in=clock(2024, 1, 15, 9, 30))
    )

    report = reconciler.run(MONDAY, now=clock(2024, 1, 15, 12, 0), backfill=False)

    assert attendance.get_for_user_and_date(2, MONDAY) == checked_in
    assert report.skipped == 1
    assert report.no_time_out == 0


def test_midday_sweep_keeps_check_in_status_through_check_out(reconciler, attendance, users, week_schedule, tz, clock):
    resolver = ScanResolver(attendance, users, week_schedule, tz=tz)

    resolver.scan("token-juan", now=clock(2024, 1, 15, 9, 0))
    reconciler.run(MONDAY, now=clock(2024, 1, 15, 12, 0), backfill=False)
    resolver.scan("token-juan", now=clock(2024, 1, 15, 17, 0))

    rec = attendance.get_for_user_and_date(2, MONDAY)
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.time_out == clock(2024, 1, 15, 17, 0)
