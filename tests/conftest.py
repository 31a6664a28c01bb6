from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

import pytest

from src.qr_attendance.qr_attendance.attendance.model import AttendanceRecord
from src.qr_attendance.qr_attendance.attendance.repository import LockedAttendance
from src.qr_attendance.qr_attendance.core.enums import HolidayType, Role
from src.qr_attendance.qr_attendance.holidays.model import Holiday
from src.qr_attendance.qr_attendance.schedules.model import Schedule
from src.qr_attendance.qr_attendance.users.model import User

TZ = ZoneInfo("Asia/Manila")


@dataclass
class InMemoryUsers:
    users_by_id: dict[int, User] = field(default_factory=dict)

    def add(self, user: User) -> User:
        self.users_by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_qr_token(self, qr_token: str) -> Optional[User]:
        for u in self.users_by_id.values():
            if u.qr_token == qr_token and u.is_active:
                return u
        return None

    def list_non_admin(self):
        return sorted(
            (u for u in self.users_by_id.values() if not u.is_admin and u.is_active),
            key=lambda u: u.user_id,
        )

    def list_without_qr_token(self):
        return [u for u in self.users_by_id.values() if not u.qr_token]

    def set_qr_token(self, user_id: int, qr_token: str) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(user, qr_token=qr_token)
        return True


@dataclass
class InMemorySchedules:
    by_user_day: dict[tuple[int, int], Schedule] = field(default_factory=dict)

    def add(self, user_id: int, day_of_week: int, start: time, end: time, *, break_start=None, break_hours=0.0):
        schedule = Schedule(
            schedule_id=len(self.by_user_day) + 1,
            user_id=user_id,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            break_start=break_start,
            break_hours=break_hours,
        )
        self.by_user_day[(user_id, day_of_week)] = schedule
        return schedule

    def get_for_user_and_day(self, *, user_id: int, day_of_week: int) -> Optional[Schedule]:
        return self.by_user_day.get((user_id, day_of_week))

    def list_for_user(self, *, user_id: int):
        return sorted((s for (u, _), s in self.by_user_day.items() if u == user_id), key=lambda s: s.day_of_week)

    def replace_for_user(self, *, user_id: int, schedules) -> int:
        for key in [k for k in self.by_user_day if k[0] == user_id]:
            del self.by_user_day[key]
        for s in schedules:
            self.by_user_day[(user_id, s.day_of_week)] = s
        return len(schedules)


@dataclass
class InMemoryHolidays:
    holidays: list[Holiday] = field(default_factory=list)

    def exists_on(self, value: date) -> bool:
        return any(h.matches(value) for h in self.holidays)

    def list_all(self):
        return list(self.holidays)

    def create(self, *, name: str, holiday_date: date, holiday_type: HolidayType, is_recurring: bool) -> int:
        holiday_id = len(self.holidays) + 1
        self.holidays.append(Holiday(holiday_id, name, holiday_date, holiday_type, is_recurring))
        return holiday_id

    def delete(self, *, holiday_id: int) -> bool:
        before = len(self.holidays)
        self.holidays = [h for h in self.holidays if h.holiday_id != holiday_id]
        return len(self.holidays) != before


class InMemoryAttendance:
    """Ledger fake with per-row locks and commit-on-success, like the MySQL one."""

    def __init__(self):
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self.fail_for: set[int] = set()
        self._locks: dict[tuple[int, date], threading.Lock] = {}
        self._guard = threading.Lock()
        self._id = 0

    def put(self, record: AttendanceRecord) -> AttendanceRecord:
        self._id += 1
        record = replace(record, attendance_id=self._id)
        self.rows[(record.user_id, record.work_date)] = record
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self.rows.values() if r.attendance_id == attendance_id), None)

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self.rows.get((user_id, work_date))

    @contextmanager
    def lock_for_update(self, *, user_id: int, work_date: date, create_status=None) -> Iterator[LockedAttendance]:
        if user_id in self.fail_for:
            raise RuntimeError(f"storage unavailable for user {user_id}")

        key = (user_id, work_date)
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())

        with lock:
            current = self.rows.get(key)
            staged: list[AttendanceRecord] = []
            created = False
            if current is None and create_status is not None:
                current = AttendanceRecord(user_id=user_id, work_date=work_date, status=create_status)
                staged.append(current)
                created = True

            def save(record: AttendanceRecord) -> AttendanceRecord:
                if record.attendance_id is None:
                    existing = self.rows.get(key)
                    if existing is not None:
                        record = replace(record, attendance_id=existing.attendance_id)
                    else:
                        with self._guard:
                            self._id += 1
                            record = replace(record, attendance_id=self._id)
                staged.append(record)
                return record

            yield LockedAttendance(record=current, created=created, _save=save)

            # Reached only when the block did not raise: commit.
            if staged:
                last = staged[-1]
                existing = self.rows.get(key)
                if existing is not None and last.attendance_id is None:
                    last = replace(last, attendance_id=existing.attendance_id)
                if last.attendance_id is None:
                    with self._guard:
                        self._id += 1
                        last = replace(last, attendance_id=self._id)
                self.rows[key] = last

    def last_work_date(self, user_id: int) -> Optional[date]:
        dates = [d for (u, d) in self.rows if u == user_id]
        return max(dates) if dates else None

    def list_range(self, *, start: date, end: date, user_id: Optional[int] = None):
        items = [
            r
            for r in self.rows.values()
            if start <= r.work_date <= end and (user_id is None or r.user_id == user_id)
        ]
        return sorted(items, key=lambda r: (r.work_date, r.user_id))

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self.rows.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, user, reminder_type, scheduled_time) -> None:
        self.sent.append((user.user_id, reminder_type, scheduled_time))


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=TZ)


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def clock():
    """Builds aware local datetimes: ``clock(2024, 1, 15, 9, 10)``."""
    return at


@pytest.fixture
def users():
    repo = InMemoryUsers()
    repo.add(User(user_id=1, name="Admin", email="admin@example.com", role=Role.ADMIN, qr_token="token-admin"))
    repo.add(User(user_id=2, name="Juan", email="juan@example.com", role=Role.USER, qr_token="token-juan"))
    return repo


@pytest.fixture
def schedules():
    return InMemorySchedules()


@pytest.fixture
def week_schedule(schedules):
    """Juan works Monday..Friday 09:00-17:00."""
    for day in range(1, 6):
        schedules.add(2, day, time(9, 0), time(17, 0))
    return schedules


@pytest.fixture
def holidays():
    return InMemoryHolidays()


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def notifier():
    return RecordingNotifier()
