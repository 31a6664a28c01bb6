from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import as_local, combine_local, day_of_week, now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..schedules.repository import ScheduleRepository
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Marks a field the caller did not send, as opposed to one sent empty.
UNCHANGED = object()


class AttendanceCorrectionService:
    """Use case: admins add or fix a day's row by hand.

    Times are wall-clock times on the row's work date; a time out earlier than
    the time in belongs to the next day. The status is derived again from the
    times with the same lateness rule a scan uses.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        schedules: ScheduleRepository,
        *,
        tz: tzinfo,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._schedules = schedules
        self._tz = tz
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        time_in: Optional[time] = None,
        time_out: Optional[time] = None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        if not self._users.get_by_id(user_id):
            raise ValidationError("User not found")

        with self._attendance.lock_for_update(user_id=user_id, work_date=work_date) as locked:
            if locked.record is not None:
                raise ValidationError(
                    "Attendance record already exists for this user and date. "
                    "Please edit the existing record instead."
                )

            record = self._with_times(
                AttendanceRecord(user_id=user_id, work_date=work_date, status=AttendanceStatus.ABSENT, notes=notes),
                time_in=time_in,
                time_out=time_out,
                now=now,
            )
            saved = locked.save(record)

        logger.info("Admin recorded attendance for user %s on %s (%s)", user_id, work_date, saved.status.value)
        return saved

    def update(
        self,
        attendance_id: int,
        *,
        time_in=UNCHANGED,
        time_out=UNCHANGED,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Replace the times that were sent; ``None`` clears a time."""
        existing = self._get(attendance_id)

        with self._attendance.lock_for_update(user_id=existing.user_id, work_date=existing.work_date) as locked:
            current = locked.record
            if current is None:
                raise ValidationError("Attendance record not found")

            clock_in = current.time_in.time() if current.time_in else None
            clock_out = current.time_out.time() if current.time_out else None
            record = self._with_times(
                current,
                time_in=clock_in if time_in is UNCHANGED else time_in,
                time_out=clock_out if time_out is UNCHANGED else time_out,
                now=now,
            )
            saved = locked.save(record)

        logger.info("Admin corrected attendance %s for user %s (%s)", attendance_id, saved.user_id, saved.status.value)
        return saved

    def update_notes(self, attendance_id: int, notes: Optional[str]) -> AttendanceRecord:
        existing = self._get(attendance_id)
        notes = (notes or "").strip() or None

        with self._attendance.lock_for_update(user_id=existing.user_id, work_date=existing.work_date) as locked:
            if locked.record is None:
                raise ValidationError("Attendance record not found")
            return locked.save(replace(locked.record, notes=notes))

    def _get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise ValidationError("Attendance record not found")
        return record

    def _with_times(
        self,
        record: AttendanceRecord,
        *,
        time_in: Optional[time],
        time_out: Optional[time],
        now: datetime | None,
    ) -> AttendanceRecord:
        if time_in is None and time_out is not None:
            raise ValidationError("Time out requires a time in")

        at_in = combine_local(record.work_date, time_in, self._tz) if time_in else None
        at_out = combine_local(record.work_date, time_out, self._tz) if time_out else None
        if at_in and at_out and at_out < at_in:
            at_out += timedelta(days=1)

        now = as_local(now, self._tz) if now else now_local(self._tz)
        status = self._derive_status(record, at_in=at_in, at_out=at_out, now=now)
        return replace(record, time_in=at_in, time_out=at_out, status=status)

    def _derive_status(
        self,
        record: AttendanceRecord,
        *,
        at_in: Optional[datetime],
        at_out: Optional[datetime],
        now: datetime,
    ) -> AttendanceStatus:
        if at_in is None:
            return AttendanceStatus.ABSENT

        schedule = self._schedules.get_for_user_and_day(
            user_id=record.user_id, day_of_week=day_of_week(record.work_date)
        )
        if not schedule:
            if at_out is None and record.work_date < now.date():
                return AttendanceStatus.NO_TIME_OUT
            return AttendanceStatus.PRESENT

        window = schedule.window_on(record.work_date, self._tz)
        if at_out is None and now > window.end:
            return AttendanceStatus.NO_TIME_OUT

        return self._factory.for_checkin(now=at_in, window=window).decide_checkin(now=at_in, window=window).status
