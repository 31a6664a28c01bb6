from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Sequence

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_local, day_of_week, now_local
from ..core.constants import DEFAULT_MAX_LOOKBACK_DAYS
from ..core.enums import AttendanceStatus
from ..holidays.service import HolidayCalendar
from ..schedules.repository import ScheduleRepository
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationFailure:
    user_id: int
    work_date: date
    message: str


@dataclass
class ReconciliationReport:
    work_date: date
    is_holiday: bool = False
    absent: int = 0
    no_time_out: int = 0
    auto_checked_out: int = 0
    skipped: int = 0
    backfilled: int = 0
    errors: list[ReconciliationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "work_date": self.work_date.strftime("%Y-%m-%d"),
            "is_holiday": self.is_holiday,
            "absent": self.absent,
            "no_time_out": self.no_time_out,
            "auto_checked_out": self.auto_checked_out,
            "skipped": self.skipped,
            "backfilled": self.backfilled,
            "errors": [
                {"user_id": e.user_id, "work_date": e.work_date.strftime("%Y-%m-%d"), "message": e.message}
                for e in self.errors
            ],
        }


class EndOfDayReconciler:
    """Batch sweep giving every scheduled user a terminal status for a date.

    Safe to run repeatedly: complete days are never touched and an already
    extended time out is never extended again. One user's failure is recorded
    in the report and the sweep moves on to the next user.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        schedules: ScheduleRepository,
        holidays: HolidayCalendar,
        *,
        tz: tzinfo,
        strategy_factory: AttendanceStrategyFactory | None = None,
        max_lookback_days: int = DEFAULT_MAX_LOOKBACK_DAYS,
    ):
        self._attendance = attendance
        self._users = users
        self._schedules = schedules
        self._holidays = holidays
        self._tz = tz
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._max_lookback_days = int(max_lookback_days)

    def run(
        self,
        work_date: date | None = None,
        *,
        now: datetime | None = None,
        backfill: bool = True,
    ) -> ReconciliationReport:
        now = as_local(now, self._tz) if now else now_local(self._tz)
        work_date = work_date or now.date()
        report = ReconciliationReport(work_date=work_date)
        holiday_cache: dict[date, bool] = {}

        users = self._users.list_non_admin()

        if backfill:
            self._backfill(users, work_date=work_date, now=now, report=report, holiday_cache=holiday_cache)

        if self._is_holiday(work_date, holiday_cache):
            report.is_holiday = True
            logger.info("%s is a holiday, no attendance to reconcile", work_date)
            return report

        weekday = day_of_week(work_date)
        for user in users:
            try:
                self._reconcile_user(user, work_date=work_date, weekday=weekday, now=now, report=report)
            except Exception as exc:
                logger.exception("Failed to reconcile attendance for user %s on %s", user.user_id, work_date)
                report.errors.append(ReconciliationFailure(user_id=user.user_id, work_date=work_date, message=str(exc)))

        logger.info(
            "Reconciled %s: absent=%d no_time_out=%d auto_checked_out=%d skipped=%d backfilled=%d errors=%d",
            work_date,
            report.absent,
            report.no_time_out,
            report.auto_checked_out,
            report.skipped,
            report.backfilled,
            len(report.errors),
        )
        return report

    def _is_holiday(self, value: date, cache: dict[date, bool]) -> bool:
        if value not in cache:
            cache[value] = self._holidays.is_holiday(value)
        return cache[value]

    def _reconcile_user(
        self,
        user: User,
        *,
        work_date: date,
        weekday: int,
        now: datetime,
        report: ReconciliationReport,
    ) -> None:
        schedule = self._schedules.get_for_user_and_day(user_id=user.user_id, day_of_week=weekday)
        if not schedule:
            return

        window = schedule.window_on(work_date, self._tz)

        with self._attendance.lock_for_update(user_id=user.user_id, work_date=work_date) as locked:
            record = locked.record
            strategy = self._factory.for_close(record)
            if strategy is None:
                report.skipped += 1
                return

            if now <= window.end:
                # Shift is not over yet; the user may still show up or check out.
                report.skipped += 1
                return

            decision = strategy.decide_close(now=now, window=window, record=record)

            if record is None:
                locked.save(AttendanceRecord(user_id=user.user_id, work_date=work_date, status=decision.status))
                logger.info("Created %s record for user %s on %s", decision.status.value, user.user_id, work_date)
            else:
                updated = replace(record, status=decision.status, time_out=decision.time_out or record.time_out)
                if updated != record:
                    locked.save(updated)
                    logger.info("Marked user %s as %s on %s", user.user_id, decision.status.value, work_date)

            if decision.status == AttendanceStatus.ABSENT:
                report.absent += 1
            elif decision.status == AttendanceStatus.NO_TIME_OUT:
                report.no_time_out += 1
                if decision.time_out is not None:
                    report.auto_checked_out += 1

    def _backfill(
        self,
        users: Sequence[User],
        *,
        work_date: date,
        now: datetime,
        report: ReconciliationReport,
        holiday_cache: dict[date, bool],
    ) -> None:
        """Create Absent rows for past scheduled days that never got a record."""
        earliest = work_date - timedelta(days=self._max_lookback_days)

        for user in users:
            day: Optional[date] = None
            try:
                last = self._attendance.last_work_date(user.user_id)
                day = max(last + timedelta(days=1), earliest) if last else earliest
                while day < work_date:
                    if self._backfill_day(user, day, now=now, holiday_cache=holiday_cache):
                        report.backfilled += 1
                    day += timedelta(days=1)
            except Exception as exc:
                failed_on = day or work_date
                logger.exception("Failed to backfill attendance for user %s on %s", user.user_id, failed_on)
                report.errors.append(ReconciliationFailure(user_id=user.user_id, work_date=failed_on, message=str(exc)))

    def _backfill_day(self, user: User, day: date, *, now: datetime, holiday_cache: dict[date, bool]) -> bool:
        if self._is_holiday(day, holiday_cache):
            return False

        schedule = self._schedules.get_for_user_and_day(user_id=user.user_id, day_of_week=day_of_week(day))
        if not schedule:
            return False
        if now <= schedule.window_on(day, self._tz).end:
            return False

        with self._attendance.lock_for_update(user_id=user.user_id, work_date=day) as locked:
            if locked.record is not None:
                return False
            locked.save(AttendanceRecord(user_id=user.user_id, work_date=day, status=AttendanceStatus.ABSENT))
            logger.info("Backfilled Absent for user %s on %s", user.user_id, day)
            return True
