from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import List

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_local, day_of_week, now_local
from ..core.constants import CHECK_IN_REMINDER_LEAD_MINUTES
from ..holidays.service import HolidayCalendar
from ..schedules.repository import ScheduleRepository
from ..users.model import User
from ..users.repository import UserRepository
from .evaluator import DueReminder, evaluate_reminders
from .notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentReminder:
    user_id: int
    work_date: date
    reminder: DueReminder


@dataclass
class ReminderRunReport:
    now: datetime
    sent: List[SentReminder] = field(default_factory=list)
    errors: List[tuple[int, str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "now": self.now.isoformat(),
            "sent": [
                {
                    "user_id": s.user_id,
                    "work_date": s.work_date.strftime("%Y-%m-%d"),
                    "type": s.reminder.reminder_type.value,
                    "scheduled_time": s.reminder.scheduled_time.strftime("%H:%M"),
                }
                for s in self.sent
            ],
            "errors": [{"user_id": user_id, "message": message} for user_id, message in self.errors],
        }


class ReminderService:
    """Batch runner for reminders; reads schedules and the ledger, never writes."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        schedules: ScheduleRepository,
        holidays: HolidayCalendar,
        notifier: Notifier,
        *,
        tz: tzinfo,
    ):
        self._attendance = attendance
        self._users = users
        self._schedules = schedules
        self._holidays = holidays
        self._notifier = notifier
        self._tz = tz

    def run(self, *, now: datetime | None = None) -> ReminderRunReport:
        now = as_local(now, self._tz) if now else now_local(self._tz)
        report = ReminderRunReport(now=now)

        today = now.date()
        # Yesterday's overnight shift may still be running this morning, and a
        # shift starting just after midnight gets its check-in reminder tonight.
        candidates = (today - timedelta(days=1), today, today + timedelta(days=1))
        work_dates = [d for d in candidates if not self._holidays.is_holiday(d)]
        if not work_dates:
            logger.info("%s is a holiday, no reminders sent", today)
            return report

        for user in self._users.list_non_admin():
            try:
                for work_date in work_dates:
                    self._remind_user(user, work_date, now=now, report=report)
            except Exception as exc:
                logger.exception("Failed to evaluate reminders for user %s", user.user_id)
                report.errors.append((user.user_id, str(exc)))

        logger.info("Reminder run at %s: sent=%d errors=%d", now.isoformat(), len(report.sent), len(report.errors))
        return report

    def _remind_user(self, user: User, work_date: date, *, now: datetime, report: ReminderRunReport) -> None:
        schedule = self._schedules.get_for_user_and_day(user_id=user.user_id, day_of_week=day_of_week(work_date))
        if not schedule:
            return
        if work_date < now.date() and not schedule.is_overnight:
            return

        window = schedule.window_on(work_date, self._tz)
        if work_date > now.date() and now < window.start - timedelta(minutes=CHECK_IN_REMINDER_LEAD_MINUTES):
            return
        record = self._attendance.get_for_user_and_date(user.user_id, work_date)

        for due in evaluate_reminders(window, record, now):
            self._notifier.notify(user, due.reminder_type, due.scheduled_time)
            report.sent.append(SentReminder(user_id=user.user_id, work_date=work_date, reminder=due))
