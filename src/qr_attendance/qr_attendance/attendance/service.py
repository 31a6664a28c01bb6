from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, tzinfo

from ..common.datetime_utils import as_local, day_of_week, now_local
from ..core.enums import AttendanceStatus, ScanAction
from ..core.exceptions import AlreadyCheckedOut, InvalidToken, NoScheduleToday
from ..schedules.repository import ScheduleRepository
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class ScanResolver:
    """Use case: turn one QR scan into a check-in or a check-out.

    The first scan of a day checks in, the second checks out, a third is
    rejected. Reads and writes of the day's row happen under the ledger's row
    lock, so two simultaneous scans can never both check in.
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

    def scan(self, token: str, *, now: datetime | None = None) -> ScanResult:
        token = (token or "").strip()
        user = self._users.get_by_qr_token(token) if token else None
        if not user:
            logger.warning("QR token not found (length=%d, preview=%s...)", len(token), token[:6])
            raise InvalidToken()

        now = as_local(now, self._tz) if now else now_local(self._tz)
        today = now.date()

        schedule = self._schedules.get_for_user_and_day(user_id=user.user_id, day_of_week=day_of_week(today))
        if not schedule:
            logger.info("Scan rejected for user %s: no schedule on %s", user.user_id, today)
            raise NoScheduleToday()

        window = schedule.window_on(today, self._tz)

        with self._attendance.lock_for_update(
            user_id=user.user_id,
            work_date=today,
            create_status=AttendanceStatus.PRESENT,
        ) as locked:
            record = locked.record

            if record.time_in is None:
                strategy = self._factory.for_checkin(now=now, window=window)
                decision = strategy.decide_checkin(now=now, window=window)
                locked.save(replace(record, time_in=now, status=decision.status))
                logger.info("User %s checked in at %s (%s)", user.user_id, now.isoformat(), decision.status.value)
                return ScanResult(
                    action=ScanAction.CHECK_IN,
                    time=now,
                    user_id=user.user_id,
                    user_name=user.name,
                    status=decision.status,
                )

            if record.time_out is None:
                strategy = self._factory.for_checkout(current_status=record.status)
                decision = strategy.decide_checkout(now=now, current=record.status)
                locked.save(replace(record, time_out=now, status=decision.status))
                logger.info("User %s checked out at %s", user.user_id, now.isoformat())
                return ScanResult(
                    action=ScanAction.CHECK_OUT,
                    time=now,
                    user_id=user.user_id,
                    user_name=user.name,
                )

            logger.info("Scan rejected for user %s: already checked out on %s", user.user_id, today)
            raise AlreadyCheckedOut()
