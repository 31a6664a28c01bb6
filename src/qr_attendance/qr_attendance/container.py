from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.correction import AttendanceCorrectionService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import ScanResolver
from .common.datetime_utils import get_timezone
from .core.constants import DEFAULT_MAX_LOOKBACK_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayCalendar
from .reconciliation.service import EndOfDayReconciler
from .reminders.notifier import LogNotifier, Notifier
from .reminders.service import ReminderService
from .reports.service import AttendanceReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import QRTokenService


@dataclass(frozen=True)
class Container:
    tz: tzinfo

    users_repo: UserRepository
    schedules_repo: ScheduleRepository
    holidays_repo: HolidayRepository
    attendance_repo: AttendanceRepository

    scan_resolver: ScanResolver
    correction_service: AttendanceCorrectionService
    reconciler: EndOfDayReconciler
    reminder_service: ReminderService
    report_service: AttendanceReportService
    schedule_service: ScheduleService
    holiday_calendar: HolidayCalendar
    qr_token_service: QRTokenService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    users_repo: UserRepository,
    schedules_repo: ScheduleRepository,
    holidays_repo: HolidayRepository,
    attendance_repo: AttendanceRepository,
    tz: tzinfo,
    max_lookback_days: int = DEFAULT_MAX_LOOKBACK_DAYS,
    notifier: Optional[Notifier] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""
    strategy_factory = AttendanceStrategyFactory()
    holiday_calendar = HolidayCalendar(holidays_repo)

    return Container(
        tz=tz,
        users_repo=users_repo,
        schedules_repo=schedules_repo,
        holidays_repo=holidays_repo,
        attendance_repo=attendance_repo,
        scan_resolver=ScanResolver(
            attendance_repo,
            users_repo,
            schedules_repo,
            tz=tz,
            strategy_factory=strategy_factory,
        ),
        correction_service=AttendanceCorrectionService(
            attendance_repo,
            users_repo,
            schedules_repo,
            tz=tz,
            strategy_factory=strategy_factory,
        ),
        reconciler=EndOfDayReconciler(
            attendance_repo,
            users_repo,
            schedules_repo,
            holiday_calendar,
            tz=tz,
            strategy_factory=strategy_factory,
            max_lookback_days=max_lookback_days,
        ),
        reminder_service=ReminderService(
            attendance_repo,
            users_repo,
            schedules_repo,
            holiday_calendar,
            notifier or LogNotifier(),
            tz=tz,
        ),
        report_service=AttendanceReportService(attendance_repo, users_repo, schedules_repo, tz=tz),
        schedule_service=ScheduleService(schedules_repo),
        holiday_calendar=holiday_calendar,
        qr_token_service=QRTokenService(users_repo),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str | None = None,
    max_lookback_days: int = DEFAULT_MAX_LOOKBACK_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    tz = get_timezone(timezone)

    return assemble(
        users_repo=MySQLUserRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn, tz=tz),
        tz=tz,
        max_lookback_days=max_lookback_days,
        conn=conn,
    )
