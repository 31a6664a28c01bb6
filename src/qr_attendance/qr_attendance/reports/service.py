from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_local, day_of_week
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NegativeDuration, ValidationError
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from ..users.repository import UserRepository
from .duration import DurationCalculator, format_hours

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict
    warnings: list[str]

    def to_dict(self) -> dict:
        return {"rows": self.rows, "summary": self.summary, "warnings": self.warnings}


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        schedules: ScheduleRepository,
        *,
        tz: tzinfo,
        calculator: Optional[DurationCalculator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._schedules = schedules
        self._tz = tz
        self._calculator = calculator or DurationCalculator(tz)

    def build_report(self, *, start: date, end: date, user_id: Optional[int] = None) -> ReportData:
        if start > end:
            raise ValidationError("Start date must be on or before end date")

        records = self._attendance.list_range(start=start, end=end, user_id=user_id)
        rows, warnings = self._rows(records)

        summary = {
            "total_days": len(rows),
            "present": 0,
            "late": 0,
            "absent": 0,
            "no_time_out": 0,
            "total_hours": 0.0,
            "overtime_hours": 0.0,
        }
        for r in rows:
            if r["status"] == AttendanceStatus.PRESENT.value:
                summary["present"] += 1
            elif r["status"] == AttendanceStatus.LATE.value:
                summary["late"] += 1
            elif r["status"] == AttendanceStatus.ABSENT.value:
                summary["absent"] += 1
            elif r["status"] == AttendanceStatus.NO_TIME_OUT.value:
                summary["no_time_out"] += 1
            summary["total_hours"] += r["total_hours"] or 0.0
            summary["overtime_hours"] += r["overtime_hours"] or 0.0

        summary["total_hours"] = round(summary["total_hours"], 2)
        summary["overtime_hours"] = round(summary["overtime_hours"], 2)
        return ReportData(rows=rows, summary=summary, warnings=warnings)

    def history(self, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        records = self._attendance.get_recent_for_user(int(user_id), int(limit))
        rows, _ = self._rows(records)
        return rows

    def dashboard_stats(self, today: date) -> dict:
        users = self._users.list_non_admin()
        records = self._attendance.list_range(start=today, end=today)
        statuses = [r.status for r in records]
        return {
            "date": today.strftime("%Y-%m-%d"),
            "total_users": len(users),
            "present": statuses.count(AttendanceStatus.PRESENT),
            "late": statuses.count(AttendanceStatus.LATE),
            "absent": statuses.count(AttendanceStatus.ABSENT),
            "timed_in": sum(1 for r in records if r.time_in is not None),
            "timed_out": sum(1 for r in records if r.time_out is not None),
        }

    def _rows(self, records: Sequence[AttendanceRecord]) -> tuple[list[dict], list[str]]:
        names: dict[int, str] = {}
        schedules: dict[tuple[int, int], Optional[Schedule]] = {}
        rows: list[dict] = []
        warnings: list[str] = []

        for rec in records:
            if rec.user_id not in names:
                user = self._users.get_by_id(rec.user_id)
                names[rec.user_id] = user.name if user else "-"

            key = (rec.user_id, day_of_week(rec.work_date))
            if key not in schedules:
                schedules[key] = self._schedules.get_for_user_and_day(user_id=key[0], day_of_week=key[1])

            warning = None
            try:
                duration = self._calculator.calculate(rec, schedules[key])
            except NegativeDuration as exc:
                logger.warning("Data integrity problem: %s", exc)
                warning = str(exc)
                warnings.append(warning)
                duration = None

            rows.append(
                {
                    "attendance_id": rec.attendance_id,
                    "user_id": rec.user_id,
                    "user_name": names[rec.user_id],
                    "work_date": rec.work_date.strftime("%Y-%m-%d"),
                    "time_in": as_local(rec.time_in, self._tz).strftime("%H:%M:%S") if rec.time_in else "-",
                    "time_out": as_local(rec.time_out, self._tz).strftime("%H:%M:%S") if rec.time_out else "-",
                    "status": rec.status.value,
                    "total_hours": duration.total_hours if duration else None,
                    "total_time": format_hours(duration.total_hours if duration else None),
                    "overtime_hours": duration.overtime_hours if duration else None,
                    "overtime": format_hours(duration.overtime_hours) if duration and duration.is_overtime else "-",
                    "is_overtime": bool(duration and duration.is_overtime),
                    "warning": warning,
                    "notes": rec.notes,
                }
            )

        return rows, warnings
