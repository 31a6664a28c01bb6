from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta, tzinfo
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.exceptions import NegativeDuration
from ..schedules.model import Schedule


@dataclass(frozen=True)
class DerivedDuration:
    """Worked hours of one record. Never persisted, recomputed on every read."""

    total_hours: float
    overtime_hours: float

    @property
    def is_overtime(self) -> bool:
        return self.overtime_hours > 0


def _hours(delta: timedelta) -> float:
    return round(delta.total_seconds() / 3600, 2)


def format_hours(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:.2f} Hours"


class DurationCalculator:
    """Rule: (out - in) minus the scheduled break once the worker reached it."""

    def __init__(self, tz: tzinfo):
        self._tz = tz

    def calculate(self, record: AttendanceRecord, schedule: Optional[Schedule]) -> Optional[DerivedDuration]:
        if record.time_in is None or record.time_out is None:
            return None

        if record.time_out < record.time_in:
            raise NegativeDuration(
                user_id=record.user_id,
                work_date=record.work_date,
                time_in=record.time_in,
                time_out=record.time_out,
            )

        elapsed = record.time_out - record.time_in
        if schedule is None:
            return DerivedDuration(total_hours=_hours(elapsed), overtime_hours=0.0)

        window = schedule.window_on(record.work_date, self._tz)

        worked = elapsed
        if window.break_start is not None:
            reached_break = record.time_out >= window.break_start or record.time_out.date() > record.time_in.date()
            if reached_break:
                worked -= min(timedelta(hours=schedule.break_hours), elapsed)

        overtime = max(timedelta(0), record.time_out - window.end)
        return DerivedDuration(total_hours=_hours(worked), overtime_hours=_hours(overtime))
