from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import combine_local


@dataclass(frozen=True)
class Schedule:
    """Domain entity: a user's working hours on one weekday (0 = Sunday)."""

    schedule_id: int
    user_id: int
    day_of_week: int
    start_time: time
    end_time: time
    break_start: Optional[time] = None
    break_hours: float = 0.0

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_hours > 0

    def window_on(self, work_date: date, tz: tzinfo) -> "ShiftWindow":
        return ShiftWindow.for_schedule(self, work_date, tz)


@dataclass(frozen=True)
class ShiftWindow:
    """Concrete instants of a scheduled shift on a calendar date."""

    work_date: date
    start: datetime
    end: datetime
    break_start: Optional[datetime] = None

    @classmethod
    def for_schedule(cls, schedule: Schedule, work_date: date, tz: tzinfo) -> "ShiftWindow":
        start = combine_local(work_date, schedule.start_time, tz)
        end = combine_local(work_date, schedule.end_time, tz)
        if end < start:
            end = combine_local(work_date + timedelta(days=1), schedule.end_time, tz)

        break_start = None
        if schedule.has_break:
            break_start = combine_local(work_date, schedule.break_start, tz)
            # A break earlier in the clock than the shift start belongs to the overnight part.
            if break_start < start:
                break_start = combine_local(work_date + timedelta(days=1), schedule.break_start, tz)

        return cls(work_date=work_date, start=start, end=end, break_start=break_start)
