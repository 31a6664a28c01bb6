from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.datetime_utils import parse_time_of_day
from ..common.validators import require_day_of_week, require_non_negative
from ..core.exceptions import ValidationError
from .model import Schedule
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def list_for_user(self, user_id: int) -> Sequence[Schedule]:
        return self._schedules.list_for_user(user_id=int(user_id))

    def replace_week(self, *, user_id: int, entries: Sequence[Mapping[str, Any]]) -> Sequence[Schedule]:
        if int(user_id) <= 0:
            raise ValidationError("Invalid user")

        parsed: list[Schedule] = []
        seen: set[int] = set()
        for entry in entries:
            day = require_day_of_week(entry.get("day_of_week"))
            if day in seen:
                raise ValidationError(f"Duplicate schedule for day {day}")
            seen.add(day)

            start = parse_time_of_day(entry.get("start_time"))
            end = parse_time_of_day(entry.get("end_time"))
            if start == end:
                raise ValidationError("Start and end time cannot be equal")

            break_hours = require_non_negative(entry.get("break_hours") or 0, "break_hours")
            break_start = None
            if entry.get("break_start"):
                break_start = parse_time_of_day(entry["break_start"])
            if break_hours > 0 and break_start is None:
                raise ValidationError("break_start is required when break_hours is set")

            parsed.append(
                Schedule(
                    schedule_id=0,
                    user_id=int(user_id),
                    day_of_week=day,
                    start_time=start,
                    end_time=end,
                    break_start=break_start,
                    break_hours=break_hours,
                )
            )

        parsed.sort(key=lambda s: s.day_of_week)
        self._schedules.replace_for_user(user_id=int(user_id), schedules=parsed)
        return parsed
