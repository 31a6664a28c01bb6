from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import HolidayType


@dataclass(frozen=True)
class Holiday:
    """Domain entity: a date exempted from absence marking and reminders."""

    holiday_id: int
    name: str
    holiday_date: date
    holiday_type: HolidayType = HolidayType.PUBLIC
    is_recurring: bool = False

    def matches(self, value: date) -> bool:
        if value == self.holiday_date:
            return True
        return self.is_recurring and (value.month, value.day) == (self.holiday_date.month, self.holiday_date.day)
