from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.enums import HolidayType
from ..core.exceptions import ValidationError
from .model import Holiday
from .repository import HolidayRepository


class HolidayCalendar:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def is_holiday(self, value: date) -> bool:
        return self._holidays.exists_on(value)

    def list_all(self) -> Sequence[Holiday]:
        return self._holidays.list_all()

    def create(self, *, name: str, holiday_date: date, holiday_type: str = "public", is_recurring: bool = False) -> int:
        name = require_non_empty(name, "Holiday name")
        try:
            kind = HolidayType(holiday_type)
        except ValueError:
            raise ValidationError("Holiday type must be 'public' or 'company'")
        return self._holidays.create(name=name, holiday_date=holiday_date, holiday_type=kind, is_recurring=bool(is_recurring))

    def delete(self, holiday_id: int) -> None:
        if not self._holidays.delete(holiday_id=int(holiday_id)):
            raise ValidationError("Holiday not found")
