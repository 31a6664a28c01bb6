from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import HolidayType
from .model import Holiday


class HolidayRepository(Protocol):
    def exists_on(self, value: date) -> bool:
        """Exact date match, or a recurring holiday on the same month/day."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, name: str, holiday_date: date, holiday_type: HolidayType, is_recurring: bool) -> int:
        raise NotImplementedError

    def delete(self, *, holiday_id: int) -> bool:
        raise NotImplementedError
