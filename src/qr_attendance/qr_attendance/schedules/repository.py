from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    def get_for_user_and_day(self, *, user_id: int, day_of_week: int) -> Optional[Schedule]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int) -> Sequence[Schedule]:
        raise NotImplementedError

    def replace_for_user(self, *, user_id: int, schedules: Sequence[Schedule]) -> int:
        """Replace the user's whole weekly schedule atomically.

        Returns number of rows written.
        """

        raise NotImplementedError
