from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, ContextManager, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


@dataclass
class LockedAttendance:
    """Handle on a (user, date) ledger row held under an exclusive lock.

    ``record`` is None when no row exists and none was requested.
    ``save`` inserts or updates the row inside the same transaction.
    """

    record: Optional[AttendanceRecord]
    created: bool
    _save: Callable[[AttendanceRecord], AttendanceRecord] = field(repr=False)

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        self.record = self._save(record)
        return self.record


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def lock_for_update(
        self,
        *,
        user_id: int,
        work_date: date,
        create_status: Optional[AttendanceStatus] = None,
    ) -> ContextManager[LockedAttendance]:
        """Serialize writers of one (user, date) row.

        With ``create_status`` the row is created first if missing (get-or-create).
        Leaving the block commits; an exception rolls everything back.
        """

        raise NotImplementedError

    def last_work_date(self, user_id: int) -> Optional[date]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
