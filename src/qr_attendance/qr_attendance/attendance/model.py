from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ScanAction


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one ledger row per (user, work_date).

    ``attendance_id`` is None until the row has been persisted.
    """

    user_id: int
    work_date: date
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    notes: Optional[str] = None
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class ScanResult:
    action: ScanAction
    time: datetime
    user_id: int
    user_name: str
    status: Optional[AttendanceStatus] = None

    @property
    def message(self) -> str:
        if self.action == ScanAction.CHECK_OUT:
            return "Timed Out"
        if self.status == AttendanceStatus.LATE:
            return "You are Late"
        return "Time In Successful"

    def to_dict(self) -> dict:
        data = {
            "action": self.action.value,
            "time": self.time.strftime("%H:%M:%S"),
            "user_name": self.user_name,
        }
        if self.status is not None:
            data["status"] = self.status.value
        return data
