from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import ShiftWindow
from ..model import AttendanceRecord
from .base import ClosingStrategy, StatusDecision


class AbsentStrategy(ClosingStrategy):
    """No time in at all: the day closes as Absent."""

    def decide_close(self, *, now: datetime, window: ShiftWindow, record: Optional[AttendanceRecord]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
