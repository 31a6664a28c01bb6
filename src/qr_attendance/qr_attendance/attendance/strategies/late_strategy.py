from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...schedules.model import ShiftWindow
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in. Check-out keeps the Late classification."""

    def decide_checkin(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)

    def decide_checkout(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
