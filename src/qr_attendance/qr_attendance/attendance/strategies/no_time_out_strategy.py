from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import ShiftWindow
from ..model import AttendanceRecord
from .base import ClosingStrategy, StatusDecision


class NoTimeOutStrategy(ClosingStrategy):
    """Checked in but never checked out.

    Once the extended check-out instant (scheduled end + extension) has passed,
    it becomes the recorded time out. Before that the time out stays open.
    """

    def __init__(self, extension: timedelta):
        self._extension = extension

    def decide_close(self, *, now: datetime, window: ShiftWindow, record: Optional[AttendanceRecord]) -> StatusDecision:
        extended_checkout = window.end + self._extension
        if now > extended_checkout:
            return StatusDecision(status=AttendanceStatus.NO_TIME_OUT, time_out=extended_checkout)
        return StatusDecision(status=AttendanceStatus.NO_TIME_OUT)
