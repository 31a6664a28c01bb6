from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import AUTO_CHECKOUT_EXTENSION_MINUTES, LATE_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus
from ..schedules.model import ShiftWindow
from .model import AttendanceRecord
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy, ClosingStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.no_time_out_strategy import NoTimeOutStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    late_threshold_minutes: int = LATE_THRESHOLD_MINUTES
    checkout_extension_minutes: int = AUTO_CHECKOUT_EXTENSION_MINUTES

    def for_checkin(self, *, now: datetime, window: ShiftWindow) -> AttendanceStrategy:
        # Strictly more than the threshold: exactly 15 minutes after start is still Present.
        if now - window.start > timedelta(minutes=self.late_threshold_minutes):
            return LateStrategy()
        return PresentStrategy()

    def for_checkout(self, *, current_status: AttendanceStatus) -> AttendanceStrategy:
        if current_status == AttendanceStatus.LATE:
            return LateStrategy()
        return PresentStrategy()

    def for_close(self, record: Optional[AttendanceRecord]) -> Optional[ClosingStrategy]:
        """None means the day is already complete and must not be touched."""
        if record is not None and record.time_out is not None:
            return None
        if record is None or record.time_in is None:
            return AbsentStrategy()
        return NoTimeOutStrategy(timedelta(minutes=self.checkout_extension_minutes))
