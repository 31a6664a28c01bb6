from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import ShiftWindow
from ..model import AttendanceRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    time_out: Optional[datetime] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how a scan decides the attendance status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError


class ClosingStrategy(ABC):
    """Strategy Pattern: how the end-of-day sweep closes an unfinished day."""

    @abstractmethod
    def decide_close(self, *, now: datetime, window: ShiftWindow, record: Optional[AttendanceRecord]) -> StatusDecision:
        raise NotImplementedError
