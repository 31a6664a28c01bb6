from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from ..attendance.model import AttendanceRecord
from ..core.constants import (
    CHECK_IN_REMINDER_LEAD_MINUTES,
    CHECK_OUT_REMINDER_LEAD_MINUTES,
    LATE_CHECK_IN_ALERT_MINUTES,
    MISSED_CHECK_OUT_ALERT_MINUTES,
    REMINDER_WINDOW_MINUTES,
)
from ..core.enums import ReminderType
from ..schedules.model import ShiftWindow


@dataclass(frozen=True)
class DueReminder:
    reminder_type: ReminderType
    scheduled_time: datetime


def _within(now: datetime, opens: datetime, closes: datetime) -> bool:
    return opens <= now < closes


def evaluate_reminders(
    window: ShiftWindow,
    record: Optional[AttendanceRecord],
    now: datetime,
) -> List[DueReminder]:
    """Return the reminders due for one shift at ``now``.

    Pure function. Each reminder has a half-open window one batch interval wide,
    so a runner invoked every 15 minutes fires each reminder at most once.
    Holidays are the caller's concern.
    """
    width = timedelta(minutes=REMINDER_WINDOW_MINUTES)
    timed_in = record is not None and record.time_in is not None
    timed_out = record is not None and record.time_out is not None

    due: List[DueReminder] = []

    if not timed_in:
        opens = window.start - timedelta(minutes=CHECK_IN_REMINDER_LEAD_MINUTES)
        if _within(now, opens, window.start):
            due.append(DueReminder(ReminderType.CHECK_IN, window.start))

        opens = window.start + timedelta(minutes=LATE_CHECK_IN_ALERT_MINUTES)
        if _within(now, opens, opens + width):
            due.append(DueReminder(ReminderType.LATE_CHECK_IN, window.start))

    if timed_in and not timed_out:
        opens = window.end - timedelta(minutes=CHECK_OUT_REMINDER_LEAD_MINUTES)
        if _within(now, opens, window.end):
            due.append(DueReminder(ReminderType.CHECK_OUT, window.end))

        opens = window.end + timedelta(minutes=MISSED_CHECK_OUT_ALERT_MINUTES)
        if _within(now, opens, opens + width):
            due.append(DueReminder(ReminderType.MISSED_CHECK_OUT, window.end))

    return due
