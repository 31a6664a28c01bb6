from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from ..core.enums import ReminderType
from ..users.model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderMessage:
    subject: str
    body: str


def build_message(reminder_type: ReminderType, scheduled_time: datetime) -> ReminderMessage:
    at = scheduled_time.strftime("%H:%M")

    if reminder_type == ReminderType.CHECK_IN:
        return ReminderMessage(
            subject="Reminder: Check-in Time Approaching",
            body=f"Your scheduled check-in time is in 15 minutes ({at}). Please remember to check in when you arrive.",
        )
    if reminder_type == ReminderType.LATE_CHECK_IN:
        return ReminderMessage(
            subject="Alert: You Haven't Checked In Yet",
            body=f"You haven't checked in yet. Your scheduled time was {at}. Please check in as soon as possible.",
        )
    if reminder_type == ReminderType.CHECK_OUT:
        return ReminderMessage(
            subject="Reminder: Check-out Time Approaching",
            body=f"Your scheduled check-out time is in 15 minutes ({at}). Please remember to check out when you leave.",
        )
    if reminder_type == ReminderType.MISSED_CHECK_OUT:
        return ReminderMessage(
            subject="Alert: You Haven't Checked Out Yet",
            body=f"You haven't checked out yet. Your scheduled time was {at}. Please check out as soon as possible.",
        )
    return ReminderMessage(subject="Attendance Reminder", body="This is an attendance reminder.")


class Notifier(Protocol):
    def notify(self, user: User, reminder_type: ReminderType, scheduled_time: datetime) -> None:
        """Fire-and-forget delivery. Implementations must not block the batch."""

        raise NotImplementedError


class LogNotifier(Notifier):
    """Default notifier: writes the reminder to the application log."""

    def notify(self, user: User, reminder_type: ReminderType, scheduled_time: datetime) -> None:
        message = build_message(reminder_type, scheduled_time)
        logger.info("Reminder for %s <%s>: %s | %s", user.name, user.email, message.subject, message.body)
