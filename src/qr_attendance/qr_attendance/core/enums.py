from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization at the API boundary."""

    ADMIN = "admin"
    USER = "user"


class AttendanceStatus(str, Enum):
    """Attendance status values as stored in the ledger."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    NO_TIME_OUT = "No Time Out"
    UNSCHEDULED = "Unscheduled"


class HolidayType(str, Enum):
    PUBLIC = "public"
    COMPANY = "company"


class ScanAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class ReminderType(str, Enum):
    CHECK_IN = "check_in"
    LATE_CHECK_IN = "late_check_in"
    CHECK_OUT = "check_out"
    MISSED_CHECK_OUT = "missed_check_out"
