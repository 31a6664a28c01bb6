from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_clock_time(value: str) -> time:
    """Hour and minute from HH:MM or a datetime-local value (YYYY-MM-DDTHH:MM)."""
    v = (value or "").strip()
    if "T" in v:
        v = v.split("T", 1)[1]
    parsed = parse_time_of_day(v[:8])
    return parsed.replace(second=0, microsecond=0)


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time-of-day."""
    v = (value or "").strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def get_timezone(name: str | None) -> tzinfo:
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name!r}")


def now_local(tz: tzinfo) -> datetime:
    """Current time in the deployment timezone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(tz)


def combine_local(work_date: date, time_of_day: time, tz: tzinfo) -> datetime:
    """Calendar date + time-of-day -> aware instant in ``tz``."""
    return datetime.combine(work_date, time_of_day.replace(tzinfo=None), tzinfo=tz)


def as_local(value: datetime, tz: tzinfo) -> datetime:
    """Interpret naive values (as stored by MySQL DATETIME) as local time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def day_of_week(value: date) -> int:
    """0 = Sunday, 1 = Monday, ..., 6 = Saturday."""
    return (value.weekday() + 1) % 7
