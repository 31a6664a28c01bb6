from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_day_of_week(value, field_name: str = "day_of_week") -> int:
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer 0-6")
    if not 0 <= day <= 6:
        raise ValidationError(f"{field_name} must be between 0 (Sunday) and 6 (Saturday)")
    return day


def require_non_negative(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number
