"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Manila"
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_MAX_LOOKBACK_DAYS = 30

# Check-in later than this many minutes after the scheduled start is Late.
LATE_THRESHOLD_MINUTES = 15

# Forgotten check-outs are closed this long after the scheduled end.
AUTO_CHECKOUT_EXTENSION_MINUTES = 60

REMINDER_WINDOW_MINUTES = 15
CHECK_IN_REMINDER_LEAD_MINUTES = 15
LATE_CHECK_IN_ALERT_MINUTES = 30
CHECK_OUT_REMINDER_LEAD_MINUTES = 15
MISSED_CHECK_OUT_ALERT_MINUTES = 60

QR_TOKEN_BYTES = 24  # 32 url-safe characters
