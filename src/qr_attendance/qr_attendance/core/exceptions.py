class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NegativeDuration(DomainError):
    """Raised when a record's time_out precedes its time_in.

    This is a data-integrity problem and must be shown to admins, never
    coerced to zero.
    """

    def __init__(self, *, user_id: int, work_date, time_in, time_out):
        self.user_id = user_id
        self.work_date = work_date
        self.time_in = time_in
        self.time_out = time_out
        super().__init__(
            f"Time out {time_out:%H:%M:%S} is before time in {time_in:%H:%M:%S} "
            f"for user {user_id} on {work_date:%Y-%m-%d}"
        )


class ScanError(DomainError):
    """A scan was rejected. ``message`` is shown to the scanner operator."""

    message = "Scan rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidToken(ScanError):
    message = "Invalid QR Code"


class NoScheduleToday(ScanError):
    message = "No Schedule for Today"


class AlreadyCheckedOut(ScanError):
    message = "Already Checked Out"
