# barberbook/errors.py

from enum import Enum


class RejectionReason(str, Enum):
    missing_field = "MISSING_FIELD"
    unknown_service = "UNKNOWN_SERVICE"
    slot_unavailable = "SLOT_UNAVAILABLE"


class BookingError(Exception):
    """Base class for errors raised by the booking core."""


class InvalidArgument(BookingError, ValueError):
    """Malformed input to a pure computation (negative duration, bad HH:MM...)."""


class ConfigurationError(BookingError):
    """Working hours missing or malformed for the requested weekday."""


class NotFoundError(BookingError):
    pass


class ValidationError(BookingError):
    """A booking request that can't be accepted, with a user-facing reason code."""

    stale = False

    def __init__(self, reason: RejectionReason, detail: str):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


class StaleSlotError(ValidationError):
    """The slot was listable a moment ago but got taken since.

    Callers should ask the user to pick another time instead of retrying.
    """

    stale = True

    def __init__(self, detail: str = "Slot was taken, please choose another time"):
        super().__init__(RejectionReason.slot_unavailable, detail)
