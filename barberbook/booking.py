# barberbook/booking.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel

from .core import DEFAULT_SLOT_MINUTES, AppointmentStatus, compute_available_slots, grid_starts
from .errors import ConfigurationError, InvalidArgument, RejectionReason, StaleSlotError, ValidationError
from .timeutils import at_minutes, day_window, parse_hhmm

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("service_id", "date", "time")


class AppointmentCandidate(BaseModel):
    establishment_id: Optional[int] = None
    service_id: int
    barber_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = AppointmentStatus.scheduled


@dataclass
class BookingResult:
    """Tagged outcome of a booking attempt.

    Exactly one of `appointment` / `error` is set. `appointment` is the
    candidate from the validator, or the persisted row once stored.
    """

    appointment: Optional[Any] = None
    error: Optional[ValidationError] = None

    @property
    def accepted(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> Optional[RejectionReason]:
        return self.error.reason if self.error is not None else None

    @classmethod
    def accept(cls, appointment) -> "BookingResult":
        return cls(appointment=appointment)

    @classmethod
    def reject(cls, error: ValidationError) -> "BookingResult":
        return cls(error=error)


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _was_listable(request, service, working_hours, slot_minutes: int) -> bool:
    # True when the time is on the bare working-hours grid, i.e. only an
    # appointment keeps it out of the listing.
    try:
        window = day_window(working_hours, request.date)
        start = parse_hhmm(request.time)
    except (ConfigurationError, InvalidArgument):
        return False
    if window is None:
        return False
    return start in grid_starts(window, service.duration_minutes, slot_minutes)


def validate_booking(
    request,
    service,
    working_hours: Optional[Mapping[str, Any]],
    existing_appointments: Iterable[Any] = (),
    requires_barber: bool = False,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
) -> BookingResult:
    """Accept or reject `request` against the current appointment snapshot.

    Never raises for a rejectable request: the reason travels in the result.
    On acceptance the result carries an AppointmentCandidate; persisting it
    is up to the caller.
    """
    # 1) Required fields
    missing = [name for name in REQUIRED_FIELDS if _is_missing(getattr(request, name, None))]
    if requires_barber and _is_missing(getattr(request, "barber_id", None)):
        missing.append("barber_id")
    if missing:
        return BookingResult.reject(
            ValidationError(RejectionReason.missing_field, f"Missing required fields: {', '.join(missing)}")
        )

    # 2) Service must resolve
    if service is None or service.id != request.service_id:
        return BookingResult.reject(
            ValidationError(RejectionReason.unknown_service, f"Service {request.service_id} not found")
        )

    # 3) Re-check the slot against the current appointments
    existing_appointments = list(existing_appointments)
    slots = compute_available_slots(
        request.date, working_hours, service, existing_appointments, slot_minutes=slot_minutes
    )
    if request.time not in slots:
        if _was_listable(request, service, working_hours, slot_minutes):
            error = StaleSlotError()
        else:
            error = ValidationError(
                RejectionReason.slot_unavailable,
                f"{request.time} on {request.date.isoformat()} is not an available slot",
            )
        logger.info(f"Booking rejected ({error.reason.value}): {error.detail}")
        return BookingResult.reject(error)

    start = at_minutes(request.date, parse_hhmm(request.time))
    return BookingResult.accept(
        AppointmentCandidate(
            establishment_id=getattr(request, "establishment_id", None),
            service_id=service.id,
            barber_id=getattr(request, "barber_id", None),
            start_time=start,
            end_time=start + timedelta(minutes=service.duration_minutes),
        )
    )
