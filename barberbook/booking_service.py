# barberbook/booking_service.py

import logging
from datetime import date, datetime, time, timedelta
from typing import List

from .booking import BookingResult, validate_booking
from .config import SLOT_MINUTES
from .core import compute_available_slots
from .errors import NotFoundError, RejectionReason, StaleSlotError, ValidationError
from .sources import BookingStore

logger = logging.getLogger(__name__)


def day_range(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class BookingService:
    """Composes the sources with the availability calculator and validator.

    The store is the only thing that knows about the backend; swapping it
    doesn't touch the booking rules.
    """

    def __init__(self, store: BookingStore, slot_minutes: int = SLOT_MINUTES):
        self.store = store
        self.slot_minutes = slot_minutes

    def _working_hours(self, establishment_id: int) -> dict:
        working_hours = self.store.get_working_hours(establishment_id)
        if working_hours is None:
            raise NotFoundError(f"Establishment {establishment_id} not found")
        return working_hours

    def _service_for(self, establishment_id: int, service_id):
        if service_id is None:
            return None
        service = self.store.get_service(service_id)
        if service is None or service.establishment_id != establishment_id:
            return None
        return service

    def list_available_slots(self, establishment_id: int, service_id: int, day: date) -> List[str]:
        working_hours = self._working_hours(establishment_id)
        service = self._service_for(establishment_id, service_id)
        if service is None:
            raise ValidationError(RejectionReason.unknown_service, f"Service {service_id} not found")

        appointments = self.store.get_appointments(establishment_id, *day_range(day))
        return compute_available_slots(
            day, working_hours, service, appointments, slot_minutes=self.slot_minutes
        )

    def submit_booking(self, request, client_id: int) -> BookingResult:
        """Validate `request` against fresh state and persist it if accepted."""
        establishment_id = request.establishment_id
        working_hours = self._working_hours(establishment_id)
        service = self._service_for(establishment_id, request.service_id)

        appointments = []
        if request.date is not None:
            appointments = self.store.get_appointments(establishment_id, *day_range(request.date))

        result = validate_booking(
            request,
            service,
            working_hours,
            appointments,
            requires_barber=self.store.has_staff(establishment_id),
            slot_minutes=self.slot_minutes,
        )
        if not result.accepted:
            return result

        barber_id = result.appointment.barber_id
        if barber_id is not None and not self.store.is_staff_member(establishment_id, barber_id):
            return BookingResult.reject(
                ValidationError(RejectionReason.missing_field, f"Barber {barber_id} does not work here")
            )

        try:
            appointment = self.store.add_appointment(result.appointment, client_id)
        except StaleSlotError as exc:
            logger.info(f"Booking lost a race for {request.date} {request.time} at establishment {establishment_id}")
            return BookingResult.reject(exc)

        logger.info(f"Appointment {appointment.id} booked at establishment {establishment_id} by client {client_id}")
        return BookingResult.accept(appointment)
