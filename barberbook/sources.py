# barberbook/sources.py

import logging
from datetime import datetime
from typing import List, Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .booking import AppointmentCandidate
from .core import AppointmentStatus
from .errors import StaleSlotError
from .models import Appointment, Employee, Establishment, Service

logger = logging.getLogger(__name__)


class ScheduleSource(Protocol):
    def get_working_hours(self, establishment_id: int) -> Optional[dict]:
        """Weekly table for the establishment, None if it doesn't exist."""

    def has_staff(self, establishment_id: int) -> bool:
        ...

    def is_staff_member(self, establishment_id: int, barber_id: int) -> bool:
        ...


class AppointmentSource(Protocol):
    def get_appointments(self, establishment_id: int, range_start: datetime, range_end: datetime) -> List:
        """Non-cancelled appointments starting in [range_start, range_end)."""

    def add_appointment(self, candidate: AppointmentCandidate, client_id: int):
        ...


class ServiceSource(Protocol):
    def get_service(self, service_id: int):
        ...


class BookingStore(ScheduleSource, AppointmentSource, ServiceSource, Protocol):
    pass


class SqlBookingStore:
    """All three sources over one SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def get_working_hours(self, establishment_id: int) -> Optional[dict]:
        establishment = self.session.get(Establishment, establishment_id)
        if establishment is None:
            return None
        return establishment.working_hours or {}

    def has_staff(self, establishment_id: int) -> bool:
        employee = self.session.exec(
            select(Employee).where(Employee.establishment_id == establishment_id)
        ).first()
        return employee is not None

    def is_staff_member(self, establishment_id: int, barber_id: int) -> bool:
        employee = self.session.get(Employee, barber_id)
        return employee is not None and employee.establishment_id == establishment_id

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.session.get(Service, service_id)

    def get_appointments(self, establishment_id: int, range_start: datetime, range_end: datetime) -> List[Appointment]:
        return list(self.session.exec(
            select(Appointment)
            .where(Appointment.establishment_id == establishment_id)
            .where(Appointment.start_time >= range_start)
            .where(Appointment.start_time < range_end)
            .where(Appointment.status != AppointmentStatus.cancelled.value)
            .order_by(Appointment.start_time)
        ).all())

    def _start_taken(self, candidate: AppointmentCandidate) -> bool:
        clash = self.session.exec(
            select(Appointment)
            .where(Appointment.establishment_id == candidate.establishment_id)
            .where(Appointment.start_time == candidate.start_time)
            .where(Appointment.status != AppointmentStatus.cancelled.value)
        ).first()
        return clash is not None

    def add_appointment(self, candidate: AppointmentCandidate, client_id: int) -> Appointment:
        db_appt = Appointment(
            establishment_id=candidate.establishment_id,
            service_id=candidate.service_id,
            client_id=client_id,
            barber_id=candidate.barber_id,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            status=candidate.status.value,
        )
        self.session.add(db_appt)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            if self._start_taken(candidate):
                raise StaleSlotError()
            logger.exception(f"Could not store appointment for establishment {candidate.establishment_id}")
            raise

        self.session.refresh(db_appt)  # fills db_appt.id
        return db_appt
