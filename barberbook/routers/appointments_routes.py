# barberbook/routers/appointments_routes.py

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberbook.booking_service import BookingService
from barberbook.core import AppointmentStatus
from barberbook.db import get_session
from barberbook.errors import NotFoundError, RejectionReason
from barberbook.models import Appointment, BarberProfile, Establishment
from barberbook.schemas import AppointmentPublic, BookingRequest
from barberbook.auth import get_current_user
from barberbook.deps import get_booking_service, get_own_establishment, require_role

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["appointments"],
)

REJECTION_STATUS = {
    RejectionReason.missing_field: 422,
    RejectionReason.unknown_service: 404,
    RejectionReason.slot_unavailable: 409,
}

STATUS_FILTERS = ("all",) + tuple(status.value for status in AppointmentStatus)


def _check_status_filter(status: str):
    if status not in STATUS_FILTERS:
        raise HTTPException(status_code=422, detail=f"status must be one of {', '.join(STATUS_FILTERS)}")


@router.post("/establishments/{establishment_id}/appointments", response_model=AppointmentPublic, status_code=201)
def book_appointment(
    establishment_id: int,
    booking_request: BookingRequest,
    booking: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")

    # establishment comes from the path
    booking_request = booking_request.model_copy(update={"establishment_id": establishment_id})
    try:
        result = booking.submit_booking(booking_request, client_id=current_user["id"])
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    if not result.accepted:
        raise HTTPException(
            status_code=REJECTION_STATUS[result.reason],
            detail={
                "reason": result.reason.value,
                "stale": result.error.stale,
                "message": result.error.detail,
            },
        )
    return result.appointment


@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # 1) Find the appointment in DB
    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")

    # 2) Already cancelled?
    if target.status == AppointmentStatus.cancelled.value:
        raise HTTPException(status_code=409, detail="Appointment already cancelled")

    # 3) Authorization: client who booked OR the establishment's barber
    allowed = target.client_id == current_user["id"]
    if not allowed and current_user["role"] == "barber":
        owner = session.exec(
            select(Establishment)
            .join(BarberProfile, Establishment.barber_id == BarberProfile.id)
            .where(BarberProfile.user_id == current_user["id"])
            .where(Establishment.id == target.establishment_id)
        ).first()
        allowed = owner is not None
    if not allowed:
        raise HTTPException(status_code=403, detail="Forbidden")

    # 4) Cancel and persist
    target.status = AppointmentStatus.cancelled.value
    session.add(target)
    session.commit()
    session.refresh(target)

    logger.info(f"Appointment {appt_id} cancelled by user {current_user['id']}")
    return target


@router.get("/establishments/me/appointments", response_model=List[AppointmentPublic])
def list_establishment_appointments(
    status: str = AppointmentStatus.scheduled.value,
    on_date: Optional[date] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    establishment = get_own_establishment(session, current_user)
    _check_status_filter(status)

    stmt = select(Appointment).where(Appointment.establishment_id == establishment.id)

    if on_date is not None:
        day_start_dt = datetime.combine(on_date, time.min)
        day_end_dt = day_start_dt + timedelta(days=1)
        stmt = stmt.where(Appointment.start_time >= day_start_dt).where(Appointment.start_time < day_end_dt)

    if status != "all":
        stmt = stmt.where(Appointment.status == status)

    return session.exec(stmt.order_by(Appointment.start_time)).all()


@router.get("/clients/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    status: str = AppointmentStatus.scheduled.value,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    _check_status_filter(status)

    stmt = select(Appointment).where(Appointment.client_id == current_user["id"])

    if status != "all":
        stmt = stmt.where(Appointment.status == status)

    return session.exec(stmt.order_by(Appointment.start_time)).all()
