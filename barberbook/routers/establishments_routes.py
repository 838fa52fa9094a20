# barberbook/routers/establishments_routes.py

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberbook.booking_service import BookingService
from barberbook.db import get_session
from barberbook.errors import NotFoundError, ValidationError
from barberbook.models import Employee, Establishment, Service
from barberbook.schemas import (
    AvailabilityResponse,
    EmployeeIn,
    EmployeePublic,
    EstablishmentIn,
    EstablishmentPublic,
    ServicePublic,
)
from barberbook.auth import get_current_user
from barberbook.deps import get_booking_service, get_own_establishment, get_own_profile

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/establishments",
    tags=["establishments"],
)


# Creates or updates the barber's establishment, working hours included
@router.put("/me", response_model=EstablishmentPublic)
def upsert_establishment(
    establishment: EstablishmentIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    profile = get_own_profile(session, current_user)
    data = establishment.model_dump()

    # One establishment per barber
    db_establishment = session.exec(
        select(Establishment).where(Establishment.barber_id == profile.id)
    ).first()
    if db_establishment is None:
        db_establishment = Establishment(barber_id=profile.id, **data)
    else:
        for key, value in data.items():
            setattr(db_establishment, key, value)

    session.add(db_establishment)
    session.commit()
    session.refresh(db_establishment)

    logger.info(f"Establishment {db_establishment.id} saved by barber {profile.id}")
    return db_establishment


@router.get("/me", response_model=EstablishmentPublic)
def get_my_establishment(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return get_own_establishment(session, current_user)


@router.post("/me/employees", response_model=EmployeePublic, status_code=201)
def add_employee(
    employee: EmployeeIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    establishment = get_own_establishment(session, current_user)

    db_employee = Employee(establishment_id=establishment.id, **employee.model_dump())
    session.add(db_employee)
    session.commit()
    session.refresh(db_employee)

    logger.info(f"Employee {db_employee.name} added to establishment {establishment.id}")
    return db_employee


@router.get("/me/employees", response_model=List[EmployeePublic])
def list_employees(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    establishment = get_own_establishment(session, current_user)
    return session.exec(
        select(Employee).where(Employee.establishment_id == establishment.id).order_by(Employee.name)
    ).all()


@router.get("/{establishment_id}", response_model=EstablishmentPublic)
def get_establishment(
    establishment_id: int,
    session: Session = Depends(get_session),
):
    establishment = session.get(Establishment, establishment_id)
    if establishment is None:
        raise HTTPException(status_code=404, detail="Establishment not found")
    return establishment


@router.get("/{establishment_id}/services", response_model=List[ServicePublic])
def list_services(
    establishment_id: int,
    session: Session = Depends(get_session),
):
    if session.get(Establishment, establishment_id) is None:
        raise HTTPException(status_code=404, detail="Establishment not found")
    return session.exec(
        select(Service)
        .where(Service.establishment_id == establishment_id)
        .order_by(Service.created_at.desc())
    ).all()


@router.get("/{establishment_id}/availability", response_model=AvailabilityResponse)
def establishment_availability(
    establishment_id: int,
    service_id: int,
    date: date,
    booking: BookingService = Depends(get_booking_service),
):
    try:
        slots = booking.list_available_slots(establishment_id, service_id, date)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValidationError as exc:
        raise HTTPException(status_code=404, detail=exc.detail)

    return {
        "establishment_id": establishment_id,
        "service_id": service_id,
        "date": date,
        "available_starts": slots,
    }
