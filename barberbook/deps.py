# barberbook/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session, select

from .booking_service import BookingService
from .db import get_session
from .models import BarberProfile, Establishment
from .sources import SqlBookingStore


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_booking_service(session: Session = Depends(get_session)) -> BookingService:
    return BookingService(SqlBookingStore(session))


def get_own_profile(session: Session, user: dict) -> BarberProfile:
    require_role(user, "barber")
    profile = session.exec(
        select(BarberProfile).where(BarberProfile.user_id == user["id"])
    ).first()
    if profile is None:
        raise HTTPException(status_code=404, detail="Barber profile not found")
    return profile


def get_own_establishment(session: Session, user: dict) -> Establishment:
    profile = get_own_profile(session, user)
    establishment = session.exec(
        select(Establishment).where(Establishment.barber_id == profile.id)
    ).first()
    if establishment is None:
        raise HTTPException(status_code=409, detail="Establishment must be set up first")
    return establishment
