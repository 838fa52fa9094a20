# barberbook/routers/barbers_routes.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberbook.db import get_session
from barberbook.models import BarberProfile, Establishment
from barberbook.schemas import BarberProfileIn, BarberProfilePublic, BarberListing
from barberbook.auth import get_current_user
from barberbook.deps import require_role, get_own_profile

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


def _matches(query: str, profile: BarberProfile, establishment: Optional[Establishment]) -> bool:
    haystack = [profile.name]
    if establishment is not None:
        haystack.append(establishment.name)
        haystack.append((establishment.address or {}).get("city", ""))
    return any(query in (text or "").lower() for text in haystack)


@router.get("", response_model=List[BarberListing])
def list_barbers(
    q: Optional[str] = None,
    session: Session = Depends(get_session),
):
    rows = session.exec(
        select(BarberProfile, Establishment)
        .join(Establishment, Establishment.barber_id == BarberProfile.id, isouter=True)
        .order_by(BarberProfile.name)
    ).all()

    query = q.strip().lower() if q else ""
    listings = []
    for profile, establishment in rows:
        if query and not _matches(query, profile, establishment):
            continue
        listing = {
            "id": profile.id,
            "name": profile.name,
            "phone": profile.phone,
            "bio": profile.bio,
            "email": profile.email,
        }
        if establishment is not None:
            listing.update(
                establishment_id=establishment.id,
                establishment_name=establishment.name,
                banner_url=establishment.banner_url,
                profile_url=establishment.profile_url,
                address=establishment.address,
            )
        listings.append(listing)

    logger.info(f"Returned {len(listings)} barber profiles")
    return listings


@router.post("/me", response_model=BarberProfilePublic, status_code=201)
def create_profile(
    profile: BarberProfileIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")

    existing = session.exec(
        select(BarberProfile).where(BarberProfile.user_id == current_user["id"])
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Barber profile already exists")

    db_profile = BarberProfile(user_id=current_user["id"], **profile.model_dump())
    session.add(db_profile)
    session.commit()
    session.refresh(db_profile)

    logger.info(f"Barber profile created for user {current_user['id']}")
    return db_profile


@router.get("/me", response_model=BarberProfilePublic)
def get_profile(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return get_own_profile(session, current_user)


@router.put("/me", response_model=BarberProfilePublic)
def update_profile(
    profile: BarberProfileIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    db_profile = get_own_profile(session, current_user)
    for key, value in profile.model_dump().items():
        setattr(db_profile, key, value)

    session.add(db_profile)
    session.commit()
    session.refresh(db_profile)
    return db_profile


@router.delete("/me")
def delete_profile(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    db_profile = get_own_profile(session, current_user)
    establishment = session.exec(
        select(Establishment).where(Establishment.barber_id == db_profile.id)
    ).first()
    if establishment is not None:
        raise HTTPException(status_code=409, detail="Remove the establishment before the profile")

    session.delete(db_profile)
    session.commit()

    logger.info(f"Barber profile removed for user {current_user['id']}")
    return {"message": "Barber profile removed"}
