# barberbook/routers/services_routes.py

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberbook.db import get_session
from barberbook.models import Appointment, Establishment, Service
from barberbook.schemas import ServiceIn, ServicePublic
from barberbook.auth import get_current_user
from barberbook.deps import get_own_establishment

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


def _own_service(session: Session, establishment: Establishment, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if service is None or service.establishment_id != establishment.id:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(
    service: ServiceIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    establishment = get_own_establishment(session, current_user)

    db_service = Service(establishment_id=establishment.id, **service.model_dump())
    session.add(db_service)
    session.commit()
    session.refresh(db_service)

    logger.info(f"Service {db_service.id} created for establishment {establishment.id}")
    return db_service


@router.put("/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    service: ServiceIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    establishment = get_own_establishment(session, current_user)
    db_service = _own_service(session, establishment, service_id)

    for key, value in service.model_dump().items():
        setattr(db_service, key, value)
    db_service.updated_at = datetime.now()

    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


@router.delete("/{service_id}")
def delete_service(
    service_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    establishment = get_own_establishment(session, current_user)
    db_service = _own_service(session, establishment, service_id)

    # cancelled rows keep their service_id too
    booked = session.exec(
        select(Appointment).where(Appointment.service_id == service_id)
    ).first()
    if booked is not None:
        raise HTTPException(status_code=409, detail="Service still has appointments")

    session.delete(db_service)
    session.commit()

    logger.info(f"Service {service_id} removed from establishment {establishment.id}")
    return {"message": "Service removed"}
