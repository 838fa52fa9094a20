# barberbook/models.py

from typing import Optional
from datetime import datetime

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

from .core import AppointmentStatus


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # barber or client


class BarberProfile(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True)
    name: str
    email: str
    phone: str = ""
    bio: str = ""


class Establishment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barberprofile.id", unique=True)
    name: str
    phone: str = ""
    bio: str = ""
    address: dict = Field(default_factory=dict, sa_column=Column(JSON))
    # {"monday": {"start": "09:00", "end": "18:00", "enabled": true}, ...}
    working_hours: dict = Field(default_factory=dict, sa_column=Column(JSON))
    banner_url: str = ""
    profile_url: str = ""


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    establishment_id: int = Field(foreign_key="establishment.id", index=True)
    name: str
    duration_minutes: int
    price_cents: int
    description: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Employee(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    establishment_id: int = Field(foreign_key="establishment.id", index=True)
    name: str
    phone: str = ""
    email: str = ""
    photo_url: str = ""


class Appointment(SQLModel, table=True):
    __table_args__ = (
        # one live appointment per start; cancelled rows don't count
        Index(
            "uq_establishment_start",
            "establishment_id",
            "start_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    establishment_id: int = Field(foreign_key="establishment.id", index=True)
    service_id: int = Field(foreign_key="service.id")
    client_id: int = Field(foreign_key="user.id", index=True)
    barber_id: Optional[int] = Field(default=None, foreign_key="employee.id")
    start_time: datetime = Field(index=True)
    end_time: datetime
    status: str = AppointmentStatus.scheduled.value
