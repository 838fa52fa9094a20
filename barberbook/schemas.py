# barberbook/schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum
from datetime import datetime, date as Date
from typing import List, Optional

from .timeutils import parse_hhmm


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    barber = "barber"
    client = "client"


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class BarberProfileIn(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str = ""
    bio: str = ""


class BarberProfilePublic(BarberProfileIn):
    id: int
    user_id: int


class BarberListing(BaseModel):
    id: int
    name: str
    phone: str
    bio: str
    email: str
    establishment_id: Optional[int] = None
    establishment_name: Optional[str] = None
    banner_url: Optional[str] = None
    profile_url: Optional[str] = None
    address: Optional[dict] = None


class WorkingDay(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: str
    end: str
    enabled: bool

    @field_validator("start", "end")
    @classmethod
    def check_hhmm(cls, value: str) -> str:
        parse_hhmm(value)
        return value

    @model_validator(mode="after")
    def check_order(self):
        if self.enabled and parse_hhmm(self.start) >= parse_hhmm(self.end):
            raise ValueError("start must be before end on enabled days")
        return self


class WorkingHours(BaseModel):
    """The persisted weekly table, keyed by lowercase English weekday."""

    model_config = ConfigDict(extra="forbid")

    monday: WorkingDay
    tuesday: WorkingDay
    wednesday: WorkingDay
    thursday: WorkingDay
    friday: WorkingDay
    saturday: WorkingDay
    sunday: WorkingDay


class Address(BaseModel):
    street: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""


class EstablishmentIn(BaseModel):
    name: str = Field(min_length=1)
    phone: str = ""
    bio: str = ""
    address: Address = Field(default_factory=Address)
    working_hours: WorkingHours
    banner_url: str = ""
    profile_url: str = ""


class EstablishmentPublic(EstablishmentIn):
    id: int
    barber_id: int


class ServiceIn(BaseModel):
    name: str = Field(min_length=1)
    duration_minutes: int = Field(gt=0)
    price_cents: int = Field(ge=0)
    description: str = ""


class ServicePublic(ServiceIn):
    id: int
    establishment_id: int


class EmployeeIn(BaseModel):
    name: str = Field(min_length=1)
    phone: str = ""
    email: str = ""
    photo_url: str = ""


class EmployeePublic(EmployeeIn):
    id: int
    establishment_id: int


class BookingRequest(BaseModel):
    # Everything optional so missing fields come back as MISSING_FIELD
    establishment_id: Optional[int] = None
    service_id: Optional[int] = None
    date: Optional[Date] = None
    time: Optional[str] = None
    barber_id: Optional[int] = None


class AppointmentPublic(BaseModel):
    id: int
    establishment_id: int
    service_id: int
    client_id: int
    barber_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    status: str


class AvailabilityResponse(BaseModel):
    establishment_id: int
    service_id: int
    date: Date
    available_starts: List[str]
