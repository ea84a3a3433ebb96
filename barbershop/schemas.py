# barbershop/schemas.py

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .config import get_settings
from .core import to_shop_time


class CamelModel(BaseModel):
    # JSON uses camelCase; python code keeps snake_case names
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


def _shop_time(value: datetime) -> datetime:
    return to_shop_time(value, get_settings().timezone)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserPublic(BaseModel):
    id: int
    email: str
    role: str


# services

class ServiceCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    duration: int = Field(gt=0, le=24 * 60)


class ServiceUpdate(CamelModel):
    is_active: StrictBool


class ServicePublic(CamelModel):
    id: int
    name: str
    description: str
    price: float
    duration: int
    is_active: bool


# barbers

class BarberCreate(CamelModel):
    name: str = Field(min_length=1)
    specialties: List[str]

    @field_validator("specialties")
    @classmethod
    def drop_blank_specialties(cls, value: List[str]) -> List[str]:
        cleaned = []
        for label in value:
            label = label.strip()
            if label and label not in cleaned:
                cleaned.append(label)
        return cleaned


class BarberPublic(CamelModel):
    id: int
    name: str
    specialties: List[str]


class AvailabilityResponse(CamelModel):
    barber_id: int
    date: date
    service_id: int
    available_starts: List[str]


# absences

class AbsenceCreate(CamelModel):
    barber_id: int
    start_at: datetime
    end_at: datetime

    @field_validator("start_at", "end_at")
    @classmethod
    def as_shop_time(cls, value: datetime) -> datetime:
        return _shop_time(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_at >= self.end_at:
            raise ValueError("startAt must be before endAt")
        return self


class AbsencePublic(CamelModel):
    id: int
    barber_id: int
    start_at: datetime
    end_at: datetime


# appointments

class AppointmentCreate(CamelModel):
    client_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    starts_at: datetime = Field(alias="date")
    service_id: int
    barber_id: int

    @field_validator("starts_at")
    @classmethod
    def as_shop_time(cls, value: datetime) -> datetime:
        return _shop_time(value)


class AppointmentPublic(CamelModel):
    id: int
    client_name: str
    phone: str
    starts_at: datetime = Field(alias="date")
    service_id: int
    barber_id: int
    duration_minutes: Optional[int] = None
    is_active: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
