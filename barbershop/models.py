# barbershop/models.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    description: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    duration: int  # minutes
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    specialties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.now)


class BarberAbsence(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: int = Field(foreign_key="barber.id", index=True)
    start_at: datetime = Field(index=True)
    end_at: datetime


class Appointment(SQLModel, table=True):
    # one active booking per barber and start time; cancelled rows stay around
    __table_args__ = (
        Index(
            "uq_active_barber_start",
            "barber_id",
            "starts_at",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    client_name: str
    phone: str
    barber_id: int = Field(foreign_key="barber.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)
    starts_at: datetime = Field(index=True)
    # snapshot of the service duration when booked; None on legacy rows
    duration_minutes: Optional[int] = None
    is_active: bool = True
    deleted_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str = "admin"
