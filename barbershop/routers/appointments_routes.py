# barbershop/routers/appointments_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop import appointments
from barbershop.db import get_session
from barbershop.deps import require_admin
from barbershop.models import User
from barbershop.schemas import AppointmentCreate, AppointmentPublic

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.get("", response_model=List[AppointmentPublic])
def list_appointments(
    minimal: bool = False,
    session: Session = Depends(get_session),
):
    return appointments.list_appointments(session, minimal=minimal)


# public: customers book without an account
@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
):
    return appointments.create_appointment(session, appt)


@router.delete("/{appt_id}", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return appointments.cancel_appointment(session, appt_id)
