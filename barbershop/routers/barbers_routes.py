# barbershop/routers/barbers_routes.py

import logging
from datetime import date, datetime, timedelta
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from barbershop.appointments import service_durations
from barbershop.core import available_slots, shop_now
from barbershop.db import get_session
from barbershop.deps import require_admin
from barbershop.errors import BarberInUse, BarberUnavailable, NotFound, ServiceUnavailable
from barbershop.models import Appointment, Barber, BarberAbsence, Service, User
from barbershop.schemas import AvailabilityResponse, BarberCreate, BarberPublic

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("", response_model=List[BarberPublic])
def list_barbers(session: Session = Depends(get_session)):
    return session.exec(
        select(Barber).order_by(Barber.created_at.desc(), Barber.id.desc())
    ).all()


@router.post("", response_model=BarberPublic, status_code=201)
def create_barber(
    barber: BarberCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    db_barber = Barber(name=barber.name, specialties=barber.specialties)
    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)

    logger.info("barber %s created by %s", db_barber.id, admin.email)
    return db_barber


@router.delete("/{barber_id}")
def delete_barber(
    barber_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    db_barber = session.get(Barber, barber_id)
    if db_barber is None:
        raise NotFound("Barber not found")

    # appointments are kept as history, so a barber who has any stays
    booked = session.exec(
        select(Appointment.id).where(Appointment.barber_id == barber_id)
    ).first()
    if booked is not None:
        raise BarberInUse()

    absences = session.exec(
        select(BarberAbsence).where(BarberAbsence.barber_id == barber_id)
    ).all()
    for absence in absences:
        session.delete(absence)
    session.flush()
    session.delete(db_barber)
    session.commit()

    logger.info("barber %s deleted with %d absences", barber_id, len(absences))
    return {"success": True}


@router.get("/{barber_id}/availability", response_model=AvailabilityResponse)
def barber_availability(
    barber_id: int,
    date: date,
    service_id: int = Query(alias="serviceId"),
    session: Session = Depends(get_session),
):
    barber = session.get(Barber, barber_id)
    if barber is None:
        raise BarberUnavailable()

    service = session.get(Service, service_id)
    if service is None or not service.is_active:
        raise ServiceUnavailable()

    day_start = datetime.combine(date, datetime.min.time())
    day_end = day_start + timedelta(days=1)

    # a day back so late bookings running past midnight are still seen
    appointments = session.exec(
        select(Appointment)
        .where(Appointment.barber_id == barber_id)
        .where(Appointment.is_active == True)  # noqa: E712
        .where(Appointment.starts_at >= day_start - timedelta(days=1))
        .where(Appointment.starts_at < day_end)
    ).all()

    absences = session.exec(
        select(BarberAbsence)
        .where(BarberAbsence.barber_id == barber_id)
        .where(BarberAbsence.start_at < day_end)
        .where(BarberAbsence.end_at > day_start)
    ).all()

    slots = available_slots(
        date,
        barber_id,
        service.duration,
        appointments,
        absences,
        now=shop_now(),
        durations=service_durations(session),
    )

    return {
        "barber_id": barber_id,
        "date": date,
        "service_id": service_id,
        "available_starts": slots,
    }
