# barbershop/appointments.py
"""Booking lifecycle: create, cancel (soft delete) and list appointments."""

import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .core import appointment_end, overlaps, shop_now
from .errors import (
    AlreadyCancelled,
    BarberUnavailable,
    NotFound,
    ServiceUnavailable,
    SlotConflict,
)
from .models import Appointment, Barber, BarberAbsence, Service
from .schemas import AppointmentCreate

logger = logging.getLogger(__name__)

# no service runs longer than a day, so older starts cannot reach the new slot
LOOKBEHIND = timedelta(days=1)


def lock_barber(session: Session, barber_id: int) -> Barber | None:
    # FOR UPDATE serializes bookings per barber on PostgreSQL; SQLite drops
    # the clause and relies on the BEGIN IMMEDIATE issued in db.py
    return session.exec(
        select(Barber).where(Barber.id == barber_id).with_for_update()
    ).first()


def service_durations(session: Session) -> dict[int, int]:
    return {s.id: s.duration for s in session.exec(select(Service)).all()}


def find_conflict(
    session: Session,
    barber_id: int,
    start: datetime,
    end: datetime,
    fallback_minutes: int,
) -> str | None:
    """Describe what already occupies [start, end) for the barber, if anything."""
    absence = session.exec(
        select(BarberAbsence)
        .where(BarberAbsence.barber_id == barber_id)
        .where(BarberAbsence.start_at < end)
        .where(BarberAbsence.end_at > start)
    ).first()
    if absence is not None:
        return f"absence {absence.id}"

    nearby = session.exec(
        select(Appointment)
        .where(Appointment.barber_id == barber_id)
        .where(Appointment.is_active == True)  # noqa: E712
        .where(Appointment.starts_at < end)
        .where(Appointment.starts_at >= start - LOOKBEHIND)
    ).all()
    if not nearby:
        return None

    durations = service_durations(session)
    for a in nearby:
        if overlaps(start, end, a.starts_at, appointment_end(a, durations, fallback_minutes)):
            return f"appointment {a.id}"
    return None


def create_appointment(session: Session, payload: AppointmentCreate) -> Appointment:
    service = session.get(Service, payload.service_id)
    if service is None or not service.is_active:
        raise ServiceUnavailable()

    barber = lock_barber(session, payload.barber_id)
    if barber is None:
        raise BarberUnavailable()

    start = payload.starts_at
    end = start + timedelta(minutes=service.duration)

    conflict = find_conflict(session, barber.id, start, end, service.duration)
    if conflict is not None:
        logger.warning(
            "booking for barber %s at %s overlaps %s", barber.id, start.isoformat(), conflict
        )
        raise SlotConflict()

    appointment = Appointment(
        client_name=payload.client_name,
        phone=payload.phone,
        barber_id=barber.id,
        service_id=service.id,
        starts_at=start,
        duration_minutes=service.duration,
        is_active=True,
    )
    session.add(appointment)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("booking for barber %s at %s lost the race", barber.id, start.isoformat())
        raise SlotConflict()

    session.refresh(appointment)
    logger.info("appointment %s booked with barber %s", appointment.id, barber.id)
    return appointment


def cancel_appointment(session: Session, appointment_id: int) -> Appointment:
    target = session.get(Appointment, appointment_id)
    if target is None:
        raise NotFound("Appointment not found")

    if not target.is_active:
        raise AlreadyCancelled()

    target.is_active = False
    target.deleted_at = shop_now()
    session.add(target)
    session.commit()
    session.refresh(target)

    logger.info("appointment %s cancelled", target.id)
    return target


def list_appointments(session: Session, minimal: bool = False) -> List[Appointment]:
    # minimal listings are for public pages and must not leak client details
    if minimal:
        return []

    return session.exec(
        select(Appointment)
        .where(Appointment.is_active == True)  # noqa: E712
        .order_by(Appointment.created_at.desc(), Appointment.id.desc())
    ).all()
