# barbershop/absences.py

import logging
from typing import List

from sqlmodel import Session, select

from .errors import BarberUnavailable, NotFound
from .models import Barber, BarberAbsence
from .schemas import AbsenceCreate

logger = logging.getLogger(__name__)


def create_absence(session: Session, payload: AbsenceCreate) -> BarberAbsence:
    # overlapping absences for the same barber are allowed
    if session.get(Barber, payload.barber_id) is None:
        raise BarberUnavailable()

    absence = BarberAbsence(
        barber_id=payload.barber_id,
        start_at=payload.start_at,
        end_at=payload.end_at,
    )
    session.add(absence)
    session.commit()
    session.refresh(absence)

    logger.info("absence %s added for barber %s", absence.id, absence.barber_id)
    return absence


def list_absences(session: Session) -> List[BarberAbsence]:
    return session.exec(
        select(BarberAbsence).order_by(BarberAbsence.start_at, BarberAbsence.id)
    ).all()


def delete_absence(session: Session, absence_id: int) -> None:
    absence = session.get(BarberAbsence, absence_id)
    if absence is None:
        raise NotFound("Absence not found")

    session.delete(absence)
    session.commit()

    logger.info("absence %s removed", absence_id)
