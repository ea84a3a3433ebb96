# barbershop/routers/absences_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop import absences
from barbershop.db import get_session
from barbershop.deps import require_admin
from barbershop.models import User
from barbershop.schemas import AbsenceCreate, AbsencePublic

router = APIRouter(
    prefix="/absences",
    tags=["absences"],
)


@router.get("", response_model=List[AbsencePublic])
def list_absences(session: Session = Depends(get_session)):
    return absences.list_absences(session)


@router.post("", response_model=AbsencePublic, status_code=201)
def create_absence(
    absence: AbsenceCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return absences.create_absence(session, absence)


@router.delete("/{absence_id}")
def delete_absence(
    absence_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    absences.delete_absence(session, absence_id)
    return {"success": True}
