# barbershop/routers/services_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.deps import require_admin
from barbershop.errors import NotFound, PersistenceFailure
from barbershop.models import Appointment, Service, User
from barbershop.schemas import ServiceCreate, ServicePublic, ServiceUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


@router.get("", response_model=List[ServicePublic])
def list_services(
    all: bool = False,
    session: Session = Depends(get_session),
):
    stmt = select(Service)
    if not all:
        stmt = stmt.where(Service.is_active == True)  # noqa: E712
    stmt = stmt.order_by(Service.created_at.desc(), Service.id.desc())
    return session.exec(stmt).all()


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(
    service: ServiceCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    db_service = Service(
        name=service.name,
        description=service.description,
        price=service.price,
        duration=service.duration,
        is_active=True,
    )
    session.add(db_service)
    session.commit()
    session.refresh(db_service)

    logger.info("service %s created by %s", db_service.id, admin.email)
    return db_service


@router.patch("/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    update: ServiceUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    db_service = session.get(Service, service_id)
    if db_service is None:
        raise NotFound("Service not found")

    db_service.is_active = update.is_active
    session.add(db_service)
    session.commit()
    session.refresh(db_service)

    logger.info("service %s set active=%s", db_service.id, db_service.is_active)
    return db_service


@router.delete("/{service_id}", response_model=ServicePublic)
def delete_service(
    service_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    db_service = session.get(Service, service_id)
    if db_service is None:
        raise NotFound("Service not found")

    # keep a copy, the row is gone once the transaction commits
    deleted = ServicePublic.model_validate(db_service)

    # appointments (cancelled ones included) go with the service, all or nothing
    try:
        appointments = session.exec(
            select(Appointment).where(Appointment.service_id == service_id)
        ).all()
        for appointment in appointments:
            session.delete(appointment)
        session.flush()
        session.delete(db_service)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("failed to delete service %s", service_id)
        raise PersistenceFailure("Failed to delete service")

    logger.info("service %s and its appointments deleted", service_id)
    return deleted
