from datetime import date, datetime, time, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barbershop.auth import create_access_token, hash_password
from barbershop.config import get_settings
from barbershop.db import configure_sqlite, get_session
from barbershop.main import app
from barbershop.models import Appointment, Barber, BarberAbsence, Service, User

ADMIN_EMAIL = "admin@barbershop.test"
ADMIN_PASSWORD = "clippers-and-combs"
# bcrypt is slow on purpose, hash once for the whole run
ADMIN_HASH = hash_password(ADMIN_PASSWORD)

# far enough ahead that "now" never filters anything out
FUTURE_DAY = date.today() + timedelta(days=30)


def at(hour: int, minute: int = 0, day: date = FUTURE_DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def engine():
    engine = configure_sqlite(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add(engine):
    """Persist a row in its own short session and return it detached.

    Sessions must not stay open across requests: the in-memory database has a
    single connection and every transaction takes the write lock.
    """

    def _add(obj):
        with Session(engine, expire_on_commit=False) as session:
            session.add(obj)
            session.commit()
            session.refresh(obj)
        return obj

    return _add


@pytest.fixture
def fetch(engine):
    def _fetch(model, pk):
        with Session(engine, expire_on_commit=False) as session:
            return session.get(model, pk)

    return _fetch


@pytest.fixture
def admin_headers(add):
    add(User(email=ADMIN_EMAIL, password_hash=ADMIN_HASH, role="admin"))
    token = create_access_token({"sub": ADMIN_EMAIL})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def haircut(add):
    return add(
        Service(name="Haircut", description="Classic cut", price=Decimal("40.00"), duration=30)
    )


@pytest.fixture
def barber(add):
    return add(Barber(name="Joao", specialties=["fade", "beard"]))


@pytest.fixture
def book(add):
    def _book(barber, service, starts_at, **kwargs):
        kwargs.setdefault("client_name", "Ana")
        kwargs.setdefault("phone", "+55 11 99999-0000")
        kwargs.setdefault("duration_minutes", service.duration)
        return add(
            Appointment(
                barber_id=barber.id,
                service_id=service.id,
                starts_at=starts_at,
                **kwargs,
            )
        )

    return _book


@pytest.fixture
def absent(add):
    def _absent(barber, start_at, end_at):
        return add(BarberAbsence(barber_id=barber.id, start_at=start_at, end_at=end_at))

    return _absent


@pytest.fixture
def shop_timezone(monkeypatch):
    """Move the shop to another zone for one test."""

    def _pin(name):
        monkeypatch.setenv("BARBERSHOP_TIMEZONE", name)
        get_settings.cache_clear()
        return ZoneInfo(name)

    yield _pin
    get_settings.cache_clear()
