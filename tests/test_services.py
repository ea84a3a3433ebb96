from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from barbershop.models import Appointment, Service

from .conftest import at

NEW_SERVICE = {"name": "Beard trim", "description": "Hot towel trim", "price": 25.5, "duration": 15}


def test_list_shows_only_active_services(client, add, haircut):
    add(Service(name="Perm", description="Retired", price=Decimal("90"), duration=60, is_active=False))

    response = client.get("/services")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Haircut"]


def test_list_all_includes_inactive_newest_first(client, add):
    add(Service(name="Old", description="d", price=Decimal("10"), duration=30, created_at=datetime(2024, 1, 1)))
    add(Service(name="New", description="d", price=Decimal("10"), duration=30, is_active=False, created_at=datetime(2024, 2, 1)))

    response = client.get("/services", params={"all": "true"})

    assert [s["name"] for s in response.json()] == ["New", "Old"]
    assert response.json()[0]["isActive"] is False


def test_create_service(client, admin_headers):
    response = client.post("/services", json=NEW_SERVICE, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Beard trim"
    assert body["price"] == 25.5
    assert body["duration"] == 15
    assert body["isActive"] is True


def test_create_service_requires_admin(client):
    response = client.post("/services", json=NEW_SERVICE)

    assert response.status_code == 401


def test_create_service_rejects_bad_token(client):
    response = client.post("/services", json=NEW_SERVICE, headers={"Authorization": "Bearer junk"})

    assert response.status_code == 401


@pytest.mark.parametrize(
    "override",
    [
        {"name": ""},
        {"description": None},
        {"price": "cheap"},
        {"duration": 0},
        {"duration": 24 * 60 + 1},
        {"duration": "thirty"},
    ],
)
def test_create_service_validates_payload(client, admin_headers, override):
    response = client.post("/services", json={**NEW_SERVICE, **override}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payload"


def test_toggle_service(client, admin_headers, haircut):
    response = client.patch(f"/services/{haircut.id}", json={"isActive": False}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert client.get("/services").json() == []


def test_toggle_requires_a_boolean(client, admin_headers, haircut):
    response = client.patch(f"/services/{haircut.id}", json={"isActive": "no"}, headers=admin_headers)

    assert response.status_code == 400


def test_toggle_unknown_service(client, admin_headers):
    response = client.patch("/services/999", json={"isActive": True}, headers=admin_headers)

    assert response.status_code == 404


def test_delete_service_takes_its_appointments(client, engine, fetch, admin_headers, barber, haircut, book):
    active = book(barber, haircut, at(10))
    cancelled = book(barber, haircut, at(11), is_active=False)

    response = client.delete(f"/services/{haircut.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Haircut"
    assert fetch(Service, haircut.id) is None
    assert fetch(Appointment, active.id) is None
    assert fetch(Appointment, cancelled.id) is None


def test_delete_service_is_all_or_nothing(client, fetch, admin_headers, barber, haircut, book, monkeypatch):
    appt = book(barber, haircut, at(10))

    def broken_delete(self, instance):
        if isinstance(instance, Service):
            raise SQLAlchemyError("disk full")
        return original_delete(self, instance)

    original_delete = Session.delete
    monkeypatch.setattr(Session, "delete", broken_delete)

    response = client.delete(f"/services/{haircut.id}", headers=admin_headers)
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to delete service"
    assert fetch(Service, haircut.id) is not None
    assert fetch(Appointment, appt.id) is not None


def test_delete_service_requires_admin(client, fetch, haircut):
    response = client.delete(f"/services/{haircut.id}")

    assert response.status_code == 401
    assert fetch(Service, haircut.id) is not None
