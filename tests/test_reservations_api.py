from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.infrastructure.scheduling.asyncio_scheduler import AsyncioReminderScheduler
from barberbot.infrastructure.store.memory_reservation_repository import MemoryReservationRepository
from barberbot.main import app
from barberbot.wiring.dependencies import get_cancellation_use_case, get_reservation_repository


@pytest.fixture
def client():
    repository = MemoryReservationRepository()
    cancellation = CancellationUseCase(repository=repository, scheduler=AsyncioReminderScheduler())
    app.dependency_overrides[get_reservation_repository] = lambda: repository
    app.dependency_overrides[get_cancellation_use_case] = lambda: cancellation
    yield TestClient(app)
    app.dependency_overrides.clear()


def _payload(**overrides) -> dict:
    payload = {
        "name": "Ana",
        "phone": "11999999999",
        "service": "corte e barba",
        "provider": "João",
        "date": "1/9/25",
        "time": "9:00",
    }
    payload.update(overrides)
    return payload


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_normalizes_and_prices(client):
    resp = client.post("/api/v1/reservations", json=_payload())

    assert resp.status_code == 201
    assert resp.json() == {
        "name": "Ana",
        "phone": "11999999999",
        "service": "Corte + Barba",
        "provider_id": "joao",
        "date": "01/09/2025",
        "time": "09:00",
        "price": 45.0,
    }


def test_create_same_slot_twice_conflicts(client):
    assert client.post("/api/v1/reservations", json=_payload()).status_code == 201
    resp = client.post("/api/v1/reservations", json=_payload(name="Bruno", provider="joao"))
    assert resp.status_code == 409


@pytest.mark.parametrize(
    "field, value",
    [("service", "manicure"), ("provider", "Carlos"), ("date", "31/02/2026"), ("time", "12:00"), ("name", "")],
)
def test_create_rejects_invalid_fields(client, field, value):
    assert client.post("/api/v1/reservations", json=_payload(**{field: value})).status_code == 422


def test_list_is_chronological(client):
    for date, time in [("02/09/2025", "10:00"), ("01/09/2025", "14:00"), ("15/01/2026", "09:00"), ("01/09/2025", "09:00")]:
        assert client.post("/api/v1/reservations", json=_payload(date=date, time=time)).status_code == 201

    listed = [(r["date"], r["time"]) for r in client.get("/api/v1/reservations").json()]
    assert listed == [
        ("01/09/2025", "09:00"),
        ("01/09/2025", "14:00"),
        ("02/09/2025", "10:00"),
        ("15/01/2026", "09:00"),
    ]


def test_delete_then_not_found(client):
    client.post("/api/v1/reservations", json=_payload())
    params = {"name": "Ana", "date": "01/09/2025", "time": "09:00"}

    first = client.delete("/api/v1/reservations", params=params)
    assert first.status_code == 200
    assert first.json()["provider_id"] == "joao"

    assert client.delete("/api/v1/reservations", params=params).status_code == 404
    assert client.get("/api/v1/reservations").json() == []


def test_delete_rejects_malformed_query(client):
    resp = client.delete("/api/v1/reservations", params={"name": "Ana", "date": "amanhã", "time": "09:00"})
    assert resp.status_code == 422
