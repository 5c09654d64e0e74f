from __future__ import annotations

import pytest

from barberbot.application.exceptions import ReservationConflictError
from barberbot.domain.entities.reservation import ReservationFilter
from barberbot.infrastructure.store.sql_reservation_repository import SqlReservationRepository

from tests.conftest import make_reservation


@pytest.fixture
async def sql_repository(tmp_path):
    repository = SqlReservationRepository(database_url=f"sqlite+aiosqlite:///{tmp_path / 'reservations.db'}")
    await repository.create_schema()
    yield repository
    await repository.dispose()


async def test_create_and_find(sql_repository):
    await sql_repository.create(make_reservation("09:00"))
    await sql_repository.create(make_reservation("10:00", provider_id="pedro"))
    await sql_repository.create(make_reservation("09:00", date="02/09/2025"))

    same_day = await sql_repository.find(ReservationFilter(date="01/09/2025"))
    assert sorted(r.key for r in same_day) == [("01/09/2025", "09:00", "joao"), ("01/09/2025", "10:00", "pedro")]
    assert same_day[0].price == 20.0


async def test_unique_slot_is_enforced(sql_repository):
    await sql_repository.create(make_reservation("09:00", name="Ana"))
    with pytest.raises(ReservationConflictError):
        await sql_repository.create(make_reservation("09:00", name="Bruno"))

    assert [r.name for r in await sql_repository.list_all()] == ["Ana"]


async def test_find_one_and_delete(sql_repository):
    await sql_repository.create(make_reservation("09:00", name="Ana"))

    deleted = await sql_repository.find_one_and_delete(
        ReservationFilter(name="Ana", date="01/09/2025", time="09:00")
    )
    assert deleted is not None and deleted.name == "Ana"
    assert await sql_repository.find_one_and_delete(ReservationFilter(name="Ana")) is None
    assert await sql_repository.list_all() == []


async def test_list_all_is_chronological(sql_repository):
    await sql_repository.create(make_reservation("09:00", date="15/01/2026"))
    await sql_repository.create(make_reservation("14:00"))
    await sql_repository.create(make_reservation("09:00"))

    assert [(r.date, r.time) for r in await sql_repository.list_all()] == [
        ("01/09/2025", "09:00"),
        ("01/09/2025", "14:00"),
        ("15/01/2026", "09:00"),
    ]
