from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from barberbot.application.exceptions import RepositoryError, ReservationConflictError
from barberbot.application.ports.reservation_repository import ReservationRepositoryPort
from barberbot.domain.entities.reservation import Reservation, ReservationFilter
from barberbot.infrastructure.store.sql_models import Base, ReservationRecord


class SqlReservationRepository(ReservationRepositoryPort):
    def __init__(self, database_url: str | None = None, engine: AsyncEngine | None = None) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("DATABASE_URL is required for the SQL reservation repository")
            engine = create_async_engine(database_url)
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)
        self._logger = logging.getLogger(__name__)

    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    async def find(self, criteria: ReservationFilter) -> list[Reservation]:
        try:
            async with self._sessions() as db:
                result = await db.execute(_apply_filter(select(ReservationRecord), criteria))
                return [record.to_entity() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            self._logger.error("Error querying reservations", extra={"error": str(e)})
            raise RepositoryError("Failed to query reservations") from e

    async def create(self, reservation: Reservation) -> Reservation:
        try:
            async with self._sessions() as db:
                db.add(ReservationRecord.from_entity(reservation))
                await db.commit()
        except IntegrityError as e:
            self._logger.info("Reservation conflict", extra={"reservation": reservation.key})
            raise ReservationConflictError(
                f"Slot {reservation.time} on {reservation.date} is taken for {reservation.provider_id}"
            ) from e
        except SQLAlchemyError as e:
            self._logger.error("Error creating reservation", extra={"error": str(e)})
            raise RepositoryError("Failed to create reservation") from e

        self._logger.info("Reservation created", extra={"reservation": reservation.key})
        return reservation

    async def find_one_and_delete(self, criteria: ReservationFilter) -> Reservation | None:
        try:
            async with self._sessions() as db:
                async with db.begin():
                    query = _apply_filter(select(ReservationRecord), criteria).limit(1)
                    record = (await db.execute(query)).scalar_one_or_none()
                    if record is None:
                        return None
                    result = await db.execute(delete(ReservationRecord).where(ReservationRecord.id == record.id))
                    if result.rowcount != 1:
                        # removed by a concurrent writer between select and delete
                        return None
                    reservation = record.to_entity()
        except SQLAlchemyError as e:
            self._logger.error("Error deleting reservation", extra={"error": str(e)})
            raise RepositoryError("Failed to delete reservation") from e

        self._logger.info("Reservation deleted", extra={"reservation": reservation.key})
        return reservation

    async def list_all(self) -> list[Reservation]:
        reservations = await self.find(ReservationFilter())
        return sorted(reservations, key=lambda r: r.sort_key)


def _apply_filter(query, criteria: ReservationFilter):
    if criteria.name is not None:
        query = query.where(ReservationRecord.name == criteria.name)
    if criteria.date is not None:
        query = query.where(ReservationRecord.date == criteria.date)
    if criteria.time is not None:
        query = query.where(ReservationRecord.time == criteria.time)
    if criteria.provider_id is not None:
        query = query.where(ReservationRecord.provider_id == criteria.provider_id)
    return query
