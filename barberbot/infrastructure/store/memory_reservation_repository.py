from __future__ import annotations

import logging

from barberbot.application.exceptions import ReservationConflictError
from barberbot.application.ports.reservation_repository import ReservationRepositoryPort
from barberbot.domain.entities.reservation import Reservation, ReservationFilter


class MemoryReservationRepository(ReservationRepositoryPort):
    def __init__(self, reservations: list[Reservation] | None = None) -> None:
        self._reservations: list[Reservation] = list(reservations or [])
        self._logger = logging.getLogger(__name__)

    async def find(self, criteria: ReservationFilter) -> list[Reservation]:
        return [r for r in self._reservations if criteria.matches(r)]

    async def create(self, reservation: Reservation) -> Reservation:
        # Check and insert with no await in between so concurrent commits cannot interleave.
        if any(r.key == reservation.key for r in self._reservations):
            raise ReservationConflictError(
                f"Slot {reservation.time} on {reservation.date} is taken for {reservation.provider_id}"
            )
        self._reservations.append(reservation)
        self._logger.info("Reservation created", extra={"reservation": reservation.key})
        return reservation

    async def find_one_and_delete(self, criteria: ReservationFilter) -> Reservation | None:
        for index, reservation in enumerate(self._reservations):
            if criteria.matches(reservation):
                del self._reservations[index]
                self._logger.info("Reservation deleted", extra={"reservation": reservation.key})
                return reservation
        return None

    async def list_all(self) -> list[Reservation]:
        return sorted(self._reservations, key=lambda r: r.sort_key)
