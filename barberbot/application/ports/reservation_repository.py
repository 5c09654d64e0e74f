from __future__ import annotations

from abc import ABC, abstractmethod

from barberbot.domain.entities.reservation import Reservation, ReservationFilter


class ReservationRepositoryPort(ABC):
    @abstractmethod
    async def find(self, criteria: ReservationFilter) -> list[Reservation]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, reservation: Reservation) -> Reservation:
        """Persist a reservation. Raises ReservationConflictError if its (date, time, provider) is taken."""
        raise NotImplementedError

    @abstractmethod
    async def find_one_and_delete(self, criteria: ReservationFilter) -> Reservation | None:
        """Delete exactly one matching reservation and return it, or None if nothing matched."""
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> list[Reservation]:
        """All reservations sorted by date, then time."""
        raise NotImplementedError
