from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Reservation:
    name: str
    phone: str
    service: str
    provider_id: str
    date: str  # DD/MM/YYYY
    time: str  # HH:MM, one of ALLOWED_SLOTS
    price: float

    @property
    def key(self) -> tuple[str, str, str]:
        """The triple no two live reservations may share."""
        return (self.date, self.time, self.provider_id)

    @property
    def starts_at(self) -> datetime:
        return datetime.strptime(f"{self.date} {self.time}", "%d/%m/%Y %H:%M")

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        day, month, year = self.date.split("/")
        return (year, month, day, self.time)


@dataclass(frozen=True)
class ReservationFilter:
    name: str | None = None
    date: str | None = None
    time: str | None = None
    provider_id: str | None = None

    def matches(self, reservation: Reservation) -> bool:
        if self.name is not None and reservation.name != self.name:
            return False
        if self.date is not None and reservation.date != self.date:
            return False
        if self.time is not None and reservation.time != self.time:
            return False
        if self.provider_id is not None and reservation.provider_id != self.provider_id:
            return False
        return True
