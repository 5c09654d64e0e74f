from __future__ import annotations

from sqlalchemy import Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from barberbot.domain.entities.reservation import Reservation


class Base(DeclarativeBase):
    pass


class ReservationRecord(Base):
    __tablename__ = "reservations"
    __table_args__ = (UniqueConstraint("date", "time", "provider_id", name="uq_reservation_slot"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    phone: Mapped[str] = mapped_column(String(40), nullable=False)
    service: Mapped[str] = mapped_column(String(40), nullable=False)
    provider_id: Mapped[str] = mapped_column(String(40), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    def to_entity(self) -> Reservation:
        return Reservation(
            name=self.name,
            phone=self.phone,
            service=self.service,
            provider_id=self.provider_id,
            date=self.date,
            time=self.time,
            price=self.price,
        )

    @classmethod
    def from_entity(cls, reservation: Reservation) -> ReservationRecord:
        return cls(
            name=reservation.name,
            phone=reservation.phone,
            service=reservation.service,
            provider_id=reservation.provider_id,
            date=reservation.date,
            time=reservation.time,
            price=reservation.price,
        )
