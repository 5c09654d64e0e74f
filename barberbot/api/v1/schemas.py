from pydantic import BaseModel, Field, field_validator

from barberbot.application.utils.date_rules import parse_canonical_date
from barberbot.application.utils.normalizers import normalize_date, normalize_service, normalize_time
from barberbot.domain.entities.reservation import Reservation
from barberbot.domain.entities.service_catalog import PROVIDERS, find_provider


class ReservationSchema(BaseModel):
    name: str
    phone: str
    service: str
    provider_id: str
    date: str
    time: str
    price: float

    @classmethod
    def from_entity(cls, reservation: Reservation) -> "ReservationSchema":
        return cls(
            name=reservation.name,
            phone=reservation.phone,
            service=reservation.service,
            provider_id=reservation.provider_id,
            date=reservation.date,
            time=reservation.time,
            price=reservation.price,
        )


class CreateReservationSchema(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    service: str
    provider: str = Field(description="Provider id or display name")
    date: str
    time: str

    @field_validator("service")
    @classmethod
    def _service(cls, value: str) -> str:
        service = normalize_service(value)
        if service is None:
            raise ValueError("service must be one of Corte, Barba, Corte + Barba")
        return service.name

    @field_validator("provider")
    @classmethod
    def _provider(cls, value: str) -> str:
        provider = find_provider(value)
        if provider is None:
            raise ValueError("provider must be one of " + ", ".join(p.id for p in PROVIDERS))
        return provider.id

    @field_validator("date")
    @classmethod
    def _date(cls, value: str) -> str:
        canonical = normalize_date(value)
        if canonical is None or parse_canonical_date(canonical) is None:
            raise ValueError("date must be a real date in DD/MM/YYYY form")
        return canonical

    @field_validator("time")
    @classmethod
    def _time(cls, value: str) -> str:
        time = normalize_time(value)
        if time is None:
            raise ValueError("time must be one of the bookable slots")
        return time
