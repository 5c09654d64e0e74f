from __future__ import annotations

import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    name: str
    duration_minutes: int
    price: float


@dataclass(frozen=True)
class Provider:
    display_name: str
    id: str


SERVICES: dict[str, Service] = {
    "Corte": Service(name="Corte", duration_minutes=30, price=30.0),
    "Barba": Service(name="Barba", duration_minutes=30, price=20.0),
    "Corte + Barba": Service(name="Corte + Barba", duration_minutes=60, price=45.0),
}

PROVIDERS: tuple[Provider, ...] = (
    Provider(display_name="João", id="joao"),
    Provider(display_name="Pedro", id="pedro"),
    Provider(display_name="Lucas", id="lucas"),
)

# Sole source of valid appointment start times, in presentation order.
ALLOWED_SLOTS: tuple[str, ...] = ("09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00")


def get_service(name: str) -> Service | None:
    return SERVICES.get(name)


def find_provider(text: str) -> Provider | None:
    """Match a provider by display name or id, case-insensitively."""
    wanted = unicodedata.normalize("NFC", text.strip()).lower()
    for provider in PROVIDERS:
        if wanted in (unicodedata.normalize("NFC", provider.display_name).lower(), provider.id):
            return provider
    return None


def get_provider_by_id(provider_id: str) -> Provider | None:
    for provider in PROVIDERS:
        if provider.id == provider_id:
            return provider
    return None
