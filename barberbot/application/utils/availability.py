from __future__ import annotations

from typing import Iterable

from barberbot.domain.entities.reservation import Reservation
from barberbot.domain.entities.service_catalog import ALLOWED_SLOTS


def available_slots(date: str, provider_id: str, reservations: Iterable[Reservation]) -> list[str]:
    """Slots of ALLOWED_SLOTS not yet reserved for this date and provider, in catalog order.

    An empty list means the provider is fully booked on that date; callers
    should ask for another option rather than treat it as an error.
    """
    taken = {r.time for r in reservations if r.date == date and r.provider_id == provider_id}
    return [slot for slot in ALLOWED_SLOTS if slot not in taken]
