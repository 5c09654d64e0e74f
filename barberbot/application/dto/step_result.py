from __future__ import annotations

from dataclasses import dataclass

from barberbot.domain.entities.reservation import Reservation
from barberbot.domain.entities.session import Session


@dataclass(frozen=True)
class StepResult:
    action: str  # "advance", "retry", "fallback", "conflict", "completed", "not_found"
    message: str
    updated_session: Session | None  # None tears the session down
    parse_mode: str | None = None
    reservation: Reservation | None = None
