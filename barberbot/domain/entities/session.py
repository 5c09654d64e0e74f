from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class Flow(str, Enum):
    BOOKING = "booking"
    CANCELLATION = "cancellation"


class Step(str, Enum):
    ASK_NAME = "ask_name"
    ASK_PHONE = "ask_phone"
    ASK_SERVICE = "ask_service"
    ASK_DATE = "ask_date"
    ASK_BARBER = "ask_barber"
    ASK_TIME = "ask_time"
    CANCEL_NAME = "cancel_name"
    CANCEL_DATE = "cancel_date"
    CANCEL_TIME = "cancel_time"
    DONE = "done"


FIRST_STEP: dict[Flow, Step] = {
    Flow.BOOKING: Step.ASK_NAME,
    Flow.CANCELLATION: Step.CANCEL_NAME,
}

# Forward transitions taken on valid input. Invalid input never transitions.
NEXT_STEP: dict[Flow, dict[Step, Step]] = {
    Flow.BOOKING: {
        Step.ASK_NAME: Step.ASK_PHONE,
        Step.ASK_PHONE: Step.ASK_SERVICE,
        Step.ASK_SERVICE: Step.ASK_DATE,
        Step.ASK_DATE: Step.ASK_BARBER,
        Step.ASK_BARBER: Step.ASK_TIME,
        Step.ASK_TIME: Step.DONE,
    },
    Flow.CANCELLATION: {
        Step.CANCEL_NAME: Step.CANCEL_DATE,
        Step.CANCEL_DATE: Step.CANCEL_TIME,
        Step.CANCEL_TIME: Step.DONE,
    },
}

# Backward edges, taken only when the chosen barber has no free slot left.
FALLBACK_EDGES: frozenset[tuple[Step, Step]] = frozenset(
    {
        (Step.ASK_BARBER, Step.ASK_DATE),
        (Step.ASK_TIME, Step.ASK_DATE),
        (Step.ASK_TIME, Step.ASK_BARBER),
    }
)


class InvalidTransitionError(Exception):
    """Raised when a session is moved along an edge the flow does not define."""


@dataclass(frozen=True)
class Session:
    conversation_id: str
    flow: Flow
    step: Step
    name: str | None = None
    phone: str | None = None
    service: str | None = None
    price: float | None = None
    date: str | None = None
    provider_id: str | None = None
    time: str | None = None
    offered_slots: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def start(cls, conversation_id: str, flow: Flow) -> Session:
        return cls(conversation_id=conversation_id, flow=flow, step=FIRST_STEP[flow])

    def advance(self, **changes: object) -> Session:
        """Move to the next step of the flow, recording the collected fields."""
        next_step = NEXT_STEP[self.flow].get(self.step)
        if next_step is None:
            raise InvalidTransitionError(
                f"No forward transition from '{self.step.value}' in flow '{self.flow.value}'"
            )
        return replace(self, step=next_step, **changes)

    def fall_back(self, target: Step, **changes: object) -> Session:
        if (self.step, target) not in FALLBACK_EDGES or target not in NEXT_STEP[self.flow]:
            raise InvalidTransitionError(
                f"No fallback transition from '{self.step.value}' to '{target.value}' in flow '{self.flow.value}'"
            )
        return replace(self, step=target, **changes)

    def with_fields(self, **changes: object) -> Session:
        """Update collected fields without moving."""
        if "step" in changes:
            raise InvalidTransitionError("Use advance() or fall_back() to change steps")
        return replace(self, **changes)
