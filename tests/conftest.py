"""Shared fixtures: a fixed clock, in-memory adapters and recording fakes."""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime

import pytest

from barberbot.application.exceptions import NotificationError
from barberbot.application.ports.message_platform import MessagePlatformPort
from barberbot.application.ports.notifier import NotifierPort
from barberbot.application.use_cases.booking import BookingUseCase
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.domain.entities.message import Message
from barberbot.domain.entities.reservation import Reservation
from barberbot.infrastructure.scheduling.asyncio_scheduler import AsyncioReminderScheduler
from barberbot.infrastructure.store.memory_reservation_repository import MemoryReservationRepository
from barberbot.infrastructure.store.memory_session_store import MemorySessionStore

# Tuesday. Yesterday (25/08) is a Monday, 01/09/2025 is the following Monday.
FIXED_NOW = datetime(2025, 8, 26, 10, 0)

_message_ids = itertools.count(1)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_message(text: str, conversation_id: str = "chat-1") -> Message:
    return Message(
        id=str(next(_message_ids)),
        conversation_id=conversation_id,
        sender_id=conversation_id,
        text=text,
        timestamp=1756202400,
        platform="telegram",
    )


def make_reservation(
    time: str = "09:00",
    date: str = "01/09/2025",
    provider_id: str = "joao",
    name: str = "Bruno",
) -> Reservation:
    return Reservation(
        name=name,
        phone="11988887777",
        service="Barba",
        provider_id=provider_id,
        date=date,
        time=time,
        price=20.0,
    )


class RecordingPlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str | None]] = []

    async def send_text(self, conversation_id: str, text: str, parse_mode: str | None = None) -> None:
        self.sent.append((conversation_id, text, parse_mode))

    @property
    def last_text(self) -> str:
        return self.sent[-1][1]


class RecordingNotifier(NotifierPort):
    def __init__(self, fail_with: Exception | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_with = fail_with

    async def send(self, phone: str, text: str) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((phone, text))
        return True


@pytest.fixture
def platform() -> RecordingPlatform:
    return RecordingPlatform()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail_with=NotificationError("WhatsApp API returned 500"))


@pytest.fixture
def repository() -> MemoryReservationRepository:
    return MemoryReservationRepository()


@pytest.fixture
async def scheduler():
    scheduler = AsyncioReminderScheduler(clock=fixed_clock)
    yield scheduler
    scheduler.shutdown()
    await asyncio.sleep(0)


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def send_reply(platform) -> SendReplyUseCase:
    return SendReplyUseCase(platform=platform)


@pytest.fixture
def booking(repository, scheduler, notifier, send_reply) -> BookingUseCase:
    return BookingUseCase(
        repository=repository,
        scheduler=scheduler,
        notifier=notifier,
        send_reply=send_reply,
        business_name="Barbearia X",
        clock=fixed_clock,
    )


@pytest.fixture
def cancellation(repository, scheduler) -> CancellationUseCase:
    return CancellationUseCase(repository=repository, scheduler=scheduler)


@pytest.fixture
def handler(store, booking, cancellation, send_reply) -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        store=store,
        booking=booking,
        cancellation=cancellation,
        send_reply=send_reply,
        business_name="Barbearia X",
    )
