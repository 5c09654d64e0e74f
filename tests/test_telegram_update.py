from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from barberbot.application.dto.telegram_update import TelegramUpdateDTO
from barberbot.application.use_cases.booking import BookingUseCase
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.domain.entities.session import Flow, Session
from barberbot.infrastructure.scheduling.asyncio_scheduler import AsyncioReminderScheduler
from barberbot.infrastructure.store.memory_reservation_repository import MemoryReservationRepository
from barberbot.infrastructure.store.memory_session_store import MemorySessionStore
from barberbot.infrastructure.telegram.mock_platform import MockTelegramPlatform
from barberbot.infrastructure.telegram.webhook_verify import verify_secret_token
from barberbot.infrastructure.whatsapp.mock_notifier import MockNotifier
from barberbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient, to_whatsapp_number
from barberbot.infrastructure.whatsapp.whatsapp_notifier import WhatsAppNotifier
from barberbot.main import app
from barberbot.wiring.dependencies import get_handle_incoming_message_use_case


def _update(**message) -> dict:
    body = {"message_id": 7, "date": 1756202400, "chat": {"id": 4242}, "from": {"id": 99}, "text": "oi"}
    body.update(message)
    return {"update_id": 1001, "message": body}


def test_extract_text_message():
    [message] = TelegramUpdateDTO.model_validate(_update()).extract_messages()

    assert message.id == "1001"
    assert message.conversation_id == "4242"
    assert message.sender_id == "99"
    assert message.text == "oi"
    assert message.platform == "telegram"


def test_messages_without_text_are_skipped():
    payload = _update()
    del payload["message"]["text"]
    assert TelegramUpdateDTO.model_validate(payload).extract_messages() == []
    assert TelegramUpdateDTO.model_validate({"update_id": 5}).extract_messages() == []


def test_secret_token_verification():
    assert verify_secret_token(None, None, "dev") is True
    assert verify_secret_token(None, None, "prod") is False
    assert verify_secret_token("s3cret", "s3cret", "prod") is True
    assert verify_secret_token("wrong", "s3cret", "prod") is False
    assert verify_secret_token(None, "s3cret", "dev") is False


class RecordingHandler:
    def __init__(self) -> None:
        self.handled = []

    async def handle(self, message) -> None:
        self.handled.append(message)


@pytest.fixture
def webhook_client():
    handler = RecordingHandler()
    app.dependency_overrides[get_handle_incoming_message_use_case] = lambda: handler
    yield TestClient(app), handler
    app.dependency_overrides.clear()


def test_webhook_queues_messages(webhook_client):
    client, handler = webhook_client
    resp = client.post("/webhooks/telegram", json=_update(text="/agendar"))

    assert resp.status_code == 200
    assert [m.text for m in handler.handled] == ["/agendar"]


def test_webhook_rejects_malformed_body(webhook_client):
    client, handler = webhook_client
    resp = client.post("/webhooks/telegram", content=b"not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert handler.handled == []


@pytest.mark.parametrize(
    "phone, expected",
    [("11987654321", "5511987654321"), ("(11) 8765-4321", "551187654321"), ("+55 11 98765-4321", "5511987654321")],
)
def test_to_whatsapp_number(phone, expected):
    assert to_whatsapp_number(phone) == expected


async def test_whatsapp_notifier_delivers_and_reports_failures():
    requests: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status = 200 if len(requests) == 1 else 500
        return httpx.Response(status, json={})

    client = WhatsAppClient(access_token="token", phone_number_id="123", transport=httpx.MockTransport(respond))
    notifier = WhatsAppNotifier(client)

    assert await notifier.send("11987654321", "Olá") is True
    assert await notifier.send("11987654321", "Olá") is False
    assert requests[0].url.path.endswith("/123/messages")
    assert requests[0].headers["Authorization"] == "Bearer token"
    await client.aclose()


def test_edited_messages_are_not_extracted():
    payload = {"update_id": 1002, "edited_message": _update(text="Ana Maria")["message"]}
    assert TelegramUpdateDTO.model_validate(payload).extract_messages() == []


def test_edit_of_earlier_answer_leaves_session_alone():
    store = MemorySessionStore()
    send_reply = SendReplyUseCase(platform=MockTelegramPlatform())
    repository = MemoryReservationRepository()
    scheduler = AsyncioReminderScheduler()
    handler = HandleIncomingMessageUseCase(
        store=store,
        booking=BookingUseCase(repository, scheduler, MockNotifier(), send_reply, "Barbearia X"),
        cancellation=CancellationUseCase(repository, scheduler),
        send_reply=send_reply,
        business_name="Barbearia X",
    )
    waiting_for_phone = Session.start("4242", Flow.BOOKING).advance(name="Ana")
    store.put(waiting_for_phone)
    app.dependency_overrides[get_handle_incoming_message_use_case] = lambda: handler
    try:
        payload = {"update_id": 1003, "edited_message": _update(text="Ana Maria")["message"]}
        resp = TestClient(app).post("/webhooks/telegram", json=payload)
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 200
    assert store.get("4242") == waiting_for_phone
