from __future__ import annotations

from barberbot.application.ports.message_platform import MessagePlatformPort
from barberbot.infrastructure.telegram.telegram_client import TelegramClient


class TelegramPlatform(MessagePlatformPort):
    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    async def send_text(self, conversation_id: str, text: str, parse_mode: str | None = None) -> None:
        await self._client.send_message(chat_id=conversation_id, text=text, parse_mode=parse_mode)
