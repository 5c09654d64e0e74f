from __future__ import annotations

import logging

from barberbot.application.ports.message_platform import MessagePlatformPort


class MockTelegramPlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self._logger = logging.getLogger(__name__)

    async def send_text(self, conversation_id: str, text: str, parse_mode: str | None = None) -> None:
        self.sent.append((conversation_id, text))
        self._logger.info("Mock send to Telegram", extra={"conversation_id": conversation_id, "reply_text": text})
