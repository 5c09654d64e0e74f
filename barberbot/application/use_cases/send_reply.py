from __future__ import annotations

import logging

from barberbot.application.ports.message_platform import MessagePlatformPort


class SendReplyUseCase:
    def __init__(self, platform: MessagePlatformPort, enabled: bool = True) -> None:
        self._platform = platform
        self._enabled = enabled
        self._logger = logging.getLogger(__name__)

    async def execute(self, conversation_id: str, text: str, parse_mode: str | None = None) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped."""
        if not self._enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"conversation_id": conversation_id, "reply_text": text})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False
        await self._platform.send_text(conversation_id=conversation_id, text=text, parse_mode=parse_mode)
        return True
