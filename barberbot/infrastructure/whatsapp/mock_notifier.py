from __future__ import annotations

import logging

from barberbot.application.ports.notifier import NotifierPort


class MockNotifier(NotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def send(self, phone: str, text: str) -> bool:
        self._logger.info("Mock WhatsApp send", extra={"phone": phone, "reply_text": text})
        return True
