from __future__ import annotations

import logging

from barberbot.application.exceptions import NotificationError
from barberbot.application.ports.notifier import NotifierPort
from barberbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient


class WhatsAppNotifier(NotifierPort):
    def __init__(self, client: WhatsAppClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def send(self, phone: str, text: str) -> bool:
        try:
            await self._client.send_text(phone, text)
        except NotificationError as e:
            self._logger.warning("WhatsApp notification not delivered", extra={"reason": str(e)})
            return False
        return True
