from __future__ import annotations

import logging
import re

import httpx

from barberbot.application.exceptions import NotificationError

BRAZIL_COUNTRY_CODE = "55"


def to_whatsapp_number(phone: str) -> str:
    """Digits only, with the Brazilian country code added to bare DDD + number inputs."""
    digits = re.sub(r"\D", "", phone)
    if len(digits) in (10, 11):
        return BRAZIL_COUNTRY_CODE + digits
    return digits


class WhatsAppClient:
    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        base_url: str = "https://graph.facebook.com/v20.0",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._endpoint = f"{base_url.rstrip('/')}/{phone_number_id}/messages"
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    async def send_text(self, phone: str, text: str) -> None:
        to = to_whatsapp_number(phone)
        if not to:
            raise NotificationError(f"Phone {phone!r} has no digits")

        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        }
        headers = {"Authorization": f"Bearer {self._access_token}"}
        try:
            resp = await self._client.post(self._endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise NotificationError(f"WhatsApp request failed: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "WhatsApp send failed",
                extra={"status": resp.status_code, "error_message": resp.text, "text_length": len(text)},
            )
            raise NotificationError(f"WhatsApp API returned {resp.status_code}")

    async def aclose(self) -> None:
        await self._client.aclose()
