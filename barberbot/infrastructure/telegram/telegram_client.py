from __future__ import annotations

import logging

import httpx


class TelegramClient:
    def __init__(
        self,
        bot_token: str,
        base_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = f"{base_url.rstrip('/')}/bot{bot_token}"
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    async def send_message(self, chat_id: str, text: str, parse_mode: str | None = None) -> None:
        payload: dict[str, object] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        resp = await self._client.post(f"{self._endpoint}/sendMessage", json=payload)
        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("error_code")
                error_message = error_json.get("description")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "Telegram send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error_message": error_message,
                    "conversation_id": chat_id,
                    "text_length": len(text),
                },
            )
            resp.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()
