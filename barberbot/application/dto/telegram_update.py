from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from barberbot.domain.entities.message import Message


class TelegramUpdateDTO(BaseModel):
    update_id: int
    message: dict[str, Any] | None = None
    edited_message: dict[str, Any] | None = None

    def extract_messages(self) -> list[Message]:
        # Edits of earlier messages are ignored; only new messages answer the current step.
        if self.edited_message is not None:
            return []
        payload = self.message
        if not payload:
            return []

        text = payload.get("text")
        chat_id = (payload.get("chat") or {}).get("id")
        sender = (payload.get("from") or {}).get("id", chat_id)
        timestamp = payload.get("date")

        # Stickers, photos and service messages carry no text to process.
        if text is None or chat_id is None or timestamp is None:
            return []

        return [
            Message(
                id=str(self.update_id),
                conversation_id=str(chat_id),
                sender_id=str(sender),
                text=str(text),
                timestamp=int(timestamp),
                platform="telegram",
            )
        ]
