from abc import ABC, abstractmethod


class MessagePlatformPort(ABC):
    @abstractmethod
    async def send_text(self, conversation_id: str, text: str, parse_mode: str | None = None) -> None:
        raise NotImplementedError
