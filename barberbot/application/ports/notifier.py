from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    async def send(self, phone: str, text: str) -> bool:
        """Best-effort delivery to the customer's phone. Returns True if accepted by the provider."""
        raise NotImplementedError
