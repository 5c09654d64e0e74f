from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncContextManager

from barberbot.domain.entities.session import Session


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, conversation_id: str) -> Session | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, session: Session) -> None:
        """Create or replace the session of its conversation."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, conversation_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def lock(self, conversation_id: str) -> AsyncContextManager[None]:
        """
        Per-conversation lock. Holders run one step handler at a time for that id;
        different ids never share a lock. Use as `async with store.lock(id):`.
        """
        raise NotImplementedError

    @abstractmethod
    def has_processed(self, message_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, message_id: str) -> None:
        raise NotImplementedError
