from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from barberbot.application.ports.session_store import SessionStorePort
from barberbot.domain.entities.session import Session


class MemorySessionStore(SessionStorePort):
    """
    Process-wide session map. Sessions are never persisted: a restart drops
    every in-progress conversation.

    A conversation's lock exists only while some handler holds or awaits it.
    """

    def __init__(self, processed_limit: int = 1000) -> None:
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._processed: dict[str, None] = {}
        self._processed_limit = processed_limit
        self._logger = logging.getLogger(__name__)

    def get(self, conversation_id: str) -> Session | None:
        return self._sessions.get(conversation_id)

    def put(self, session: Session) -> None:
        self._sessions[session.conversation_id] = session

    def delete(self, conversation_id: str) -> None:
        if self._sessions.pop(conversation_id, None) is not None:
            self._logger.debug("Session removed", extra={"conversation_id": conversation_id})

    @asynccontextmanager
    async def lock(self, conversation_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        self._lock_users[conversation_id] = self._lock_users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users[conversation_id] - 1
            if remaining:
                self._lock_users[conversation_id] = remaining
            else:
                del self._lock_users[conversation_id]
                del self._locks[conversation_id]

    @property
    def lock_count(self) -> int:
        return len(self._locks)

    def has_processed(self, message_id: str) -> bool:
        return message_id in self._processed

    def mark_processed(self, message_id: str) -> None:
        self._processed[message_id] = None
        if len(self._processed) > self._processed_limit:
            # dicts keep insertion order; drop the oldest id
            oldest = next(iter(self._processed))
            del self._processed[oldest]
