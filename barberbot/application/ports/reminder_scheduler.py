from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable

from barberbot.domain.entities.reminder import ReminderJob

ReminderCallback = Callable[[], Awaitable[None]]


class ReminderSchedulerPort(ABC):
    @abstractmethod
    def schedule(
        self,
        key: tuple[str, str, str],
        conversation_id: str,
        trigger_at: datetime,
        callback: ReminderCallback,
    ) -> ReminderJob | None:
        """
        Register a one-shot reminder. Returns None when the trigger is already
        past and the scheduler is configured to drop such reminders.
        """
        raise NotImplementedError

    @abstractmethod
    def cancel(self, key: tuple[str, str, str]) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get(self, key: tuple[str, str, str]) -> ReminderJob | None:
        raise NotImplementedError
