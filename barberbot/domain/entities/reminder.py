from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime


@dataclass
class ReminderJob:
    key: tuple[str, str, str]
    conversation_id: str
    trigger_at: datetime
    task: asyncio.Task[None]

    @property
    def done(self) -> bool:
        return self.task.done()
