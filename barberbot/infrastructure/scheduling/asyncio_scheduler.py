from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from barberbot.application.ports.reminder_scheduler import ReminderCallback, ReminderSchedulerPort
from barberbot.domain.entities.reminder import ReminderJob

PAST_TRIGGER_POLICIES = ("drop", "fire")


class AsyncioReminderScheduler(ReminderSchedulerPort):
    """
    One-shot reminders backed by asyncio tasks on the running loop.

    Jobs live only in memory: reminders pending at shutdown are lost.
    """

    def __init__(
        self,
        past_trigger_policy: str = "drop",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if past_trigger_policy not in PAST_TRIGGER_POLICIES:
            raise ValueError(
                f"past_trigger_policy must be one of {PAST_TRIGGER_POLICIES}, got {past_trigger_policy!r}"
            )
        self._past_trigger_policy = past_trigger_policy
        self._clock = clock
        self._jobs: dict[tuple[str, str, str], ReminderJob] = {}
        self._logger = logging.getLogger(__name__)

    def schedule(
        self,
        key: tuple[str, str, str],
        conversation_id: str,
        trigger_at: datetime,
        callback: ReminderCallback,
    ) -> ReminderJob | None:
        delay = (trigger_at - self._clock()).total_seconds()
        if delay < 0 and self._past_trigger_policy == "drop":
            self._logger.info(
                "Reminder dropped, trigger already past",
                extra={"conversation_id": conversation_id, "reservation": key, "trigger_at": trigger_at.isoformat()},
            )
            return None

        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._run(key, max(delay, 0.0), callback))
        job = ReminderJob(key=key, conversation_id=conversation_id, trigger_at=trigger_at, task=task)
        self._jobs[key] = job
        self._logger.info(
            "Reminder scheduled",
            extra={"conversation_id": conversation_id, "reservation": key, "trigger_at": trigger_at.isoformat()},
        )
        return job

    def cancel(self, key: tuple[str, str, str]) -> bool:
        job = self._jobs.pop(key, None)
        if job is None or job.done:
            return False
        job.task.cancel()
        self._logger.info("Reminder cancelled", extra={"conversation_id": job.conversation_id, "reservation": key})
        return True

    def get(self, key: tuple[str, str, str]) -> ReminderJob | None:
        return self._jobs.get(key)

    def pending(self) -> list[ReminderJob]:
        return [job for job in self._jobs.values() if not job.done]

    def shutdown(self) -> None:
        for key in list(self._jobs):
            self.cancel(key)

    async def _run(self, key: tuple[str, str, str], delay: float, callback: ReminderCallback) -> None:
        try:
            await asyncio.sleep(delay)
            await callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            self._logger.exception("Reminder callback failed", extra={"reservation": key})
        finally:
            job = self._jobs.get(key)
            if job is not None and job.task is asyncio.current_task():
                del self._jobs[key]
