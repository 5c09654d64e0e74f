from __future__ import annotations

import logging
from typing import Awaitable, Callable

from barberbot.application.dto.step_result import StepResult
from barberbot.application.ports.reminder_scheduler import ReminderSchedulerPort
from barberbot.application.ports.reservation_repository import ReservationRepositoryPort
from barberbot.application.utils import replies
from barberbot.application.utils.date_rules import parse_canonical_date
from barberbot.application.utils.normalizers import normalize_date, normalize_time
from barberbot.domain.entities.reservation import Reservation, ReservationFilter
from barberbot.domain.entities.session import Flow, InvalidTransitionError, Session, Step


class CancellationUseCase:
    """Cancellation flow: cancel_name -> cancel_date -> cancel_time."""

    def __init__(self, repository: ReservationRepositoryPort, scheduler: ReminderSchedulerPort) -> None:
        self._repository = repository
        self._scheduler = scheduler
        self._logger = logging.getLogger(__name__)
        self._handlers: dict[Step, Callable[[Session, str], Awaitable[StepResult]]] = {
            Step.CANCEL_NAME: self._cancel_name,
            Step.CANCEL_DATE: self._cancel_date,
            Step.CANCEL_TIME: self._cancel_time,
        }

    @property
    def handled_steps(self) -> frozenset[Step]:
        return frozenset(self._handlers)

    async def process(self, session: Session, text: str) -> StepResult:
        handler = self._handlers.get(session.step)
        if session.flow is not Flow.CANCELLATION or handler is None:
            raise InvalidTransitionError(
                f"Cancellation flow cannot handle step '{session.step.value}' of flow '{session.flow.value}'"
            )
        return await handler(session, text.strip())

    async def cancel(self, name: str, date: str, time: str) -> Reservation | None:
        """Delete one reservation matching (name, date, time) and drop its pending reminder."""
        deleted = await self._repository.find_one_and_delete(ReservationFilter(name=name, date=date, time=time))
        if deleted is not None:
            self._scheduler.cancel(deleted.key)
        return deleted

    async def _cancel_name(self, session: Session, text: str) -> StepResult:
        if not text:
            return StepResult(action="retry", message=replies.CANCEL_ASK_NAME, updated_session=session)
        return StepResult(
            action="advance",
            message=replies.CANCEL_ASK_DATE,
            updated_session=session.advance(name=text),
            parse_mode="Markdown",
        )

    async def _cancel_date(self, session: Session, text: str) -> StepResult:
        canonical = normalize_date(text)
        if canonical is None or parse_canonical_date(canonical) is None:
            return StepResult(action="retry", message=replies.INVALID_DATE, updated_session=session)
        return StepResult(
            action="advance",
            message=replies.CANCEL_ASK_TIME,
            updated_session=session.advance(date=canonical),
            parse_mode="Markdown",
        )

    async def _cancel_time(self, session: Session, text: str) -> StepResult:
        time = normalize_time(text)
        if time is None:
            return StepResult(action="retry", message=replies.CANCEL_INVALID_TIME, updated_session=session)

        deleted = await self.cancel(session.name, session.date, time)
        if deleted is None:
            self._logger.info(
                "Cancellation target not found",
                extra={"conversation_id": session.conversation_id, "reason": "not_found"},
            )
            return StepResult(action="not_found", message=replies.CANCEL_NOT_FOUND, updated_session=None)

        self._logger.info(
            "Reservation cancelled",
            extra={"conversation_id": session.conversation_id, "reservation": deleted.key},
        )
        return StepResult(
            action="completed",
            message=replies.cancelled(deleted.name, deleted.date, deleted.time),
            updated_session=None,
            parse_mode="Markdown",
            reservation=deleted,
        )
