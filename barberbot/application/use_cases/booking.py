from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable

from barberbot.application.dto.step_result import StepResult
from barberbot.application.exceptions import ReservationConflictError
from barberbot.application.ports.notifier import NotifierPort
from barberbot.application.ports.reminder_scheduler import ReminderSchedulerPort
from barberbot.application.ports.reservation_repository import ReservationRepositoryPort
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.application.utils import replies
from barberbot.application.utils.availability import available_slots
from barberbot.application.utils.date_rules import DateRejection, check_booking_date
from barberbot.application.utils.normalizers import normalize_date, normalize_service, normalize_time
from barberbot.domain.entities.reservation import Reservation, ReservationFilter
from barberbot.domain.entities.service_catalog import Provider, find_provider, get_provider_by_id
from barberbot.domain.entities.session import Flow, InvalidTransitionError, Session, Step

NO_SLOTS_POLICIES = ("ask_date", "ask_barber")

DATE_REJECTION_MESSAGES = {
    DateRejection.INVALID: replies.INVALID_DATE,
    DateRejection.SUNDAY: replies.SUNDAY_DATE,
    DateRejection.PAST: replies.PAST_DATE,
    DateRejection.TOO_FAR: replies.TOO_FAR_DATE,
}

StepHandler = Callable[[Session, str], Awaitable[StepResult]]


class BookingUseCase:
    """
    Booking flow: ask_name -> ask_phone -> ask_service -> ask_date -> ask_barber -> ask_time.

    Each call consumes one user input for the session's current step. Invalid
    input returns a "retry" result carrying the unchanged session; valid input
    returns the advanced session. Completing ask_time commits the reservation
    and returns no session, which tears the conversation's session down.
    """

    def __init__(
        self,
        repository: ReservationRepositoryPort,
        scheduler: ReminderSchedulerPort,
        notifier: NotifierPort,
        send_reply: SendReplyUseCase,
        business_name: str,
        reminder_lead_minutes: int = 60,
        no_slots_policy: str = "ask_date",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if no_slots_policy not in NO_SLOTS_POLICIES:
            raise ValueError(f"no_slots_policy must be one of {NO_SLOTS_POLICIES}, got {no_slots_policy!r}")
        self._repository = repository
        self._scheduler = scheduler
        self._notifier = notifier
        self._send_reply = send_reply
        self._business_name = business_name
        self._reminder_lead = timedelta(minutes=reminder_lead_minutes)
        self._no_slots_policy = no_slots_policy
        self._clock = clock
        self._logger = logging.getLogger(__name__)
        self._handlers: dict[Step, StepHandler] = {
            Step.ASK_NAME: self._ask_name,
            Step.ASK_PHONE: self._ask_phone,
            Step.ASK_SERVICE: self._ask_service,
            Step.ASK_DATE: self._ask_date,
            Step.ASK_BARBER: self._ask_barber,
            Step.ASK_TIME: self._ask_time,
        }

    @property
    def handled_steps(self) -> frozenset[Step]:
        return frozenset(self._handlers)

    async def process(self, session: Session, text: str) -> StepResult:
        handler = self._handlers.get(session.step)
        if session.flow is not Flow.BOOKING or handler is None:
            raise InvalidTransitionError(
                f"Booking flow cannot handle step '{session.step.value}' of flow '{session.flow.value}'"
            )
        return await handler(session, text.strip())

    async def _ask_name(self, session: Session, text: str) -> StepResult:
        if not text:
            return _retry(session, replies.ASK_NAME)
        return _advance(session.advance(name=text), replies.ASK_PHONE)

    async def _ask_phone(self, session: Session, text: str) -> StepResult:
        # Stored verbatim; the number is not validated.
        if not text:
            return _retry(session, replies.ASK_PHONE)
        return _advance(session.advance(phone=text), replies.ask_service())

    async def _ask_service(self, session: Session, text: str) -> StepResult:
        service = normalize_service(text)
        if service is None:
            return _retry(session, replies.invalid_service())
        return _advance(session.advance(service=service.name, price=service.price), replies.ASK_DATE)

    async def _ask_date(self, session: Session, text: str) -> StepResult:
        canonical = normalize_date(text)
        if canonical is None:
            return _retry(session, replies.INVALID_DATE)

        rejection = check_booking_date(canonical, self._clock().date())
        if rejection is not None:
            self._logger.debug(
                "Date rejected",
                extra={"conversation_id": session.conversation_id, "reason": rejection.value},
            )
            return _retry(session, DATE_REJECTION_MESSAGES[rejection])

        return _advance(session.advance(date=canonical), replies.ask_barber())

    async def _ask_barber(self, session: Session, text: str) -> StepResult:
        provider = find_provider(text)
        if provider is None:
            return _retry(session, replies.invalid_barber())

        slots = await self._free_slots(session.date, provider)
        if not slots:
            return self._no_slots(session, provider)

        updated = session.advance(provider_id=provider.id, offered_slots=tuple(slots))
        return _advance(updated, replies.offer_slots(session.date, provider.display_name, slots))

    async def _ask_time(self, session: Session, text: str) -> StepResult:
        time = normalize_time(text)
        if time is None:
            return _retry(session, replies.invalid_time())
        if time not in session.offered_slots:
            return _retry(session, replies.unavailable_time(session.offered_slots))

        starts_at = datetime.strptime(f"{session.date} {time}", "%d/%m/%Y %H:%M")
        if starts_at < self._clock():
            return _retry(session, replies.PAST_TIME)

        provider = get_provider_by_id(session.provider_id)
        if provider is None:
            raise InvalidTransitionError(f"Session holds unknown provider '{session.provider_id}'")

        reservation = Reservation(
            name=session.name,
            phone=session.phone,
            service=session.service,
            provider_id=provider.id,
            date=session.date,
            time=time,
            price=session.price,
        )
        try:
            await self._repository.create(reservation)
        except ReservationConflictError:
            self._logger.info(
                "Slot taken before commit",
                extra={"conversation_id": session.conversation_id, "reservation": reservation.key},
            )
            return await self._after_conflict(session, provider)

        self._schedule_reminder(session.conversation_id, reservation)
        await self._notify(reservation, provider)

        self._logger.info(
            "Booking completed",
            extra={"conversation_id": session.conversation_id, "reservation": reservation.key},
        )
        return StepResult(
            action="completed",
            message=replies.booking_summary(reservation, provider.display_name),
            updated_session=None,
            parse_mode="Markdown",
            reservation=reservation,
        )

    async def _free_slots(self, date: str, provider: Provider) -> list[str]:
        same_day = await self._repository.find(ReservationFilter(date=date))
        return available_slots(date, provider.id, same_day)

    def _no_slots(self, session: Session, provider: Provider, action: str = "fallback") -> StepResult:
        if self._no_slots_policy == "ask_date":
            return StepResult(
                action=action,
                message=replies.no_slots_pick_date(session.date, provider.display_name),
                updated_session=session.fall_back(Step.ASK_DATE, date=None, provider_id=None, offered_slots=()),
            )
        message = replies.no_slots_pick_barber(session.date, provider.display_name)
        if session.step is Step.ASK_BARBER:
            return _retry(session, message)
        return StepResult(
            action=action,
            message=message,
            updated_session=session.fall_back(Step.ASK_BARBER, provider_id=None, offered_slots=()),
        )

    async def _after_conflict(self, session: Session, provider: Provider) -> StepResult:
        slots = await self._free_slots(session.date, provider)
        if not slots:
            return self._no_slots(session, provider, action="conflict")
        return StepResult(
            action="conflict",
            message=replies.slot_taken(slots),
            updated_session=session.with_fields(offered_slots=tuple(slots)),
        )

    def _schedule_reminder(self, conversation_id: str, reservation: Reservation) -> None:
        async def send_reminder() -> None:
            await self._send_reply.execute(conversation_id, replies.reminder(reservation, self._business_name))

        trigger_at = reservation.starts_at - self._reminder_lead
        try:
            self._scheduler.schedule(reservation.key, conversation_id, trigger_at, send_reminder)
        except Exception as e:
            # The reservation is already committed; losing the reminder must not undo it.
            self._logger.error(
                "Error scheduling reminder",
                extra={"conversation_id": conversation_id, "reservation": reservation.key, "error": str(e)},
            )

    async def _notify(self, reservation: Reservation, provider: Provider) -> None:
        text = replies.whatsapp_confirmation(reservation, provider.display_name)
        try:
            delivered = await self._notifier.send(reservation.phone, text)
        except Exception as e:
            self._logger.error("Error sending booking notification", extra={"error": str(e)})
            return
        if not delivered:
            self._logger.warning("Booking notification not delivered", extra={"reservation": reservation.key})


def _retry(session: Session, message: str) -> StepResult:
    return StepResult(action="retry", message=message, updated_session=session)


def _advance(session: Session, message: str) -> StepResult:
    return StepResult(action="advance", message=message, updated_session=session)
