from functools import lru_cache
import logging

from barberbot.core.config import settings
from barberbot.application.ports.message_platform import MessagePlatformPort
from barberbot.application.ports.notifier import NotifierPort
from barberbot.application.ports.reservation_repository import ReservationRepositoryPort
from barberbot.application.use_cases.booking import BookingUseCase
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.infrastructure.scheduling.asyncio_scheduler import AsyncioReminderScheduler
from barberbot.infrastructure.store.memory_reservation_repository import MemoryReservationRepository
from barberbot.infrastructure.store.memory_session_store import MemorySessionStore
from barberbot.infrastructure.store.sql_reservation_repository import SqlReservationRepository
from barberbot.infrastructure.telegram.mock_platform import MockTelegramPlatform
from barberbot.infrastructure.telegram.telegram_client import TelegramClient
from barberbot.infrastructure.telegram.telegram_platform import TelegramPlatform
from barberbot.infrastructure.whatsapp.mock_notifier import MockNotifier
from barberbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from barberbot.infrastructure.whatsapp.whatsapp_notifier import WhatsAppNotifier


logger = logging.getLogger(__name__)


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore()


@lru_cache
def get_reservation_repository() -> ReservationRepositoryPort:
    if settings.DATABASE_URL:
        logger.info("Using SqlReservationRepository")
        return SqlReservationRepository(database_url=settings.DATABASE_URL)
    logger.info("Using MemoryReservationRepository (DATABASE_URL unset)")
    return MemoryReservationRepository()


@lru_cache
def get_reminder_scheduler() -> AsyncioReminderScheduler:
    return AsyncioReminderScheduler(past_trigger_policy=settings.REMINDER_PAST_TRIGGER_POLICY)


@lru_cache
def get_message_platform() -> MessagePlatformPort:
    logger.info("TELEGRAM_BOT_TOKEN present=%s ENV=%s", bool(settings.TELEGRAM_BOT_TOKEN), settings.ENV)

    if not settings.TELEGRAM_BOT_TOKEN:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockTelegramPlatform (token missing, ENV=dev/local)")
            return MockTelegramPlatform()
        raise ValueError("TELEGRAM_BOT_TOKEN is required to send Telegram replies.")

    client = TelegramClient(bot_token=settings.TELEGRAM_BOT_TOKEN, base_url=settings.TELEGRAM_API_BASE_URL)
    return TelegramPlatform(client=client)


@lru_cache
def get_notifier() -> NotifierPort:
    if not settings.WHATSAPP_ACCESS_TOKEN or not settings.WHATSAPP_PHONE_NUMBER_ID:
        logger.info("Using MockNotifier (WhatsApp credentials missing)")
        return MockNotifier()
    client = WhatsAppClient(
        access_token=settings.WHATSAPP_ACCESS_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        base_url=settings.WHATSAPP_API_BASE_URL,
    )
    return WhatsAppNotifier(client=client)


def get_send_reply_use_case() -> SendReplyUseCase:
    return SendReplyUseCase(platform=get_message_platform(), enabled=settings.AUTO_REPLY_ENABLED)


def get_cancellation_use_case() -> CancellationUseCase:
    return CancellationUseCase(repository=get_reservation_repository(), scheduler=get_reminder_scheduler())


def get_booking_use_case() -> BookingUseCase:
    return BookingUseCase(
        repository=get_reservation_repository(),
        scheduler=get_reminder_scheduler(),
        notifier=get_notifier(),
        send_reply=get_send_reply_use_case(),
        business_name=settings.BUSINESS_NAME,
        reminder_lead_minutes=settings.REMINDER_LEAD_MINUTES,
        no_slots_policy=settings.NO_SLOTS_POLICY,
    )


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        store=get_session_store(),
        booking=get_booking_use_case(),
        cancellation=get_cancellation_use_case(),
        send_reply=get_send_reply_use_case(),
        business_name=settings.BUSINESS_NAME,
    )
