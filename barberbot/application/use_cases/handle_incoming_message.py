from __future__ import annotations

import logging

from barberbot.application.ports.session_store import SessionStorePort
from barberbot.application.use_cases.booking import BookingUseCase
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.application.utils import replies
from barberbot.domain.entities.message import Message
from barberbot.domain.entities.session import Flow, Session

COMMANDS = {
    "/start": "start",
    "/ajuda": "help",
    "/help": "help",
    "/servicos": "services",
    "/horarios": "hours",
    "/agendar": "book",
    "/cancelar": "cancel",
}


def parse_command(text: str) -> str | None:
    """Map '/cmd' or '/cmd@botname ...' to a command name; None when text is not a command."""
    if not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0].split("@", 1)[0].lower()
    return COMMANDS.get(head, "unknown")


class HandleIncomingMessageUseCase:
    def __init__(
        self,
        store: SessionStorePort,
        booking: BookingUseCase,
        cancellation: CancellationUseCase,
        send_reply: SendReplyUseCase,
        business_name: str,
    ) -> None:
        self._store = store
        self._booking = booking
        self._cancellation = cancellation
        self._send_reply = send_reply
        self._business_name = business_name
        self._logger = logging.getLogger(__name__)

    async def handle(self, message: Message) -> None:
        if self._store.has_processed(message.id):
            self._logger.info("Duplicate message ignored", extra={"message_id": message.id})
            return
        self._store.mark_processed(message.id)

        # One in-flight handler per conversation; a double-send waits here.
        async with self._store.lock(message.conversation_id):
            try:
                await self._dispatch(message)
            except Exception as e:
                # A failed step leaves the stored session untouched, so the user can simply retry.
                self._logger.exception(
                    "Error handling message",
                    extra={"conversation_id": message.conversation_id, "message_id": message.id, "error": str(e)},
                )
                await self._reply_safely(message.conversation_id, replies.GENERIC_ERROR)

    async def _dispatch(self, message: Message) -> None:
        conversation_id = message.conversation_id
        text = message.text.strip()

        command = parse_command(text)
        if command is not None:
            await self._run_command(conversation_id, command)
            return

        session = self._store.get(conversation_id)
        if session is None:
            self._store.put(Session.start(conversation_id, Flow.BOOKING))
            await self._send_reply.execute(conversation_id, replies.welcome(self._business_name), "Markdown")
            return

        if not text:
            await self._send_reply.execute(conversation_id, replies.EMPTY_INPUT)
            return

        flow = self._booking if session.flow is Flow.BOOKING else self._cancellation
        result = await flow.process(session, text)

        if result.updated_session is None:
            self._store.delete(conversation_id)
        else:
            self._store.put(result.updated_session)

        self._logger.info(
            "Step handled",
            extra={
                "conversation_id": conversation_id,
                "flow": session.flow.value,
                "step": session.step.value,
                "action": result.action,
            },
        )
        # The step is already applied; a failed reply is logged, not reported as a failed step.
        try:
            await self._send_reply.execute(conversation_id, result.message, result.parse_mode)
        except Exception as e:
            self._logger.error(
                "Error sending step reply",
                extra={"conversation_id": conversation_id, "action": result.action, "error": str(e)},
            )

    async def _run_command(self, conversation_id: str, command: str) -> None:
        if command == "start":
            self._store.put(Session.start(conversation_id, Flow.BOOKING))
            await self._send_reply.execute(conversation_id, replies.welcome(self._business_name), "Markdown")
        elif command == "services":
            await self._send_reply.execute(conversation_id, replies.services_menu(), "Markdown")
        elif command == "hours":
            await self._send_reply.execute(conversation_id, replies.OPENING_HOURS_TEXT, "Markdown")
        elif command == "book":
            self._store.put(Session.start(conversation_id, Flow.BOOKING))
            await self._send_reply.execute(conversation_id, replies.ASK_NAME)
        elif command == "cancel":
            self._store.put(Session.start(conversation_id, Flow.CANCELLATION))
            await self._send_reply.execute(conversation_id, replies.CANCEL_ASK_NAME)
        else:
            await self._send_reply.execute(conversation_id, replies.COMMANDS_TEXT, "Markdown")

    async def _reply_safely(self, conversation_id: str, text: str) -> None:
        try:
            await self._send_reply.execute(conversation_id, text)
        except Exception as e:
            self._logger.error("Error sending apology", extra={"conversation_id": conversation_id, "error": str(e)})
