from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from barberbot.application.dto.telegram_update import TelegramUpdateDTO
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.infrastructure.telegram.webhook_verify import verify_secret_token
from barberbot.wiring.dependencies import get_handle_incoming_message_use_case
from barberbot.core.config import settings


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/telegram")
async def telegram_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: HandleIncomingMessageUseCase = Depends(get_handle_incoming_message_use_case),
) -> Response:
    secret = request.headers.get("X-Telegram-Bot-Api-Secret-Token")
    if not verify_secret_token(secret, settings.TELEGRAM_WEBHOOK_SECRET, settings.ENV):
        return Response(status_code=403)

    body = await request.body()
    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
        update = TelegramUpdateDTO.model_validate(payload)
    except ValueError:
        logger.exception("Failed to parse webhook body")
        return Response(status_code=400)

    messages = update.extract_messages()
    logger.info("Webhook received", extra={"message_count": len(messages)})

    for message in messages:
        background_tasks.add_task(use_case.handle, message)

    return Response(status_code=200)
