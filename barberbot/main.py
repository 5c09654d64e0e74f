import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from barberbot.api.v1.reservations import router as reservations_router
from barberbot.api.webhooks import router as webhooks_router
from barberbot.core.config import settings
from barberbot.infrastructure.store.sql_reservation_repository import SqlReservationRepository
from barberbot.wiring.dependencies import get_reminder_scheduler, get_reservation_repository


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("conversation_id", "message_id", "flow", "step", "action", "reservation", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    repository = get_reservation_repository()
    if isinstance(repository, SqlReservationRepository):
        await repository.create_schema()
    logger.info("%s booking bot started", settings.BUSINESS_NAME)
    yield
    # Pending reminders are not persisted; they are dropped with the process.
    get_reminder_scheduler().shutdown()
    if isinstance(repository, SqlReservationRepository):
        await repository.dispose()


app = FastAPI(title="Barbershop Booking Bot", version="1.0.0", lifespan=lifespan)

app.include_router(webhooks_router, tags=["webhooks"])
app.include_router(reservations_router, prefix="/api/v1/reservations", tags=["reservations"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
