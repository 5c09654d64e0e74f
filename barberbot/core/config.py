from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "Barbearia X"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = True

    TELEGRAM_BOT_TOKEN: str | None = None
    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
    TELEGRAM_WEBHOOK_SECRET: str | None = None

    WHATSAPP_ACCESS_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None
    WHATSAPP_API_BASE_URL: str = "https://graph.facebook.com/v20.0"

    # Unset keeps reservations in memory, e.g. sqlite+aiosqlite:///./data/barberbot.db
    DATABASE_URL: str | None = None

    REMINDER_LEAD_MINUTES: int = 60
    REMINDER_PAST_TRIGGER_POLICY: Literal["drop", "fire"] = "drop"
    NO_SLOTS_POLICY: Literal["ask_date", "ask_barber"] = "ask_date"


settings = Settings()
