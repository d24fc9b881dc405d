from datetime import datetime
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    # Environment
    environment: str = "development"  # "development" or "production"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # Backend (hosted app entities API)
    backend_base_url: str = "https://app.base44.com/api/apps"
    backend_app_id: str = ""
    backend_api_key: str = ""
    backend_timeout: float = 30.0

    # Messaging (Twilio content templates)
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""
    twilio_channel_prefix: str = "whatsapp:"
    template_registration_open: str = ""
    template_game_reminder: str = ""

    # Scheduling
    timezone: str = "Asia/Jerusalem"
    check_interval_minutes: int = 1
    match_tolerance_minutes: int = 3
    default_open_time: str = "12:00"
    scheduler_enabled: bool = True

    # Notifications
    notification_enabled: bool = True
    send_delay_seconds: float = 1.0
    country_code: str = "972"
    default_display_name: str = "Player"
    app_base_url: str = ""

    # Admin
    admin_api_key: str = ""

    @field_validator("default_open_time")
    @classmethod
    def _check_open_time(cls, value: str) -> str:
        datetime.strptime(value, "%H:%M")
        return value

    @model_validator(mode="after")
    def _check_tolerance(self) -> "Settings":
        # a window narrower than the polling interval can fall between two ticks
        if self.match_tolerance_minutes < self.check_interval_minutes:
            raise ValueError(
                "match_tolerance_minutes must be >= check_interval_minutes"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def backend_entities_url(self) -> str:
        return f"{self.backend_base_url.rstrip('/')}/{self.backend_app_id}/entities"


@lru_cache
def get_settings() -> Settings:
    return Settings()
