from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleChatSettings(BaseSettings):
    enabled: bool = Field(default=False, alias="GOOGLE_CHAT_ENABLED")
    webhook_url: str = Field(default="", alias="GOOGLE_CHAT_WEBHOOK_URL")
    timeout_seconds: float = Field(default=10.0, gt=0, alias="GOOGLE_CHAT_TIMEOUT_SECONDS")
    max_attempts: int = Field(default=3, ge=1, alias="GOOGLE_CHAT_MAX_ATTEMPTS")

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.webhook_url.strip())

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
