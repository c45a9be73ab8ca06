from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitLabSettings(BaseSettings):
    """Settings for the GitLab REST API and webhook validation."""

    base_url: str = Field(default="https://gitlab.com", alias="GITLAB_BASE_URL")
    token: SecretStr | None = Field(default=None, alias="GITLAB_TOKEN")
    webhook_secret: SecretStr | None = Field(default=None, alias="GITLAB_WEBHOOK_SECRET")
    timeout_seconds: float = Field(default=30.0, gt=0, alias="GITLAB_TIMEOUT_SECONDS")
    max_attempts: int = Field(default=3, ge=1, alias="GITLAB_MAX_ATTEMPTS")
    search_max_attempts: int = Field(default=2, ge=1, alias="GITLAB_SEARCH_MAX_ATTEMPTS")

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/v4"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
