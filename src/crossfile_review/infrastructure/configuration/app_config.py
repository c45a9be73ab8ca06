from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from crossfile_review.infrastructure.configuration.gitlab_settings import GitLabSettings
from crossfile_review.infrastructure.configuration.google_chat_settings import GoogleChatSettings
from crossfile_review.infrastructure.configuration.llm_settings import LlmSettings
from crossfile_review.infrastructure.configuration.review_settings import ReviewSettings


class AppConfig(BaseSettings):
    """Master configuration class combining all sub-settings."""

    app_name: str = Field(default="crossfile-review", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["console", "json"] = Field(default="console", alias="LOG_FORMAT")

    review: ReviewSettings = Field(default_factory=ReviewSettings)
    gitlab: GitLabSettings = Field(default_factory=GitLabSettings)
    llm: LlmSettings = Field(default_factory=LlmSettings)
    google_chat: GoogleChatSettings = Field(default_factory=GoogleChatSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
