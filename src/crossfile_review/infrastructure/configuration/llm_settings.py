from typing import Annotated

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from crossfile_review.infrastructure.configuration.json_list import parse_json_list

DEFAULT_MODEL_PRIORITY = ["openai:gpt-4o", "anthropic:claude-3-5-sonnet-20241022"]


class LlmSettings(BaseSettings):
    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    deepseek_api_key: SecretStr | None = Field(default=None, alias="DEEPSEEK_API_KEY")
    gemini_api_key: SecretStr | None = Field(default=None, alias="GEMINI_API_KEY")
    anthropic_api_key: SecretStr | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    model_priority: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MODEL_PRIORITY),
        alias="CODE_REVIEW_LLM_MODEL_PRIORITY",
    )

    @field_validator("model_priority", mode="before")
    @classmethod
    def _parse_priority(cls, value: object) -> list[str]:
        return parse_json_list(value)

    def api_keys(self) -> dict[str, str]:
        """Provider environment variable name -> key, for the keys that are set."""
        keys = {
            "OPENAI_API_KEY": self.openai_api_key,
            "DEEPSEEK_API_KEY": self.deepseek_api_key,
            "GEMINI_API_KEY": self.gemini_api_key,
            "ANTHROPIC_API_KEY": self.anthropic_api_key,
        }
        return {name: key.get_secret_value() for name, key in keys.items() if key is not None}

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
