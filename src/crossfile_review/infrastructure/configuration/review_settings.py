from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from crossfile_review.core.application.config import ReviewConfig
from crossfile_review.infrastructure.configuration.json_list import parse_json_list


class ReviewSettings(BaseSettings):
    """Review pipeline tunables: file filters, chunking, search fan-out and sampling."""

    max_files: int = Field(default=50, ge=1, alias="REVIEW_MAX_FILES")
    max_file_size: int = Field(default=1_048_576, ge=1, alias="REVIEW_MAX_FILE_SIZE")
    line_by_line_enabled: bool = Field(default=True, alias="REVIEW_LINE_BY_LINE_ENABLED")
    skip_deleted_files: bool = Field(default=True, alias="REVIEW_SKIP_DELETED_FILES")
    excluded_extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="REVIEW_EXCLUDED_EXTENSIONS"
    )
    excluded_paths: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="REVIEW_EXCLUDED_PATHS"
    )
    search_concurrency: int = Field(default=4, ge=1, alias="REVIEW_SEARCH_CONCURRENCY")

    # ── Chunking ──
    chunking_enabled: bool = Field(default=False, alias="REVIEW_CHUNKING_ENABLED")
    files_per_chunk: int = Field(default=5, ge=1, alias="REVIEW_FILES_PER_CHUNK")

    # ── Model sampling ──
    ai_temperature: float = Field(default=0.3, ge=0.0, le=2.0, alias="REVIEW_AI_TEMPERATURE")
    ai_max_tokens: int = Field(default=12000, ge=100, alias="REVIEW_AI_MAX_TOKENS")
    ai_top_p: float = Field(default=0.95, gt=0.0, le=1.0, alias="REVIEW_AI_TOP_P")

    @field_validator("excluded_extensions", "excluded_paths", mode="before")
    @classmethod
    def _parse_lists(cls, value: object) -> list[str]:
        return parse_json_list(value)

    def to_review_config(self) -> ReviewConfig:
        return ReviewConfig(
            max_files=self.max_files,
            max_file_size=self.max_file_size,
            skip_deleted_files=self.skip_deleted_files,
            excluded_extensions=tuple(self.excluded_extensions),
            excluded_paths=tuple(self.excluded_paths),
            line_by_line_enabled=self.line_by_line_enabled,
            chunking_enabled=self.chunking_enabled,
            files_per_chunk=self.files_per_chunk,
        )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
