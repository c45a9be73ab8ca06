from crossfile_review.infrastructure.configuration.app_config import AppConfig
from crossfile_review.infrastructure.configuration.gitlab_settings import GitLabSettings
from crossfile_review.infrastructure.configuration.google_chat_settings import GoogleChatSettings
from crossfile_review.infrastructure.configuration.llm_settings import LlmSettings
from crossfile_review.infrastructure.configuration.review_settings import ReviewSettings

__all__ = ["AppConfig", "GitLabSettings", "GoogleChatSettings", "LlmSettings", "ReviewSettings"]
