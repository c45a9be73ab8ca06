from crossfile_review.infrastructure.entrypoints.api.dtos.gitlab_webhook_dto import (
    GitLabMergeRequestWebhookDTO,
)

__all__ = ["GitLabMergeRequestWebhookDTO"]
