from crossfile_review.core.application.exceptions.review_exceptions import (
    ApplicationError,
    InvalidWebhookError,
    ProviderError,
    ReviewAbortedError,
    WorkflowExecutionError,
    WorkflowHaltedException,
)

__all__ = [
    "ApplicationError",
    "InvalidWebhookError",
    "ProviderError",
    "ReviewAbortedError",
    "WorkflowExecutionError",
    "WorkflowHaltedException",
]
