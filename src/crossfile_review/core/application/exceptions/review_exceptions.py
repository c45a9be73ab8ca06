"""Review service exception hierarchy.

Every workflow and adapter raises from this tree so callers can handle
failures by type instead of matching on message strings.
"""

from dataclasses import dataclass
from typing import Any


class ApplicationError(Exception):
    """Base exception for all application-layer errors."""

    def __init__(self, message: str = "", *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


class WorkflowExecutionError(ApplicationError):
    """Raised when a review pipeline fails at any step."""


class WorkflowHaltedException(ApplicationError):
    """Benign early exit: the review stopped on purpose.

    Example: the merge request is still a draft, or every changed file was
    filtered out. Callers log it and move on.
    """


class ReviewAbortedError(ApplicationError):
    """The one-time global dependency or impact pass failed; no comments were posted."""


class InvalidWebhookError(ApplicationError):
    """The incoming webhook failed token, event-type or object-kind validation."""


@dataclass(eq=False)
class ProviderError(Exception):
    """A collaborator (GitLab, model provider, chat webhook) call failed."""

    provider: str
    message: str
    retryable: bool = False
    status_code: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        code = f" status={self.status_code}" if self.status_code is not None else ""
        return f"{self.provider}: {self.message}{code}"
