from abc import ABC, abstractmethod

from crossfile_review.core.domain.review import ReviewContext


class NotifierPort(ABC):
    """Port for the team chat channel that hears about finished reviews."""

    @abstractmethod
    async def notify_review_completed(
        self, context: ReviewContext, comment_count: int, mr_url: str
    ) -> None:
        """Announce a completed review."""

    @abstractmethod
    async def notify_error(self, project_name: str, mr_title: str, mr_url: str, error: str) -> None:
        """Announce a failed review."""
