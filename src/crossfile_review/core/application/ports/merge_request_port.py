from abc import ABC, abstractmethod

from crossfile_review.core.domain.review import DiscussionPosition, FileChange, MergeRequest


class MergeRequestPort(ABC):
    """Port for reading a merge request and writing comments back to it.

    Implementations raise ``ProviderError`` on any failed call.
    """

    @abstractmethod
    async def get_merge_request(self, project_id: int, mr_iid: int) -> MergeRequest:
        """Fetch merge request metadata, including its diff refs."""

    @abstractmethod
    async def get_changes(self, project_id: int, mr_iid: int) -> list[FileChange]:
        """Fetch every changed file with its unified diff."""

    @abstractmethod
    async def post_note(self, project_id: int, mr_iid: int, body: str) -> None:
        """Post a general (non-positioned) note."""

    @abstractmethod
    async def post_line_comment(
        self, project_id: int, mr_iid: int, body: str, position: DiscussionPosition
    ) -> None:
        """Open a discussion anchored at *position*."""
