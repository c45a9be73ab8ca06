from abc import ABC, abstractmethod

from crossfile_review.core.domain.dependencies import SearchHit


class CodeSearchPort(ABC):
    """Port for repository-wide code search."""

    @abstractmethod
    async def search(self, project_id: int, query: str, ref: str) -> list[SearchHit]:
        """Return files on *ref* whose content matches *query*.

        Args:
            project_id: The repository to search in.
            query: The literal text to search for, usually a symbol name.
            ref: Branch or commit the search is scoped to.

        Returns:
            Matching hits, possibly empty.

        Raises:
            ProviderError: When the search backend fails. Callers treat this
                as "no matches" for the single query.
        """
