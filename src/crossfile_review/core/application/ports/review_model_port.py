from abc import ABC, abstractmethod


class ReviewModelPort(ABC):
    """Port for the language model that writes the review."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send *prompt* and return the raw reply text.

        Raises:
            ProviderError: When no configured model produced a reply.
        """
