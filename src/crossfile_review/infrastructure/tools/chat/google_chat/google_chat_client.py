from typing import Any

import httpx
import structlog

from crossfile_review.core.application.exceptions import ProviderError
from crossfile_review.infrastructure.common.retry import RetryPolicy
from crossfile_review.infrastructure.configuration import GoogleChatSettings

PROVIDER = "google_chat"


class GoogleChatClient:
    """Posts messages to an incoming Google Chat webhook; a no-op when unconfigured."""

    def __init__(
        self,
        settings: GoogleChatSettings,
        http: httpx.AsyncClient | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self._http = http or httpx.AsyncClient(timeout=settings.timeout_seconds)
        self._retry = RetryPolicy(max_attempts=settings.max_attempts)
        self._logger = logger or structlog.get_logger().bind(context_component="google_chat_client")

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send(self, message: dict[str, Any]) -> bool:
        """Send *message* (``{"text": ...}`` or ``{"cards": [...]}``); True when delivered."""
        if not self.is_configured:
            self._logger.debug("Google Chat disabled or not configured; message dropped")
            return False
        try:
            await self._retry.run(lambda: self._post(message))
        except ProviderError as exc:
            self._logger.warning(
                "Google Chat message not delivered",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return False
        return True

    async def _post(self, message: dict[str, Any]) -> None:
        try:
            response = await self._http.post(self.settings.webhook_url, json=message)
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER, str(exc), retryable=True) from exc
        if response.is_error:
            raise ProviderError(
                PROVIDER,
                f"webhook returned {response.status_code}",
                retryable=response.status_code == 429 or response.status_code >= 500,
                status_code=response.status_code,
            )
