from typing import Any

import httpx
import structlog

from crossfile_review.core.application.exceptions import ProviderError
from crossfile_review.infrastructure.common.retry import RetryPolicy
from crossfile_review.infrastructure.configuration import GitLabSettings

PROVIDER = "gitlab"


class GitLabClient:
    """Async GitLab REST v4 client. Every call raises ProviderError on failure."""

    def __init__(
        self,
        settings: GitLabSettings,
        http: httpx.AsyncClient | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self._http = http or httpx.AsyncClient(timeout=settings.timeout_seconds)
        self._retry = RetryPolicy(max_attempts=settings.max_attempts)
        self._search_retry = RetryPolicy(max_attempts=settings.search_max_attempts)
        self._logger = logger or structlog.get_logger().bind(context_component="gitlab_client")

    async def aclose(self) -> None:
        await self._http.aclose()

    def _get_headers(self) -> dict[str, str]:
        token = self.settings.token.get_secret_value() if self.settings.token else ""
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "PRIVATE-TOKEN": token,
        }

    # ── Merge requests ───────────────────────────────────────────────

    async def get_merge_request(self, project_id: int, mr_iid: int) -> dict[str, Any]:
        path = f"projects/{project_id}/merge_requests/{mr_iid}"
        return await self._retry.run(lambda: self._request("GET", path))

    async def get_merge_request_changes(
        self, project_id: int, mr_iid: int
    ) -> list[dict[str, Any]]:
        path = f"projects/{project_id}/merge_requests/{mr_iid}/changes"
        data = await self._retry.run(lambda: self._request("GET", path))
        return list(data.get("changes") or [])

    async def post_note(self, project_id: int, mr_iid: int, body: str) -> dict[str, Any]:
        path = f"projects/{project_id}/merge_requests/{mr_iid}/notes"
        return await self._retry.run(lambda: self._request("POST", path, json={"body": body}))

    async def create_discussion(
        self, project_id: int, mr_iid: int, body: str, position: dict[str, Any]
    ) -> dict[str, Any]:
        path = f"projects/{project_id}/merge_requests/{mr_iid}/discussions"
        payload = {"body": body, "position": position}
        return await self._retry.run(lambda: self._request("POST", path, json=payload))

    # ── Search ───────────────────────────────────────────────────────

    async def search_code(self, project_id: int, query: str, ref: str) -> list[dict[str, Any]]:
        path = f"projects/{project_id}/search"
        params = {"scope": "blobs", "search": query, "ref": ref}
        data = await self._search_retry.run(lambda: self._request("GET", path, params=params))
        return data if isinstance(data, list) else []

    # ── Transport ────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.settings.api_url}/{path}"
        try:
            response = await self._http.request(
                method, url, headers=self._get_headers(), params=params, json=json
            )
        except httpx.HTTPError as exc:
            self._logger.warning(
                "GitLab request failed",
                method=method,
                path=path,
                error_type=type(exc).__name__,
                error_details=str(exc),
                error_retryable=True,
            )
            raise ProviderError(PROVIDER, f"{method} {path}: {exc}", retryable=True) from exc

        if response.is_error:
            retryable = response.status_code == 429 or response.status_code >= 500
            self._logger.warning(
                "GitLab returned an error status",
                method=method,
                path=path,
                status_code=response.status_code,
                error_type="HTTPStatusError",
                error_details=response.text[:500],
                error_retryable=retryable,
            )
            raise ProviderError(
                PROVIDER,
                f"{method} {path} returned {response.status_code}",
                retryable=retryable,
                status_code=response.status_code,
            )
        return response.json() if response.content else {}
