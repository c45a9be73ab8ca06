from typing import Any

from crossfile_review.core.application.exceptions import ProviderError
from crossfile_review.core.application.ports import CodeSearchPort
from crossfile_review.core.domain.dependencies import SearchHit
from crossfile_review.infrastructure.observability.metrics_service import CODE_SEARCH_CALLS_TOTAL
from crossfile_review.infrastructure.observability.tracing_setup import trace_operation
from crossfile_review.infrastructure.tools.vcs.gitlab.gitlab_client import GitLabClient


class GitLabCodeSearchAdapter(CodeSearchPort):
    """Blob search scoped to one project and ref."""

    def __init__(self, client: GitLabClient) -> None:
        self._client = client

    @trace_operation("gitlab.code_search")
    async def search(self, project_id: int, query: str, ref: str) -> list[SearchHit]:
        try:
            results = await self._client.search_code(project_id, query, ref)
        except ProviderError:
            CODE_SEARCH_CALLS_TOTAL.labels(outcome="error").inc()
            raise
        CODE_SEARCH_CALLS_TOTAL.labels(outcome="success").inc()
        return [_to_hit(result) for result in results if result.get("path")]


def _to_hit(result: dict[str, Any]) -> SearchHit:
    return SearchHit(
        path=result["path"],
        data=result.get("data") or "",
        start_line=int(result.get("startline") or 0),
        basename=result.get("basename") or "",
        filename=result.get("filename") or "",
        ref=result.get("ref") or "",
        project_id=result.get("project_id"),
    )
