from typing import Any

from crossfile_review.core.application.ports import MergeRequestPort
from crossfile_review.core.domain.review import (
    DiffRefs,
    DiscussionPosition,
    FileChange,
    MergeRequest,
)
from crossfile_review.infrastructure.observability.metrics_service import COMMENTS_POSTED_TOTAL
from crossfile_review.infrastructure.tools.vcs.gitlab.gitlab_client import GitLabClient


class GitLabMergeRequestAdapter(MergeRequestPort):
    """Maps GitLab merge request JSON onto the review domain."""

    def __init__(self, client: GitLabClient) -> None:
        self._client = client

    async def get_merge_request(self, project_id: int, mr_iid: int) -> MergeRequest:
        data = await self._client.get_merge_request(project_id, mr_iid)
        return _to_merge_request(data)

    async def get_changes(self, project_id: int, mr_iid: int) -> list[FileChange]:
        changes = await self._client.get_merge_request_changes(project_id, mr_iid)
        return [_to_file_change(change) for change in changes]

    async def post_note(self, project_id: int, mr_iid: int, body: str) -> None:
        await self._client.post_note(project_id, mr_iid, body)

    async def post_line_comment(
        self, project_id: int, mr_iid: int, body: str, position: DiscussionPosition
    ) -> None:
        await self._client.create_discussion(project_id, mr_iid, body, position.to_payload())
        COMMENTS_POSTED_TOTAL.inc()


def _to_merge_request(data: dict[str, Any]) -> MergeRequest:
    refs = data.get("diff_refs") or None
    author = data.get("author") or {}
    return MergeRequest(
        iid=int(data["iid"]),
        title=data.get("title", ""),
        source_branch=data.get("source_branch", ""),
        target_branch=data.get("target_branch", ""),
        web_url=data.get("web_url", ""),
        author=author.get("name") or author.get("username", ""),
        description=data.get("description"),
        draft=bool(data.get("draft", False)),
        work_in_progress=bool(data.get("work_in_progress", False)),
        diff_refs=_to_diff_refs(refs) if refs else None,
    )


def _to_diff_refs(refs: dict[str, Any]) -> DiffRefs | None:
    if not all(refs.get(key) for key in ("base_sha", "start_sha", "head_sha")):
        return None
    return DiffRefs(refs["base_sha"], refs["start_sha"], refs["head_sha"])


def _to_file_change(change: dict[str, Any]) -> FileChange:
    return FileChange(
        file_path=change.get("new_path", ""),
        diff=change.get("diff") or "",
        old_path=change.get("old_path", ""),
        new_file=bool(change.get("new_file", False)),
        deleted_file=bool(change.get("deleted_file", False)),
        renamed_file=bool(change.get("renamed_file", False)),
    )
