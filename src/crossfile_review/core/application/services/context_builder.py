import structlog

from crossfile_review.core.application.config import ReviewConfig
from crossfile_review.core.application.ports import MergeRequestPort
from crossfile_review.core.domain.review import FileChange, MergeRequest, ReviewContext


class ContextBuilder:
    """Fetches the changeset of a merge request and keeps only reviewable files."""

    def __init__(
        self,
        merge_requests: MergeRequestPort,
        config: ReviewConfig,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._merge_requests = merge_requests
        self._config = config
        self._logger = logger or structlog.get_logger().bind(context_component="context_builder")

    async def build(self, project_id: int, merge_request: MergeRequest) -> ReviewContext:
        changes = await self._merge_requests.get_changes(project_id, merge_request.iid)
        reviewable = [change for change in changes if self._is_reviewable(change)]
        selected = reviewable[: self._config.max_files]
        additions, deletions = _line_stats(selected)
        self._logger.info(
            "Review context built",
            total_files=len(changes),
            reviewable_files=len(reviewable),
            selected_files=len(selected),
            additions=additions,
            deletions=deletions,
        )
        return ReviewContext(
            project_name=merge_request.project_name,
            mr_title=merge_request.title,
            source_branch=merge_request.source_branch,
            target_branch=merge_request.target_branch,
            author=merge_request.author,
            files=tuple(selected),
            total_files=len(changes),
            total_additions=additions,
            total_deletions=deletions,
            mr_description=merge_request.description,
            diff_refs=merge_request.diff_refs,
        )

    def _is_reviewable(self, change: FileChange) -> bool:
        if self._config.skip_deleted_files and change.deleted_file:
            return False
        if not change.diff.strip():
            return False
        if change.extension in self._config.excluded_extensions:
            return False
        if any(fragment in change.file_path for fragment in self._config.excluded_paths):
            return False
        return change.file_size <= self._config.max_file_size


def _line_stats(files: list[FileChange]) -> tuple[int, int]:
    additions = deletions = 0
    for file in files:
        for line in file.diff.split("\n"):
            if line.startswith("+") and not line.startswith("+++"):
                additions += 1
            elif line.startswith("-") and not line.startswith("---"):
                deletions += 1
    return additions, deletions
