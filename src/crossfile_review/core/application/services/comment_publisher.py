from collections import defaultdict

import structlog

from crossfile_review.core.application.ports import MergeRequestPort
from crossfile_review.core.domain.review import (
    DiffRefs,
    DiscussionPosition,
    LineComment,
    ReviewContext,
)


class CommentPublisher:
    """Posts recovered comments one by one and counts the ones that landed."""

    def __init__(
        self,
        merge_requests: MergeRequestPort,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._merge_requests = merge_requests
        self._logger = logger or structlog.get_logger().bind(context_component="comment_publisher")

    async def publish(
        self,
        project_id: int,
        mr_iid: int,
        context: ReviewContext,
        diff_refs: DiffRefs,
        comments: list[LineComment],
    ) -> int:
        by_file: dict[str, list[LineComment]] = defaultdict(list)
        for comment in comments:
            by_file[comment.file_path].append(comment)

        posted = 0
        for file_path, file_comments in by_file.items():
            file_change = context.find_file(file_path)
            for comment in file_comments:
                position = DiscussionPosition.for_comment(comment, diff_refs, file_change)
                if await self._post(project_id, mr_iid, comment, position):
                    posted += 1
        self._logger.info("Line comments posted", posted=posted, recovered=len(comments))
        return posted

    async def _post(
        self, project_id: int, mr_iid: int, comment: LineComment, position: DiscussionPosition
    ) -> bool:
        try:
            await self._merge_requests.post_line_comment(project_id, mr_iid, comment.body, position)
        except Exception as exc:
            self._logger.warning(
                "Failed to post line comment",
                file_path=comment.file_path,
                new_line=comment.new_line,
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return False
        return True
