import structlog

from crossfile_review.core.application.exceptions import ReviewAbortedError
from crossfile_review.core.application.workflows.chunked_review_workflow import (
    ChunkedReviewResult,
    ChunkedReviewWorkflow,
    ChunkOutcome,
)
from crossfile_review.core.domain.review import ReviewContext


class LineReviewWorkflow:
    """Single entry point of the line-by-line review; returns the number of posted comments."""

    def __init__(
        self,
        chunked: ChunkedReviewWorkflow,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._chunked = chunked
        self._logger = logger or structlog.get_logger().bind(
            context_component="line_review_workflow"
        )

    async def execute(self, project_id: int, mr_iid: int, context: ReviewContext) -> int:
        """Review *context* and post anchored comments.

        Raises:
            ReviewAbortedError: The global dependency or impact pass failed.
        """
        if context.diff_refs is None:
            self._logger.warning("No diff refs on merge request; skipping line review")
            return 0
        if not context.files:
            return 0

        result = await self._chunked.execute(project_id, mr_iid, context)
        if result.outcome is ChunkOutcome.NOT_ENGAGED:
            self._logger.info("Running single-pass line review", files=len(context.files))
            result = await self._chunked.review_in_chunks(
                project_id, mr_iid, context, len(context.files)
            )
        return self._posted_or_raise(result, mr_iid)

    def _posted_or_raise(self, result: ChunkedReviewResult, mr_iid: int) -> int:
        if result.outcome is ChunkOutcome.ABORTED:
            raise ReviewAbortedError(
                "Global dependency analysis failed; line review aborted",
                context={"mr_iid": mr_iid},
            )
        self._logger.info("Line review finished", posted=result.posted)
        return result.posted
