from crossfile_review.core.application.workflows.chunked_review_workflow import (
    ChunkedReviewResult,
    ChunkedReviewWorkflow,
    ChunkOutcome,
)
from crossfile_review.core.application.workflows.line_review_workflow import LineReviewWorkflow
from crossfile_review.core.application.workflows.merge_request_review_workflow import (
    MergeRequestReviewWorkflow,
    should_review,
)

__all__ = [
    "ChunkOutcome",
    "ChunkedReviewResult",
    "ChunkedReviewWorkflow",
    "LineReviewWorkflow",
    "MergeRequestReviewWorkflow",
    "should_review",
]
