from crossfile_review.core.domain.review.file_change import DiffRefs, FileChange
from crossfile_review.core.domain.review.line_comment import (
    CommentSeverity,
    DiscussionPosition,
    LineComment,
)
from crossfile_review.core.domain.review.merge_request import MergeRequest
from crossfile_review.core.domain.review.review_context import ReviewContext

__all__ = [
    "CommentSeverity",
    "DiffRefs",
    "DiscussionPosition",
    "FileChange",
    "LineComment",
    "MergeRequest",
    "ReviewContext",
]
