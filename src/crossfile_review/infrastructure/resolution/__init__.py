from crossfile_review.infrastructure.resolution.container import (
    ReviewSession,
    build_review_session,
    run_merge_request_review,
)

__all__ = ["ReviewSession", "build_review_session", "run_merge_request_review"]
