from crossfile_review.infrastructure.tools.llm.litellm_review_model_adapter import (
    LiteLlmReviewModelAdapter,
)

__all__ = ["LiteLlmReviewModelAdapter"]
