from crossfile_review.infrastructure.observability.logging.schema_processor import (
    review_schema_processor,
)

__all__ = ["review_schema_processor"]
