from crossfile_review.core.application.config.review_config import ReviewConfig

__all__ = ["ReviewConfig"]
