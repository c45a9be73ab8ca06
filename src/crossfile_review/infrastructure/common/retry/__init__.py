from crossfile_review.infrastructure.common.retry.retry_policy import RetryPolicy

__all__ = ["RetryPolicy"]
