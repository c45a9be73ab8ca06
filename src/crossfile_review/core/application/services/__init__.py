from crossfile_review.core.application.services.comment_publisher import CommentPublisher
from crossfile_review.core.application.services.context_builder import ContextBuilder
from crossfile_review.core.application.services.dependency_resolver import DependencyResolver
from crossfile_review.core.application.services.prompt_builder import ReviewPromptBuilder
from crossfile_review.core.application.services.response_recovery_parser import (
    ResponseRecoveryParser,
)

__all__ = [
    "CommentPublisher",
    "ContextBuilder",
    "DependencyResolver",
    "ResponseRecoveryParser",
    "ReviewPromptBuilder",
]
