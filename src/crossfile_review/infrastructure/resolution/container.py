"""Functional DI container: wires one review session per merge request event.

Every session gets its own HTTP clients and a logger bound to the project and
merge request, so nothing is shared between concurrent reviews.
"""

from dataclasses import dataclass

import structlog

from crossfile_review.core.application.services.comment_publisher import CommentPublisher
from crossfile_review.core.application.services.context_builder import ContextBuilder
from crossfile_review.core.application.services.dependency_resolver import DependencyResolver
from crossfile_review.core.application.services.response_recovery_parser import (
    ResponseRecoveryParser,
)
from crossfile_review.core.application.workflows import (
    ChunkedReviewWorkflow,
    LineReviewWorkflow,
    MergeRequestReviewWorkflow,
)
from crossfile_review.core.domain.impact import ImpactClassifier
from crossfile_review.infrastructure.configuration import AppConfig
from crossfile_review.infrastructure.observability import get_logger
from crossfile_review.infrastructure.tools.chat.google_chat import (
    GoogleChatClient,
    GoogleChatNotifier,
)
from crossfile_review.infrastructure.tools.llm import LiteLlmReviewModelAdapter
from crossfile_review.infrastructure.tools.vcs.gitlab import (
    GitLabClient,
    GitLabCodeSearchAdapter,
    GitLabMergeRequestAdapter,
)


@dataclass
class ReviewSession:
    workflow: MergeRequestReviewWorkflow
    gitlab: GitLabClient
    chat: GoogleChatClient

    async def aclose(self) -> None:
        await self.gitlab.aclose()
        await self.chat.aclose()


def build_review_session(config: AppConfig, project_id: int, mr_iid: int) -> ReviewSession:
    def logger(component: str) -> structlog.stdlib.BoundLogger:
        return get_logger(component, project_id=project_id, mr_iid=mr_iid)

    review_config = config.review.to_review_config()
    gitlab = GitLabClient(config.gitlab, logger=logger("gitlab_client"))
    chat = GoogleChatClient(config.google_chat, logger=logger("google_chat_client"))
    merge_requests = GitLabMergeRequestAdapter(gitlab)

    chunked = ChunkedReviewWorkflow(
        resolver=DependencyResolver(
            GitLabCodeSearchAdapter(gitlab),
            max_concurrency=config.review.search_concurrency,
            logger=logger("dependency_resolver"),
        ),
        classifier=ImpactClassifier(logger=logger("impact_classifier")),
        model=LiteLlmReviewModelAdapter(
            config.llm, config.review, logger=logger("litellm_adapter")
        ),
        parser=ResponseRecoveryParser(logger=logger("response_recovery_parser")),
        publisher=CommentPublisher(merge_requests, logger=logger("comment_publisher")),
        config=review_config,
        logger=logger("chunked_review_workflow"),
    )
    workflow = MergeRequestReviewWorkflow(
        merge_requests=merge_requests,
        context_builder=ContextBuilder(
            merge_requests, review_config, logger=logger("context_builder")
        ),
        line_review=LineReviewWorkflow(chunked, logger=logger("line_review_workflow")),
        notifier=GoogleChatNotifier(chat),
        config=review_config,
        logger=logger("merge_request_review_workflow"),
    )
    return ReviewSession(workflow=workflow, gitlab=gitlab, chat=chat)


async def run_merge_request_review(config: AppConfig, project_id: int, mr_iid: int) -> int:
    """Build a fresh session, review the merge request, and release its clients."""
    session = build_review_session(config, project_id, mr_iid)
    try:
        return await session.workflow.execute(project_id, mr_iid)
    finally:
        await session.aclose()
