"""Merge request review pipeline: Fetch -> Build context -> Line review -> Summarize -> Notify."""

import structlog

from crossfile_review.core.application.config import ReviewConfig
from crossfile_review.core.application.exceptions import (
    WorkflowExecutionError,
    WorkflowHaltedException,
)
from crossfile_review.core.application.ports import MergeRequestPort, NotifierPort
from crossfile_review.core.application.services.context_builder import ContextBuilder
from crossfile_review.core.application.workflows.line_review_workflow import LineReviewWorkflow
from crossfile_review.core.domain.review import MergeRequest, ReviewContext

REVIEW_ACTIONS = frozenset({"open", "reopen"})
UPDATE_ACTION = "update"


def should_review(action: str | None, has_changes: bool) -> bool:
    """Only opened or reopened MRs, and updates that carry new changes, are reviewed."""
    if action in REVIEW_ACTIONS:
        return True
    return action == UPDATE_ACTION and has_changes


class MergeRequestReviewWorkflow:
    def __init__(
        self,
        merge_requests: MergeRequestPort,
        context_builder: ContextBuilder,
        line_review: LineReviewWorkflow,
        notifier: NotifierPort,
        config: ReviewConfig,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._merge_requests = merge_requests
        self._context_builder = context_builder
        self._line_review = line_review
        self._notifier = notifier
        self._config = config
        self._logger = logger or structlog.get_logger().bind(
            context_component="merge_request_review_workflow"
        )
        self._merge_request: MergeRequest | None = None

    async def execute(self, project_id: int, mr_iid: int) -> int:
        """Review one merge request end to end and return the posted comment count."""
        self._logger.info("Merge request review started", project_id=project_id, mr_iid=mr_iid)
        try:
            return await self._run_review_pipeline(project_id, mr_iid)
        except WorkflowHaltedException as halt:
            self._logger.info("Merge request review halted", reason=str(halt), **halt.context)
            return 0
        except WorkflowExecutionError as wfe:
            await self._handle_error(project_id, mr_iid, wfe)
            raise
        except Exception as exc:
            await self._handle_error(project_id, mr_iid, exc)
            raise WorkflowExecutionError(
                str(exc), context={"project_id": project_id, "mr_iid": mr_iid}
            ) from exc

    async def _run_review_pipeline(self, project_id: int, mr_iid: int) -> int:
        merge_request = await self._step_1_fetch_merge_request(project_id, mr_iid)
        context = await self._step_2_build_context(project_id, merge_request)
        posted = await self._step_3_line_review(project_id, mr_iid, context)
        await self._step_4_post_summary(project_id, mr_iid, context, posted)
        await self._step_5_notify(context, posted, merge_request.web_url)
        self._logger.info(
            "Merge request review completed", processing_status="SUCCESS", posted=posted
        )
        return posted

    # ── Step Methods ─────────────────────────────────────────────────

    async def _step_1_fetch_merge_request(self, project_id: int, mr_iid: int) -> MergeRequest:
        self._logger.info("Step 1: Fetching merge request")
        merge_request = await self._merge_requests.get_merge_request(project_id, mr_iid)
        self._merge_request = merge_request
        if merge_request.is_draft:
            raise WorkflowHaltedException(
                "Draft merge request; review skipped", context={"mr_iid": mr_iid}
            )
        return merge_request

    async def _step_2_build_context(
        self, project_id: int, merge_request: MergeRequest
    ) -> ReviewContext:
        self._logger.info("Step 2: Building review context")
        context = await self._context_builder.build(project_id, merge_request)
        if not context.files:
            raise WorkflowHaltedException(
                "No reviewable files in merge request",
                context={"mr_iid": merge_request.iid, "total_files": context.total_files},
            )
        return context

    async def _step_3_line_review(
        self, project_id: int, mr_iid: int, context: ReviewContext
    ) -> int:
        if not self._config.line_by_line_enabled:
            self._logger.info("Step 3: Line review disabled")
            return 0
        self._logger.info("Step 3: Running line review", files=len(context.files))
        return await self._line_review.execute(project_id, mr_iid, context)

    async def _step_4_post_summary(
        self, project_id: int, mr_iid: int, context: ReviewContext, posted: int
    ) -> None:
        self._logger.info("Step 4: Posting summary note")
        await self._merge_requests.post_note(project_id, mr_iid, summary_note(context, posted))

    async def _step_5_notify(self, context: ReviewContext, posted: int, mr_url: str) -> None:
        self._logger.info("Step 5: Notifying chat")
        try:
            await self._notifier.notify_review_completed(context, posted, mr_url)
        except Exception as exc:
            self._logger.warning(
                "Chat notification failed",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )

    # ── Private Helpers ──────────────────────────────────────────────

    async def _handle_error(self, project_id: int, mr_iid: int, error: Exception) -> None:
        self._logger.error(
            "Merge request review failed",
            processing_status="ERROR",
            error_type=type(error).__name__,
            error_details=str(error),
        )
        mr = self._merge_request
        try:
            await self._notifier.notify_error(
                project_name=mr.project_name if mr else str(project_id),
                mr_title=mr.title if mr else f"!{mr_iid}",
                mr_url=mr.web_url if mr else "",
                error=str(error),
            )
        except Exception as exc:
            self._logger.warning(
                "Failed to send error notification",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )


def summary_note(context: ReviewContext, posted: int) -> str:
    return (
        "## 🤖 Automated code review\n\n"
        f"- Line comments: {posted}\n"
        f"- Files changed: {len(context.files)}\n"
        f"- Lines: +{context.total_additions} -{context.total_deletions}\n"
    )
