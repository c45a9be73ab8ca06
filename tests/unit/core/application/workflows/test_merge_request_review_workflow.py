"""Unit tests for MergeRequestReviewWorkflow (all collaborators mocked)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from builders import make_context, make_file, make_merge_request
from crossfile_review.core.application.config import ReviewConfig
from crossfile_review.core.application.exceptions import (
    ProviderError,
    ReviewAbortedError,
    WorkflowExecutionError,
)
from crossfile_review.core.application.workflows import MergeRequestReviewWorkflow, should_review
from crossfile_review.core.application.workflows.merge_request_review_workflow import summary_note

MR_URL = "https://gitlab.example.com/team/app/-/merge_requests/42"


# ── Fixtures ──────────────────────────────────────────────────────


@pytest.fixture()
def mock_mr() -> AsyncMock:
    merge_requests = AsyncMock()
    merge_requests.get_merge_request.return_value = make_merge_request()
    return merge_requests


@pytest.fixture()
def mock_context_builder() -> MagicMock:
    builder = MagicMock()
    builder.build = AsyncMock(return_value=make_context(make_file("src/A.kt")))
    return builder


@pytest.fixture()
def mock_line_review() -> MagicMock:
    line_review = MagicMock()
    line_review.execute = AsyncMock(return_value=3)
    return line_review


@pytest.fixture()
def mock_notifier() -> AsyncMock:
    return AsyncMock()


def _workflow(
    mr: AsyncMock,
    builder: MagicMock,
    line_review: MagicMock,
    notifier: AsyncMock,
    config: ReviewConfig | None = None,
) -> MergeRequestReviewWorkflow:
    return MergeRequestReviewWorkflow(mr, builder, line_review, notifier, config or ReviewConfig())


# ── Trigger filter ────────────────────────────────────────────────


class TestShouldReview:
    @pytest.mark.parametrize(
        ("action", "has_changes", "expected"),
        [
            ("open", False, True),
            ("reopen", False, True),
            ("update", True, True),
            ("update", False, False),
            ("merge", True, False),
            ("close", False, False),
            (None, True, False),
        ],
    )
    def test_actions(self, action: str | None, has_changes: bool, expected: bool) -> None:
        assert should_review(action, has_changes) is expected


# ── Pipeline ──────────────────────────────────────────────────────


class TestExecute:
    @pytest.mark.asyncio
    async def test_happy_path_posts_summary_and_notifies(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        posted = await workflow.execute(7, 42)

        assert posted == 3
        mock_mr.get_merge_request.assert_awaited_once_with(7, 42)
        assert mock_context_builder.build.await_args.args[1].iid == 42
        mock_line_review.execute.assert_awaited_once()
        mock_mr.post_note.assert_awaited_once()
        note = mock_mr.post_note.await_args.args[2]
        assert "- Line comments: 3" in note
        mock_notifier.notify_review_completed.assert_awaited_once()
        assert mock_notifier.notify_review_completed.await_args.args[1:] == (3, MR_URL)

    @pytest.mark.asyncio
    async def test_draft_merge_request_halts_quietly(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_mr.get_merge_request.return_value = make_merge_request(draft=True)
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        assert await workflow.execute(7, 42) == 0
        mock_context_builder.build.assert_not_awaited()
        mock_notifier.notify_error.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_reviewable_files_halts_quietly(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_context_builder.build.return_value = make_context()
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        assert await workflow.execute(7, 42) == 0
        mock_line_review.execute.assert_not_awaited()
        mock_mr.post_note.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_line_review_disabled_still_posts_summary(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        workflow = _workflow(
            mock_mr,
            mock_context_builder,
            mock_line_review,
            mock_notifier,
            ReviewConfig(line_by_line_enabled=False),
        )

        assert await workflow.execute(7, 42) == 0
        mock_line_review.execute.assert_not_awaited()
        assert "- Line comments: 0" in mock_mr.post_note.await_args.args[2]

    @pytest.mark.asyncio
    async def test_chat_failure_does_not_fail_review(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_notifier.notify_review_completed.side_effect = ProviderError("google_chat", "down")
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        assert await workflow.execute(7, 42) == 3
        mock_notifier.notify_error.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_abort_notifies_and_raises_execution_error(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_line_review.execute.side_effect = ReviewAbortedError("analysis failed")
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        with pytest.raises(WorkflowExecutionError) as exc_info:
            await workflow.execute(7, 42)

        assert isinstance(exc_info.value.__cause__, ReviewAbortedError)
        assert exc_info.value.context == {"project_id": 7, "mr_iid": 42}
        mock_notifier.notify_error.assert_awaited_once_with(
            project_name="gitlab.example.com/team/app",
            mr_title="Add user lookup",
            mr_url=MR_URL,
            error="analysis failed",
        )
        mock_mr.post_note.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_failure_notifies_with_fallback_identity(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_mr.get_merge_request.side_effect = ProviderError("gitlab", "not found", status_code=404)
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        with pytest.raises(WorkflowExecutionError):
            await workflow.execute(7, 42)

        kwargs = mock_notifier.notify_error.await_args.kwargs
        assert (kwargs["project_name"], kwargs["mr_title"], kwargs["mr_url"]) == ("7", "!42", "")

    @pytest.mark.asyncio
    async def test_error_notification_failure_keeps_original_error(
        self,
        mock_mr: AsyncMock,
        mock_context_builder: MagicMock,
        mock_line_review: MagicMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_line_review.execute.side_effect = RuntimeError("boom")
        mock_notifier.notify_error.side_effect = ProviderError("google_chat", "down")
        workflow = _workflow(mock_mr, mock_context_builder, mock_line_review, mock_notifier)

        with pytest.raises(WorkflowExecutionError, match="boom"):
            await workflow.execute(7, 42)


class TestSummaryNote:
    def test_lists_counts(self) -> None:
        note = summary_note(make_context(make_file("a.kt"), make_file("b.kt")), 5)

        assert note == (
            "## 🤖 Automated code review\n\n"
            "- Line comments: 5\n"
            "- Files changed: 2\n"
            "- Lines: +3 -1\n"
        )
