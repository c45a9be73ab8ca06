"""Chunk-and-fan-out review: one global analysis, one model call per file group."""

import asyncio
from dataclasses import dataclass
from enum import StrEnum

import structlog

from crossfile_review.core.application.config import ReviewConfig
from crossfile_review.core.application.ports import ReviewModelPort
from crossfile_review.core.application.services.comment_publisher import CommentPublisher
from crossfile_review.core.application.services.dependency_resolver import DependencyResolver
from crossfile_review.core.application.services.prompt_builder import ReviewPromptBuilder
from crossfile_review.core.application.services.response_recovery_parser import (
    ResponseRecoveryParser,
)
from crossfile_review.core.domain.dependencies import DependencyInfo, UsedDependencyInfo
from crossfile_review.core.domain.impact import CrossFileAnalysisResult, ImpactClassifier
from crossfile_review.core.domain.review import DiffRefs, FileChange, LineComment, ReviewContext


class ChunkOutcome(StrEnum):
    NOT_ENGAGED = "NOT_ENGAGED"
    COMPLETED = "COMPLETED"
    ABORTED = "ABORTED"


@dataclass(frozen=True)
class ChunkedReviewResult:
    outcome: ChunkOutcome
    posted: int = 0


@dataclass(frozen=True)
class _GlobalAnalysis:
    dependencies: list[DependencyInfo]
    used_dependencies: list[UsedDependencyInfo]
    impact: CrossFileAnalysisResult


class ChunkedReviewWorkflow:
    """Analyze -> Partition -> Fan out (prompt, model, recover) -> Join -> Publish."""

    def __init__(
        self,
        resolver: DependencyResolver,
        classifier: ImpactClassifier,
        model: ReviewModelPort,
        parser: ResponseRecoveryParser,
        publisher: CommentPublisher,
        config: ReviewConfig,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._resolver = resolver
        self._classifier = classifier
        self._model = model
        self._parser = parser
        self._publisher = publisher
        self._config = config
        self._logger = logger or structlog.get_logger().bind(
            context_component="chunked_review_workflow"
        )

    def is_engaged(self, context: ReviewContext) -> bool:
        return self._config.chunking_enabled and len(context.files) > self._config.files_per_chunk

    async def execute(
        self, project_id: int, mr_iid: int, context: ReviewContext
    ) -> ChunkedReviewResult:
        if not self.is_engaged(context):
            self._logger.debug(
                "Chunked review not engaged",
                chunking_enabled=self._config.chunking_enabled,
                files=len(context.files),
            )
            return ChunkedReviewResult(ChunkOutcome.NOT_ENGAGED)
        return await self.review_in_chunks(
            project_id, mr_iid, context, self._config.files_per_chunk
        )

    async def review_in_chunks(
        self, project_id: int, mr_iid: int, context: ReviewContext, chunk_size: int
    ) -> ChunkedReviewResult:
        """Run the full pipeline with files grouped *chunk_size* at a time."""
        if context.diff_refs is None:
            self._logger.warning("Merge request has no diff refs; nothing can be anchored")
            return ChunkedReviewResult(ChunkOutcome.COMPLETED)

        files = list(context.files)
        analysis = await self._step_1_global_analysis(project_id, files, context.target_branch)
        if analysis is None:
            return ChunkedReviewResult(ChunkOutcome.ABORTED)
        chunks = _partition(files, chunk_size)
        comments = await self._step_2_review_chunks(context, chunks, analysis)
        posted = await self._step_3_publish(project_id, mr_iid, context, context.diff_refs, comments)
        return ChunkedReviewResult(ChunkOutcome.COMPLETED, posted)

    # ── Step Methods ─────────────────────────────────────────────────

    async def _step_1_global_analysis(
        self, project_id: int, files: list[FileChange], target_branch: str
    ) -> _GlobalAnalysis | None:
        self._logger.info("Step 1: Global dependency analysis", files=len(files))
        try:
            dependencies = await self._resolver.find_dependents(project_id, files, target_branch)
            used = await self._resolver.find_used_dependencies(project_id, files, target_branch)
            impact = self._classifier.classify(files, dependencies)
        except Exception as exc:
            self._logger.error(
                "Global dependency analysis failed; review aborted",
                processing_status="ERROR",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return None
        return _GlobalAnalysis(dependencies, used, impact)

    async def _step_2_review_chunks(
        self,
        context: ReviewContext,
        chunks: list[list[FileChange]],
        analysis: _GlobalAnalysis,
    ) -> list[LineComment]:
        self._logger.info("Step 2: Reviewing chunks", chunks=len(chunks))
        per_chunk = await asyncio.gather(
            *(
                self._review_chunk(index, context.with_files(chunk), analysis)
                for index, chunk in enumerate(chunks, start=1)
            )
        )
        return [comment for comments in per_chunk for comment in comments]

    async def _step_3_publish(
        self,
        project_id: int,
        mr_iid: int,
        context: ReviewContext,
        diff_refs: DiffRefs,
        comments: list[LineComment],
    ) -> int:
        self._logger.info("Step 3: Publishing line comments", comments=len(comments))
        return await self._publisher.publish(project_id, mr_iid, context, diff_refs, comments)

    # ── Private Helpers ──────────────────────────────────────────────

    async def _review_chunk(
        self, index: int, chunk_context: ReviewContext, analysis: _GlobalAnalysis
    ) -> list[LineComment]:
        paths = frozenset(file.file_path for file in chunk_context.files)
        try:
            dependencies = [dep for dep in analysis.dependencies if dep.touches(paths)]
            used = [u for u in analysis.used_dependencies if u.source_file in paths]
            prompt = ReviewPromptBuilder.build_line_review_prompt(
                chunk_context, dependencies, used, analysis.impact
            )
            reply = await self._complete(index, prompt)
            comments = self._parser.parse_line_comments(reply)
        except Exception as exc:
            self._logger.warning(
                "Chunk review failed; chunk yields no comments",
                chunk=index,
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return []
        self._logger.info("Chunk reviewed", chunk=index, files=len(paths), comments=len(comments))
        return comments

    async def _complete(self, index: int, prompt: str) -> str:
        try:
            return await self._model.complete(prompt)
        except Exception as exc:
            self._logger.warning(
                "Model call failed; treating as empty reply",
                chunk=index,
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return ""


def _partition(files: list[FileChange], size: int) -> list[list[FileChange]]:
    step = max(1, size)
    return [files[start : start + step] for start in range(0, len(files), step)]
