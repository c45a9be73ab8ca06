import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars

from crossfile_review.core.application.workflows import should_review
from crossfile_review.infrastructure.configuration import AppConfig
from crossfile_review.infrastructure.entrypoints.api.dtos import GitLabMergeRequestWebhookDTO
from crossfile_review.infrastructure.entrypoints.api.security import (
    get_app_config,
    validate_gitlab_token,
)
from crossfile_review.infrastructure.observability.metrics_service import (
    REVIEW_DURATION_SECONDS,
    REVIEWS_INFLIGHT,
    REVIEWS_TOTAL,
    WEBHOOKS_TOTAL,
)
from crossfile_review.infrastructure.observability.redaction_service import (
    redact_dict,
    redact_text,
)
from crossfile_review.infrastructure.observability.tracing_setup import get_tracer
from crossfile_review.infrastructure.resolution import run_merge_request_review

logger = structlog.get_logger().bind(context_component="gitlab_webhook_router")
router = APIRouter()

MERGE_REQUEST_EVENT = "Merge Request Hook"
MERGE_REQUEST_KIND = "merge_request"
_ENDPOINT = "/webhooks/gitlab"

ReviewRunner = Callable[[int, int], Awaitable[int]]


def get_review_runner(config: AppConfig = Depends(get_app_config)) -> ReviewRunner:
    """Each call builds an isolated review session for one merge request."""
    return functools.partial(run_merge_request_review, config)


@router.post(
    _ENDPOINT,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(validate_gitlab_token)],
    response_model=None,
)
async def receive_gitlab_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_gitlab_event: str | None = Header(default=None, alias="X-Gitlab-Event"),
    runner: ReviewRunner = Depends(get_review_runner),
) -> dict[str, str] | JSONResponse:
    if x_gitlab_event != MERGE_REQUEST_EVENT:
        return _ignored(status.HTTP_400_BAD_REQUEST, f"Unsupported event: {x_gitlab_event}")

    payload = await _process_incoming_webhook(request)
    if payload.object_kind != MERGE_REQUEST_KIND:
        return _ignored(status.HTTP_400_BAD_REQUEST, f"Unsupported kind: {payload.object_kind}")

    action = payload.object_attributes.action
    if not should_review(action, payload.has_changes):
        return _ignored(status.HTTP_200_OK, f"Action '{action}' does not trigger a review")

    project_id, mr_iid = payload.project.id, payload.object_attributes.iid
    bind_contextvars(project_id=project_id, mr_iid=mr_iid, event_type="webhook.merge_request")
    ctx_snapshot = get_contextvars()
    background_tasks.add_task(_run_with_metrics, runner, project_id, mr_iid, ctx_snapshot)
    WEBHOOKS_TOTAL.labels(outcome="accepted").inc()
    logger.info("Merge request review queued", action=action, context_endpoint=_ENDPOINT)
    return {"status": "accepted", "message": "Webhook received and processing started"}


async def _process_incoming_webhook(request: Request) -> GitLabMergeRequestWebhookDTO:
    body_bytes = await request.body()
    logger.info(
        "Raw GitLab webhook payload received",
        raw_payload=redact_text(body_bytes.decode("utf-8", errors="replace")),
        context_endpoint=_ENDPOINT,
        tags=["webhook-raw"],
    )
    try:
        payload = GitLabMergeRequestWebhookDTO.model_validate_json(body_bytes)
    except ValidationError as exc:
        WEBHOOKS_TOTAL.labels(outcome="invalid").inc()
        raise RequestValidationError(exc.errors(include_url=False)) from exc
    logger.debug(
        "GitLab webhook parsed",
        object_kind=payload.object_kind,
        changes=redact_dict(payload.changes or {}),
        context_endpoint=_ENDPOINT,
    )
    return payload


def _ignored(status_code: int, message: str) -> JSONResponse:
    WEBHOOKS_TOTAL.labels(outcome="ignored").inc()
    logger.info("GitLab webhook ignored", reason=message, context_endpoint=_ENDPOINT)
    return JSONResponse(status_code=status_code, content={"status": "ignored", "message": message})


async def _run_with_metrics(
    runner: ReviewRunner, project_id: int, mr_iid: int, ctx_snapshot: dict[str, Any]
) -> None:
    """Top of the background task: record metrics and log the failure if the review raised."""
    _restore_context(ctx_snapshot)
    REVIEWS_INFLIGHT.inc()
    start = time.perf_counter()
    outcome = "success"
    try:
        with get_tracer().start_as_current_span("workflow.merge_request_review") as span:
            span.set_attribute("gitlab.project_id", project_id)
            span.set_attribute("gitlab.mr_iid", mr_iid)
            await runner(project_id, mr_iid)
    except Exception as exc:
        outcome = "failure"
        logger.error(
            "Background review failed",
            processing_status="ERROR",
            error_type=type(exc).__name__,
            error_details=str(exc),
        )
    finally:
        _record_review_outcome(start, outcome)


def _restore_context(ctx_snapshot: dict[str, Any]) -> None:
    clear_contextvars()
    bind_contextvars(**ctx_snapshot)


def _record_review_outcome(start: float, outcome: str) -> None:
    duration = time.perf_counter() - start
    REVIEWS_INFLIGHT.dec()
    REVIEW_DURATION_SECONDS.observe(duration)
    REVIEWS_TOTAL.labels(outcome=outcome).inc()
    logger.info(
        "Background review finished",
        processing_status="SUCCESS" if outcome == "success" else "ERROR",
        processing_duration_ms=round(duration * 1000, 2),
    )
