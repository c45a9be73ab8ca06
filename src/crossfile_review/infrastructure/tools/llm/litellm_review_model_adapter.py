"""Implements ReviewModelPort via ``litellm.acompletion`` with priority-based model fallback.

Prompts are logged redacted and truncated; token usage and latency go to Prometheus.
"""

import json
import os
import time
from typing import Any, NoReturn

import litellm
import structlog

from crossfile_review.core.application.exceptions import ProviderError
from crossfile_review.core.application.ports import ReviewModelPort
from crossfile_review.core.application.services.prompt_builder import ReviewPromptBuilder
from crossfile_review.infrastructure.configuration import LlmSettings, ReviewSettings
from crossfile_review.infrastructure.observability.metrics_service import (
    LLM_LATENCY_SECONDS,
    LLM_TOKENS_TOTAL,
)
from crossfile_review.infrastructure.observability.redaction_service import redact_text
from crossfile_review.infrastructure.observability.tracing_setup import get_tracer

_MAX_LOG_PROMPT_LENGTH = 10_000


class LiteLlmReviewModelAdapter(ReviewModelPort):
    """Tries each model of the priority list in order until one answers.

    API keys are extracted from the injected ``LlmSettings`` and pushed into
    ``os.environ`` so that litellm's provider auto-detection picks them up.
    """

    def __init__(
        self,
        llm_settings: LlmSettings,
        review_settings: ReviewSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._inject_api_keys(llm_settings)
        self._priority_models = list(llm_settings.model_priority)
        self._temperature = review_settings.ai_temperature
        self._max_tokens = review_settings.ai_max_tokens
        self._top_p = review_settings.ai_top_p
        self._logger = logger or structlog.get_logger().bind(context_component="litellm_adapter")

    # ── Public contract ──────────────────────────────────────────

    async def complete(self, prompt: str) -> str:
        messages = self._build_messages(prompt, ReviewPromptBuilder.build_system_prompt())
        last_error: Exception | None = None
        tracer = get_tracer()

        for model_id in self._priority_models:
            try:
                self._log_outgoing_payload(messages, model_id)
                with tracer.start_as_current_span("llm.completion") as span:
                    span.set_attribute("llm.model", model_id)
                    start = time.perf_counter()
                    response = await litellm.acompletion(
                        model=self._normalize_model_id(model_id),
                        messages=messages,
                        temperature=self._temperature,
                        max_tokens=self._max_tokens,
                        top_p=self._top_p,
                    )
                    duration_ms = round((time.perf_counter() - start) * 1000, 2)
                    self._log_inference_success(response, model_id, duration_ms)

                content: str | None = response.choices[0].message.content
                if not content:
                    raise ProviderError(provider=model_id, message="LLM returned empty content")
                return content

            except Exception as exc:
                last_error = exc
                self._logger.warning(
                    "Model failed",
                    llm_model=model_id,
                    error_type=type(exc).__name__,
                    error_details=str(exc),
                )

        self._raise_all_failed(last_error)

    # ── Observability helpers ─────────────────────────────────────

    def _log_outgoing_payload(self, messages: list[dict[str, str]], model_id: str) -> None:
        raw_prompt = json.dumps(messages, ensure_ascii=False, default=str)
        redacted_prompt = redact_text(raw_prompt)
        if len(redacted_prompt) > _MAX_LOG_PROMPT_LENGTH:
            redacted_prompt = redacted_prompt[:_MAX_LOG_PROMPT_LENGTH] + "... [TRUNCATED]"
        self._logger.info(
            "Sending payload to LLM",
            prompt_text=redacted_prompt,
            llm_model=model_id,
            tags=["llm-prompt"],
        )

    def _log_inference_success(self, response: Any, model_id: str, duration_ms: float) -> None:
        usage = getattr(response, "usage", None)
        tokens_in = getattr(usage, "prompt_tokens", 0) if usage else 0
        tokens_out = getattr(usage, "completion_tokens", 0) if usage else 0

        LLM_TOKENS_TOTAL.labels(model=model_id, type="prompt").inc(tokens_in or 0)
        LLM_TOKENS_TOTAL.labels(model=model_id, type="completion").inc(tokens_out or 0)
        LLM_LATENCY_SECONDS.labels(model=model_id).observe(duration_ms / 1000)

        self._logger.info(
            "LLM inference completed",
            llm_model=model_id,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            processing_status="SUCCESS",
            processing_duration_ms=duration_ms,
            tags=["llm-response"],
        )

    # ── Private helpers ──────────────────────────────────────────

    @staticmethod
    def _normalize_model_id(model_id: str) -> str:
        """Convert ``provider:model`` to ``provider/model`` for litellm routing."""
        return model_id.replace(":", "/", 1)

    @staticmethod
    def _inject_api_keys(settings: LlmSettings) -> None:
        for env_var, key in settings.api_keys().items():
            os.environ[env_var] = key

    @staticmethod
    def _build_messages(user_prompt: str, system_prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    def _raise_all_failed(self, last_error: Exception | None) -> NoReturn:
        raise ProviderError(
            provider="litellm",
            message=f"All {len(self._priority_models)} model(s) failed for complete",
            retryable=True,
        ) from last_error
