from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from crossfile_review.core.application.exceptions import ProviderError

_T = TypeVar("_T")

logger = structlog.get_logger().bind(context_component="retry_policy")


def _retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.retryable


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "Retrying collaborator call",
        attempt=state.attempt_number,
        error_type=type(exc).__name__,
        error_details=str(exc),
        error_retryable=True,
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for collaborator calls; only retryable ProviderErrors retry."""

    max_attempts: int = 1  # Default: fail fast (1 attempt, 0 retries)
    initial_wait: float = 0.25
    max_wait: float = 5.0

    async def run(self, fn: Callable[[], Awaitable[_T]]) -> _T:
        async for attempt in self._retrying():
            with attempt:
                return await fn()
        raise AssertionError("unreachable: AsyncRetrying reraises the last error")

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception(_retryable),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(initial=self.initial_wait, max=self.max_wait),
            before_sleep=_log_retry,
            reraise=True,
        )
