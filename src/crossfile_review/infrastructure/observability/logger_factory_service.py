"""Logging bootstrap for the review service.

Every event, whether emitted through structlog or through a stdlib logger
(uvicorn, httpx, litellm), goes through the same processor chain and ends
in the review schema before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from crossfile_review.infrastructure.observability.logging import review_schema_processor

_CONFIGURED = False

_RENDERERS = {
    "json": structlog.processors.JSONRenderer,
    "console": lambda: structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
}


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Install the review log pipeline once per process; later calls are ignored."""
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return
    _CONFIGURED = True

    renderer = renderer_for(log_format)
    chain = review_processor_chain()
    structlog.configure(
        processors=[*chain, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *chain, renderer]
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())


def review_processor_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        review_schema_processor,
    ]


def renderer_for(log_format: str) -> Any:
    # Unknown formats fall back to console output.
    factory = _RENDERERS.get(log_format.lower(), _RENDERERS["console"])
    return factory()


def get_logger(component: str, **bindings: Any) -> structlog.stdlib.BoundLogger:
    """Logger bound to *component*; the container adds project_id and mr_iid."""
    return structlog.get_logger().bind(context_component=component, **bindings)
