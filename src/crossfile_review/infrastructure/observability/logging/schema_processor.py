"""Structlog processor that nests flat event dicts into the service log schema.

Root fields stay flat; processing, error, event, context and metadata fields
are grouped into their own blocks, and whatever is left lands in ``extra``.
All field extraction uses dict.pop(key, default) to avoid KeyError.
"""

from __future__ import annotations

import os
from typing import Any
from uuid import uuid4

from opentelemetry import trace


def _build_root_fields(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "timestamp": event_dict.pop("timestamp", None),
        "level": event_dict.pop("level", "info"),
        "service": os.environ.get("SERVICE_NAME", "crossfile-review"),
        "environment": os.environ.get("APP_ENV", "local"),
        "trace_id": event_dict.pop("trace_id", None),
        "span_id": event_dict.pop("span_id", None),
        "message": event_dict.pop("event", ""),
    }


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _build_processing(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    status = event_dict.pop("processing_status", None)
    if status is None:
        return None
    return {
        "status": status,
        "duration_ms": _safe_float(event_dict.pop("processing_duration_ms", None)),
    }


def _build_error(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Returns None if no error_type present."""
    error_type = event_dict.pop("error_type", None)
    if error_type is None:
        return None
    return {
        "type": error_type,
        "details": event_dict.pop("error_details", None),
        "retryable": event_dict.pop("error_retryable", False),
    }


def _build_event_block(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "eventId": event_dict.pop("event_id", str(uuid4())),
        "eventType": event_dict.pop("event_type", None),
    }


def _build_context(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    component = event_dict.pop("context_component", None)
    if component is None:
        return None
    return {
        "component": component,
        "endpoint": event_dict.pop("context_endpoint", None),
        "project_id": event_dict.pop("project_id", None),
        "mr_iid": event_dict.pop("mr_iid", None),
    }


def _build_metadata(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    source = event_dict.pop("source_system", None)
    tags = event_dict.pop("tags", None)
    if source is None and tags is None:
        return None
    return {"source_system": source, "tags": tags}


def _inject_otel_ids(event_dict: dict[str, Any]) -> None:
    """Overwrite trace_id and span_id from the current OTel span if recording."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")


def review_schema_processor(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    _inject_otel_ids(event_dict)
    result = _build_root_fields(event_dict)

    processing = _build_processing(event_dict)
    if processing is not None:
        result["processing"] = processing

    error = _build_error(event_dict)
    if error is not None:
        result["error"] = error

    result["event"] = _build_event_block(event_dict)

    context = _build_context(event_dict)
    if context is not None:
        result["context"] = context

    metadata = _build_metadata(event_dict)
    if metadata is not None:
        result["metadata"] = metadata

    if event_dict:
        result["extra"] = dict(event_dict)

    return result
