from crossfile_review.infrastructure.observability.logger_factory_service import (
    configure_logging,
    get_logger,
)
from crossfile_review.infrastructure.observability.redaction_service import (
    redact_dict,
    redact_text,
)
from crossfile_review.infrastructure.observability.tracing_setup import (
    configure_tracing,
    get_tracer,
    trace_operation,
)

__all__ = [
    "configure_logging",
    "configure_tracing",
    "get_logger",
    "get_tracer",
    "redact_dict",
    "redact_text",
    "trace_operation",
]
