"""Prometheus metrics declarations for the review service.

All metrics are declared statically at module level.
Labels use ONLY static enumerations, never project IDs, MR IIDs or SHAs.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── Review-level metrics ──────────────────────────────────────────

REVIEWS_TOTAL = Counter(
    "crossfile_reviews_total",
    "Total merge request reviews run",
    ["outcome"],
)

REVIEW_DURATION_SECONDS = Histogram(
    "crossfile_review_duration_seconds",
    "End-to-end merge request review duration in seconds",
)

REVIEWS_INFLIGHT = Gauge(
    "crossfile_reviews_inflight",
    "Currently running reviews",
)

COMMENTS_POSTED_TOTAL = Counter(
    "crossfile_comments_posted_total",
    "Line comments posted to merge requests",
)

WEBHOOKS_TOTAL = Counter(
    "crossfile_webhooks_total",
    "Incoming GitLab webhooks",
    ["outcome"],
)

# ── Collaborator metrics ──────────────────────────────────────────

CODE_SEARCH_CALLS_TOTAL = Counter(
    "crossfile_code_search_calls_total",
    "Code search requests issued for dependency analysis",
    ["outcome"],
)

# ── LLM metrics ───────────────────────────────────────────────────

LLM_TOKENS_TOTAL = Counter(
    "crossfile_llm_tokens_total",
    "Total LLM tokens consumed",
    ["model", "type"],
)

LLM_LATENCY_SECONDS = Histogram(
    "crossfile_llm_latency_seconds",
    "LLM inference latency in seconds",
    ["model"],
)
