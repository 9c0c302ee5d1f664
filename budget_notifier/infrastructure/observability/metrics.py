"""Prometheus metrics for completion calls, AI fallbacks, and notification scheduling"""

from prometheus_client import Counter, Histogram

# Completion endpoint metrics
completion_latency_histogram = Histogram(
    "completion_latency_seconds",
    "Completion endpoint response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

completion_failure_counter = Counter(
    "completion_failures_total",
    "Failed completion attempts, including retried ones",
    ["reason"],  # timeout | rate_limited | http_error | transport | malformed
)

ai_fallback_counter = Counter(
    "ai_fallback_total",
    "AI operations answered by the deterministic fallback",
    ["operation", "reason"],
)

# Notification metrics
notifications_scheduled_counter = Counter(
    "notifications_scheduled_total",
    "Notifications submitted to the substrate",
    ["kind"],  # budget-alert | spending-tip | saving-opportunity | bill-reminder
)

notification_failures_counter = Counter(
    "notification_schedule_failures_total",
    "Notifications the substrate refused or that could not be resolved",
)

bill_reminders_cancelled_counter = Counter(
    "bill_reminders_cancelled_total",
    "Scheduled bill reminder notifications cancelled",
)


def record_fallback(operation: str, reason: str) -> None:
    """Record that an AI operation fell back to local heuristics"""
    ai_fallback_counter.labels(operation=operation, reason=reason).inc()


def record_scheduled(kind: str | None) -> None:
    notifications_scheduled_counter.labels(kind=kind or "unknown").inc()
