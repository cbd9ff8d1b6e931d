"""
Prometheus-based metrics for production monitoring.
Exposed by whichever process hosts the library (web worker, celery worker).
"""
from prometheus_client import Counter


visibility_decisions_total = Counter(
    "visibility_decisions_total",
    "Total visibility decisions",
    ["reason"],  # visible or HiddenReason value
)

subscription_transitions_total = Counter(
    "subscription_transitions_total",
    "Total subscription state transitions",
    ["transition"],  # subscribe, cancel, renew, expire
)

age_verifications_total = Counter(
    "age_verifications_total",
    "Total age verification attempts",
    ["result"],  # verified, under_age
)

moderation_operations_total = Counter(
    "moderation_operations_total",
    "Total bulk moderation operations",
    ["action"],
)

moderation_items_affected_total = Counter(
    "moderation_items_affected_total",
    "Total content items mutated by bulk moderation",
    ["action"],
)
