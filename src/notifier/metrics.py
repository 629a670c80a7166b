"""
Prometheus metrics for the notification store.

Counters are process-global (default registry) and shared by every store
instance in the process.
"""

from prometheus_client import Counter

notifications_created_total = Counter(
    "notifications_created_total",
    "Total number of notifications created",
    labelnames=["state"],
)

notification_transitions_total = Counter(
    "notification_transitions_total",
    "Total number of state transitions on existing notifications",
    labelnames=["from_state", "to_state"],
)

notifications_dismissed_total = Counter(
    "notifications_dismissed_total",
    "Total number of dismissed notifications",
    labelnames=["reason"],
)

notification_confirmations_total = Counter(
    "notification_confirmations_total",
    "Total number of resolved confirm prompts",
    labelnames=["outcome"],  # confirmed | cancelled
)

notification_promises_total = Counter(
    "notification_promises_total",
    "Total number of tracked awaitables settled",
    labelnames=["outcome"],  # fulfilled | rejected
)
