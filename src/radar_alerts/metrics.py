"""Prometheus metrics for radar-alerts.

Counts alert creation, notification delivery and collaborator failures
across rule evaluation cycles and hallucination sweeps.
"""

from prometheus_client import Counter

RULES_EVALUATED = Counter(
    "radar_alert_rules_evaluated_total",
    "Total number of enabled alert rules evaluated",
    ["metric"],
)

RULES_FIRED = Counter(
    "radar_alert_rules_fired_total",
    "Total number of alert rules whose condition was met",
    ["metric", "severity"],
)

ALERTS_CREATED = Counter(
    "radar_alerts_created_total",
    "Total number of alerts persisted",
    ["source", "severity"],  # source: rule, hallucination, correction
)

NOTIFICATIONS = Counter(
    "radar_notifications_total",
    "Total number of notification attempts",
    ["outcome"],  # sent, failed
)

COLLABORATOR_FAILURES = Counter(
    "radar_collaborator_failures_total",
    "Total number of failed collaborator calls",
    ["component"],  # metrics_provider, case_provider, alert_store, notifier
)
