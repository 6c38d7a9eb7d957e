"""Severity classification for fired alert rules.

Hallucinations and negative sentiment are absolute risk signals; every other
metric escalates with the magnitude of its trend.
"""

from radar_alerts.alerts.conditions import percent_change
from radar_alerts.alerts.models import MetricKind, MetricSnapshot, Severity

CRITICAL_CHANGE_PCT = 50.0
WARNING_CHANGE_PCT = 20.0


def classify_severity(metric: MetricKind, snapshot: MetricSnapshot) -> Severity:
    """Classify the severity of a fired rule.

    Args:
        metric: Metric the rule watches.
        snapshot: Snapshot the rule fired on.

    Returns:
        Severity tier for the alert.
    """
    if metric == MetricKind.HALLUCINATIONS:
        return Severity.CRITICAL
    if metric == MetricKind.SENTIMENT and snapshot.current < 0:
        return Severity.CRITICAL

    delta = abs(percent_change(snapshot))
    if delta >= CRITICAL_CHANGE_PCT:
        return Severity.CRITICAL
    if delta >= WARNING_CHANGE_PCT:
        return Severity.WARNING
    return Severity.INFO
