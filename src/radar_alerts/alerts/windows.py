"""Comparison windows used to compute metric snapshots.

Each metric is compared over two adjacent windows of equal length: the
current window ends now, the previous window ends where the current begins.
"""

from datetime import datetime, timedelta

from radar_alerts.alerts.models import MetricKind

METRIC_WINDOWS: dict[MetricKind, timedelta] = {
    MetricKind.MENTIONS: timedelta(hours=24),
    MetricKind.CITATIONS: timedelta(hours=24),
    MetricKind.SENTIMENT: timedelta(hours=24),
    MetricKind.HALLUCINATIONS: timedelta(days=7),
    MetricKind.COMPETITOR_MOVEMENT: timedelta(days=30),
}


def comparison_window(metric: MetricKind, now: datetime) -> tuple[datetime, datetime, datetime]:
    """Get window bounds for a metric.

    Args:
        metric: Metric kind.
        now: End of the current window.

    Returns:
        Tuple of (current_from, previous_from, previous_to). The current
        window is ``[current_from, now]``, the previous one is
        ``[previous_from, previous_to)``.
    """
    length = METRIC_WINDOWS[metric]
    current_from = now - length
    return current_from, now - 2 * length, current_from
