"""Condition evaluation for alert rules."""

from radar_alerts.alerts.models import ConditionKind, MetricSnapshot

EQUALS_TOLERANCE = 0.001
ZERO_BASELINE_CHANGE = 100.0


def percent_change(snapshot: MetricSnapshot) -> float:
    """Signed percent change of ``current`` relative to ``previous``.

    Growth from a zero baseline counts as a full 100% change; no change
    from zero is 0%.

    Args:
        snapshot: Metric snapshot.

    Returns:
        Percent change.
    """
    if snapshot.previous == 0:
        return ZERO_BASELINE_CHANGE if snapshot.current > 0 else 0.0
    return ((snapshot.current - snapshot.previous) / abs(snapshot.previous)) * 100


def evaluate_condition(
    snapshot: MetricSnapshot,
    condition: ConditionKind,
    threshold: float,
) -> bool:
    """Check whether a snapshot meets a rule condition.

    Args:
        snapshot: Metric snapshot.
        condition: Rule condition.
        threshold: Rule threshold. For ``changes_by`` this is a non-negative
            percentage magnitude.

    Returns:
        True if the condition is met, False otherwise.
    """
    if condition == ConditionKind.ABOVE:
        return snapshot.current > threshold
    elif condition == ConditionKind.BELOW:
        return snapshot.current < threshold
    elif condition == ConditionKind.EQUALS:
        return abs(snapshot.current - threshold) < EQUALS_TOLERANCE
    return abs(percent_change(snapshot)) >= threshold
