"""Alert Rule Engine - run client alert rules against metric snapshots.

``run_rules`` is stateless per call: it reads one snapshot per enabled rule,
applies the condition evaluator and the severity classifier, and returns the
fired events in rule order. ``evaluate_alert_rules`` is the persisted cycle
on top of it, which deduplicates against recent unread alerts.
"""

from datetime import UTC, datetime, timedelta

from radar_alerts.alerts.conditions import evaluate_condition
from radar_alerts.alerts.models import (
    Alert,
    AlertEvent,
    AlertRule,
    EvaluationSummary,
)
from radar_alerts.alerts.severity import classify_severity
from radar_alerts.core.config import get_settings
from radar_alerts.core.logging import bind_client_context, get_logger
from radar_alerts.core.protocols import AlertStoreProtocol, MetricsProviderProtocol
from radar_alerts.metrics import (
    ALERTS_CREATED,
    COLLABORATOR_FAILURES,
    RULES_EVALUATED,
    RULES_FIRED,
)

logger = get_logger(__name__)


async def run_rules(
    client_id: str,
    rules: list[AlertRule],
    metrics_provider: MetricsProviderProtocol,
) -> list[AlertEvent]:
    """Evaluate a client's rules and return the events that fired.

    A metrics provider failure for one rule is logged and that rule is
    skipped; the remaining rules are still evaluated.

    Args:
        client_id: Client whose metrics are read.
        rules: Rules to evaluate. Disabled rules are skipped.
        metrics_provider: Source of metric snapshots.

    Returns:
        Fired events, in the same order as ``rules``.
    """
    with bind_client_context(client_id):
        events: list[AlertEvent] = []

        for rule in rules:
            if not rule.enabled:
                logger.debug("rule_skipped_disabled", rule_id=rule.id)
                continue

            RULES_EVALUATED.labels(metric=rule.metric.value).inc()

            try:
                snapshot = await metrics_provider.get_snapshot(client_id, rule.metric)
            except Exception as e:
                COLLABORATOR_FAILURES.labels(component="metrics_provider").inc()
                logger.warning(
                    "metrics_provider_failed",
                    rule_id=rule.id,
                    metric=rule.metric.value,
                    error=str(e),
                )
                continue

            if not evaluate_condition(snapshot, rule.condition, rule.threshold):
                continue

            severity = classify_severity(rule.metric, snapshot)
            RULES_FIRED.labels(metric=rule.metric.value, severity=severity.value).inc()
            events.append(
                AlertEvent(
                    client_id=client_id,
                    rule_id=rule.id,
                    severity=severity,
                    metric=rule.metric,
                    snapshot=snapshot,
                    condition=rule.condition,
                    threshold=rule.threshold,
                    rule_name=rule.name,
                )
            )

        logger.info(
            "rules_evaluated",
            rules=len(rules),
            fired=len(events),
        )
        return events


async def evaluate_alert_rules(
    client_id: str,
    rules: list[AlertRule],
    metrics_provider: MetricsProviderProtocol,
    alert_store: AlertStoreProtocol,
    *,
    dedupe_window: timedelta | None = None,
    now: datetime | None = None,
) -> EvaluationSummary:
    """Run rules and persist one alert per fired rule.

    A fired rule is skipped when an unread alert for the same rule was
    created within ``dedupe_window``, so repeated cycles (for example one per
    page load) do not pile up identical alerts.

    Args:
        client_id: Client whose rules are evaluated.
        rules: Client rules; disabled rules are skipped.
        metrics_provider: Source of metric snapshots.
        alert_store: Alert persistence.
        dedupe_window: Deduplication window. Defaults to the configured
            ``dedupe_window_minutes``.
        now: Evaluation time, defaults to the current UTC time.

    Returns:
        EvaluationSummary with counts and the created alerts.
    """
    if dedupe_window is None:
        dedupe_window = timedelta(minutes=get_settings().dedupe_window_minutes)
    now = now or datetime.now(UTC)
    since = now - dedupe_window

    with bind_client_context(client_id, operation="rule_evaluation"):
        summary = EvaluationSummary(evaluated=sum(1 for rule in rules if rule.enabled))
        events = await run_rules(client_id, rules, metrics_provider)

        for event in events:
            try:
                if await alert_store.has_recent_unread_alert(client_id, event.rule_id, since):
                    summary.skipped_duplicates += 1
                    logger.debug("alert_suppressed_duplicate", rule_id=event.rule_id)
                    continue

                alert = await alert_store.create_alert(
                    Alert(
                        client_id=client_id,
                        rule_id=event.rule_id,
                        severity=event.severity,
                        metric=event.metric,
                        title=event.rule_name or event.metric.value,
                        message=event.message,
                    )
                )
            except Exception as e:
                summary.failed += 1
                COLLABORATOR_FAILURES.labels(component="alert_store").inc()
                logger.error(
                    "alert_store_failed",
                    rule_id=event.rule_id,
                    error=str(e),
                )
                continue

            summary.created += 1
            summary.alerts.append(alert)
            ALERTS_CREATED.labels(source="rule", severity=alert.severity.value).inc()

        logger.info(
            "alert_rules_cycle_complete",
            evaluated=summary.evaluated,
            created=summary.created,
            skipped_duplicates=summary.skipped_duplicates,
            failed=summary.failed,
        )
        return summary
