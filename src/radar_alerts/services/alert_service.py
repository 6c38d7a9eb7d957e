"""Alert service - wires rules, collaborators and notifications for callers."""

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from radar_alerts.alerts.engine import evaluate_alert_rules
from radar_alerts.alerts.hallucinations import (
    parse_correction_notes,
    record_hallucination_correction,
    run_critical_hallucination_sweep,
)
from radar_alerts.alerts.models import (
    Alert,
    AlertRule,
    EvaluationSummary,
    HallucinationCase,
    HallucinationRiskLevel,
    HallucinationStatus,
    SweepResult,
)
from radar_alerts.alerts.schemas import AlertRuleCreate, build_rule
from radar_alerts.core.config import Settings, get_settings
from radar_alerts.core.logging import get_logger
from radar_alerts.core.protocols import NotifierProtocol
from radar_alerts.notifications.dispatcher import NotificationDispatcher, build_dispatcher
from radar_alerts.stores.memory import (
    InMemoryAlertStore,
    InMemoryCaseProvider,
    InMemoryMetricsProvider,
)

logger = get_logger(__name__)

# Alerts scanned for correction notes when listing cases.
CORRECTION_NOTE_SCAN_LIMIT = 300


class AlertService:
    """Service holding the collaborators behind the HTTP surface."""

    def __init__(
        self,
        settings: Settings | None = None,
        metrics_provider: InMemoryMetricsProvider | None = None,
        case_provider: InMemoryCaseProvider | None = None,
        alert_store: InMemoryAlertStore | None = None,
        notifier: NotifierProtocol | None = None,
    ) -> None:
        """Initialize the alert service."""
        self._settings = settings or get_settings()
        self.metrics_provider = metrics_provider or InMemoryMetricsProvider()
        self.case_provider = case_provider or InMemoryCaseProvider()
        self.alert_store = alert_store or InMemoryAlertStore()
        self.notifier = notifier or build_dispatcher(self._settings)
        self._rules: dict[str, list[AlertRule]] = {}

    def list_notification_handlers(self) -> list[dict[str, Any]]:
        """List the dispatcher handlers, or nothing for a custom notifier."""
        if isinstance(self.notifier, NotificationDispatcher):
            return self.notifier.list_handlers()
        return []

    def create_rule(self, data: dict[str, Any] | AlertRuleCreate) -> AlertRule:
        """Validate and register a rule.

        Raises:
            InvalidRuleError: If the input is malformed.
        """
        rule = build_rule(data)
        self._rules.setdefault(rule.client_id, []).append(rule)
        logger.info("alert_rule_created", client_id=rule.client_id, rule_id=rule.id)
        return rule

    def list_rules(self, client_id: str) -> list[AlertRule]:
        """List a client's rules, newest first."""
        return list(reversed(self._rules.get(client_id, [])))

    def set_rule_enabled(self, rule_id: str, enabled: bool) -> AlertRule | None:
        """Enable or disable a rule. Rules are never hard-deleted."""
        for client_rules in self._rules.values():
            for i, rule in enumerate(client_rules):
                if rule.id == rule_id:
                    client_rules[i] = replace(rule, enabled=enabled)
                    logger.info("alert_rule_toggled", rule_id=rule_id, enabled=enabled)
                    return client_rules[i]
        return None

    async def evaluate(self, client_id: str) -> EvaluationSummary:
        """Run the persisted evaluation cycle for a client."""
        return await evaluate_alert_rules(
            client_id,
            self._rules.get(client_id, []),
            self.metrics_provider,
            self.alert_store,
        )

    async def sweep(self, client_id: str) -> SweepResult:
        """Run a critical hallucination sweep for a client."""
        return await run_critical_hallucination_sweep(
            client_id,
            self.case_provider,
            self.alert_store,
            self.notifier,
        )

    def add_case(self, case: HallucinationCase) -> None:
        """Register a detected hallucination case."""
        self.case_provider.add_case(case)

    async def list_cases(self, client_id: str) -> list[tuple[HallucinationCase, str | None]]:
        """List a client's cases with their latest correction note.

        Cases are ordered by risk, highest first, then newest first.

        Returns:
            List of (case, correction note or None) pairs.
        """
        alerts = await self.alert_store.list_alerts(client_id, limit=CORRECTION_NOTE_SCAN_LIMIT)
        notes = parse_correction_notes([alert.message for alert in alerts])

        risk_order = list(HallucinationRiskLevel)
        cases = sorted(
            await self.case_provider.list_cases(client_id),
            key=lambda case: (risk_order.index(case.risk_level), -case.detected_at.timestamp()),
        )
        return [(case, notes.get(case.id)) for case in cases]

    async def correct_case(self, case_id: str, note: str) -> Alert | None:
        """Mark a case corrected and record the correction alert.

        Returns:
            The correction alert, or None if the case does not exist.
        """
        case = self.case_provider.get_case(case_id)
        if case is None:
            return None

        case.status = HallucinationStatus.CORRECTED
        case.resolved_at = datetime.now(UTC)
        return await record_hallucination_correction(case, note, self.alert_store)

    async def list_alerts(self, client_id: str, limit: int = 120) -> tuple[list[Alert], int]:
        """List a client's alerts with the unread count."""
        alerts = await self.alert_store.list_alerts(client_id, limit=limit)
        unread = await self.alert_store.unread_count(client_id)
        return alerts, unread


_alert_service: AlertService | None = None


def get_alert_service() -> AlertService:
    """Get the process-wide alert service instance."""
    global _alert_service
    if _alert_service is None:
        _alert_service = AlertService()
    return _alert_service
