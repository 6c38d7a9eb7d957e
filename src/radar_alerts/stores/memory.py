"""In-memory collaborators for local runs and tests.

These back the HTTP service when no external store is configured and give
tests a store with the same conditional-write behaviour a database would.
"""

import asyncio
import uuid
from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from radar_alerts.alerts.models import (
    Alert,
    HallucinationCase,
    HallucinationRiskLevel,
    MetricKind,
    MetricSnapshot,
)
from radar_alerts.alerts.windows import comparison_window
from radar_alerts.core.exceptions import CollaboratorError


@dataclass(frozen=True)
class MetricReading:
    """One timestamped observation (a mention, a citation, a sentiment score...)."""

    recorded_at: datetime
    value: float = 1.0


class InMemoryMetricsProvider:
    """Computes snapshots from recorded readings.

    Count metrics count readings per window. Sentiment averages the reading
    values per window, rounded to two decimals, and is 0 for an empty window.
    """

    def __init__(self, now: datetime | None = None) -> None:
        """Initialize the provider.

        Args:
            now: Fixed evaluation time. Uses the current UTC time when None.
        """
        self._readings: dict[tuple[str, MetricKind], list[MetricReading]] = defaultdict(list)
        self._now = now

    def record(
        self,
        client_id: str,
        metric: MetricKind,
        recorded_at: datetime,
        value: float = 1.0,
    ) -> None:
        """Record a reading.

        Args:
            client_id: Client the reading belongs to.
            metric: Metric kind.
            recorded_at: Observation time.
            value: Reading value (sentiment score for sentiment).
        """
        self._readings[(client_id, metric)].append(MetricReading(recorded_at, value))

    async def get_snapshot(self, client_id: str, metric: MetricKind) -> MetricSnapshot:
        """Compute the snapshot for a client's metric."""
        now = self._now or datetime.now(UTC)
        current_from, previous_from, previous_to = comparison_window(metric, now)
        readings = self._readings.get((client_id, metric), [])

        current = [r.value for r in readings if current_from <= r.recorded_at <= now]
        previous = [r.value for r in readings if previous_from <= r.recorded_at < previous_to]

        if metric == MetricKind.SENTIMENT:
            return MetricSnapshot(current=_average(current), previous=_average(previous))
        return MetricSnapshot(current=len(current), previous=len(previous))


def _average(values: list[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


class InMemoryCaseProvider:
    """Hallucination case source with an atomic conditional mark."""

    def __init__(self, cases: list[HallucinationCase] | None = None) -> None:
        """Initialize the provider.

        Args:
            cases: Initial cases.
        """
        self._cases: dict[str, HallucinationCase] = {}
        self._lock = asyncio.Lock()
        for case in cases or []:
            self.add_case(case)

    def add_case(self, case: HallucinationCase) -> None:
        """Add or replace a case."""
        self._cases[case.id] = case

    def get_case(self, case_id: str) -> HallucinationCase | None:
        """Get a case by id."""
        return self._cases.get(case_id)

    async def list_cases(self, client_id: str) -> list[HallucinationCase]:
        """List all cases of a client."""
        return [replace(case) for case in self._cases.values() if case.client_id == client_id]

    async def list_unalerted_critical_cases(self, client_id: str) -> list[HallucinationCase]:
        """List open critical cases of a client without an alert."""
        return [
            replace(case)
            for case in self._cases.values()
            if case.client_id == client_id
            and case.risk_level == HallucinationRiskLevel.CRITICAL
            and case.is_open
            and not case.has_alert
        ]

    async def mark_alerted(self, case_id: str) -> bool:
        """Set ``has_alert`` if it is still false.

        Returns:
            True iff this call performed the transition.

        Raises:
            CollaboratorError: If the case does not exist.
        """
        async with self._lock:
            case = self._cases.get(case_id)
            if case is None:
                raise CollaboratorError(f"Hallucination case not found: {case_id}")
            if case.has_alert:
                return False
            case.has_alert = True
            return True


class InMemoryAlertStore:
    """Alert persistence backed by a list."""

    def __init__(self) -> None:
        """Initialize the store."""
        self._alerts: list[Alert] = []

    async def create_alert(self, alert: Alert) -> Alert:
        """Store an alert, assigning id and creation time.

        Raises:
            CollaboratorError: If an alert with the same id is already stored.
        """
        if alert.id is not None and any(existing.id == alert.id for existing in self._alerts):
            raise CollaboratorError(f"Alert already exists: {alert.id}")

        stored = replace(
            alert,
            id=alert.id or str(uuid.uuid4()),
            created_at=alert.created_at or datetime.now(UTC),
        )
        self._alerts.append(stored)
        return stored

    async def has_recent_unread_alert(
        self,
        client_id: str,
        rule_id: str,
        since: datetime,
    ) -> bool:
        """Check for an unread alert of a rule created at or after ``since``."""
        return any(
            alert.client_id == client_id
            and alert.rule_id == rule_id
            and not alert.read
            and alert.created_at is not None
            and alert.created_at >= since
            for alert in self._alerts
        )

    async def list_alerts(self, client_id: str, limit: int = 120) -> list[Alert]:
        """List a client's alerts, newest first."""
        alerts = [alert for alert in self._alerts if alert.client_id == client_id]
        alerts.sort(key=lambda alert: alert.created_at or datetime.min.replace(tzinfo=UTC))
        return list(reversed(alerts))[:limit]

    async def mark_read(self, alert_ids: list[str]) -> int:
        """Mark alerts as read.

        Returns:
            Number of alerts that changed from unread to read.
        """
        now = datetime.now(UTC)
        changed = 0
        for alert in self._alerts:
            if alert.id in alert_ids and alert.read_at is None:
                alert.read_at = now
                changed += 1
        return changed

    async def unread_count(self, client_id: str) -> int:
        """Count a client's unread alerts."""
        return sum(1 for alert in self._alerts if alert.client_id == client_id and not alert.read)
