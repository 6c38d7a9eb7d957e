"""Protocol definitions for radar-alerts.

The rule engine and the hallucination sweep never reach into ambient state;
every read and write goes through one of these collaborators, passed in
explicitly by the caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from radar_alerts.alerts.models import (
        Alert,
        HallucinationCase,
        MetricKind,
        MetricSnapshot,
        NotificationEvent,
    )


class MetricsProviderProtocol(Protocol):
    """Computes current/previous readings for a metric.

    The provider owns the comparison window (for example the last 24 hours
    against the 24 hours before that).
    """

    async def get_snapshot(self, client_id: str, metric: MetricKind) -> MetricSnapshot:
        """Get the snapshot for a client's metric.

        Args:
            client_id: Client whose metric is read.
            metric: Metric kind to read.

        Returns:
            MetricSnapshot with current and previous values.
        """
        ...


class CaseProviderProtocol(Protocol):
    """Read and conditional-write access to hallucination cases."""

    async def list_unalerted_critical_cases(self, client_id: str) -> list[HallucinationCase]:
        """List open critical-risk cases that have no alert yet.

        Args:
            client_id: Client whose cases are listed.

        Returns:
            List of qualifying cases.
        """
        ...

    async def mark_alerted(self, case_id: str) -> bool:
        """Atomically set ``has_alert`` on a case.

        Args:
            case_id: Case to mark.

        Returns:
            True iff this call performed the false -> true transition.
        """
        ...


class AlertStoreProtocol(Protocol):
    """Persistence for alert records."""

    async def create_alert(self, alert: Alert) -> Alert:
        """Persist an alert.

        Args:
            alert: Alert without id or creation time.

        Returns:
            The stored alert with ``id`` and ``created_at`` assigned.
        """
        ...

    async def has_recent_unread_alert(
        self,
        client_id: str,
        rule_id: str,
        since: datetime,
    ) -> bool:
        """Check for an unread alert of a rule created at or after ``since``.

        Args:
            client_id: Client that owns the rule.
            rule_id: Rule that produced the alert.
            since: Start of the deduplication window.

        Returns:
            True if such an alert exists.
        """
        ...


class NotifierProtocol(Protocol):
    """Delivers notification events (email, webhook, ...)."""

    async def send(self, event: NotificationEvent) -> bool:
        """Deliver one notification event.

        Args:
            event: Event to deliver.

        Returns:
            True if delivery succeeded.
        """
        ...
