"""Alert domain model - metrics, rules, alerts and hallucination cases.

Data layer rows are duck-typed; everything entering the engine is converted
into these closed enumerations and dataclasses first.
"""

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from functools import total_ordering
from typing import Any

from radar_alerts.core.exceptions import InvalidSnapshotError


class MetricKind(Enum):
    """Tracked brand metrics."""

    MENTIONS = "mentions"
    SENTIMENT = "sentiment"
    CITATIONS = "citations"
    HALLUCINATIONS = "hallucinations"
    COMPETITOR_MOVEMENT = "competitor_movement"


class ConditionKind(Enum):
    """Rule conditions."""

    ABOVE = "above"
    BELOW = "below"
    EQUALS = "equals"
    CHANGES_BY = "changes_by"


@total_ordering
class Severity(Enum):
    """Alert severity levels, ordered info < warning < critical."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Position of the level in the escalation order."""
        return list(Severity).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


class HallucinationRiskLevel(Enum):
    """Risk assigned to a detected hallucination."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class HallucinationStatus(Enum):
    """Workflow status of a hallucination case."""

    OPEN = "open"
    CORRECTED = "corrected"
    MONITORING = "monitoring"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class MetricSnapshot:
    """Latest and prior reading of a metric over a rolling window."""

    current: float
    previous: float

    def __post_init__(self) -> None:
        for name in ("current", "previous"):
            value = getattr(self, name)
            if (
                isinstance(value, bool)
                or not isinstance(value, int | float)
                or not math.isfinite(value)
            ):
                raise InvalidSnapshotError(
                    f"Snapshot {name} must be a finite number, got {value!r}"
                )


@dataclass(frozen=True)
class AlertRule:
    """User-defined alert rule owned by a client."""

    id: str
    client_id: str
    name: str
    metric: MetricKind
    condition: ConditionKind
    threshold: float
    enabled: bool = True
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert rule to dictionary.

        Returns:
            Dictionary representation of the rule.
        """
        return {
            "id": self.id,
            "client_id": self.client_id,
            "name": self.name,
            "metric": self.metric.value,
            "condition": self.condition.value,
            "threshold": self.threshold,
            "enabled": self.enabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class AlertEvent:
    """A rule that fired for a snapshot, before it is persisted."""

    client_id: str
    rule_id: str
    severity: Severity
    metric: MetricKind
    snapshot: MetricSnapshot
    condition: ConditionKind
    threshold: float
    rule_name: str = ""

    @property
    def message(self) -> str:
        """Human-readable description of why the rule fired."""
        return (
            f"{self.metric.value} {self.condition.value} {_format_number(self.threshold)}. "
            f"Current={self.snapshot.current:.2f}, previous={self.snapshot.previous:.2f}."
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary.

        Returns:
            Dictionary representation of the event.
        """
        return {
            "client_id": self.client_id,
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "severity": self.severity.value,
            "metric": self.metric.value,
            "condition": self.condition.value,
            "threshold": self.threshold,
            "current": self.snapshot.current,
            "previous": self.snapshot.previous,
            "message": self.message,
        }


@dataclass
class Alert:
    """Persisted alert record.

    ``rule_id`` is None for system-generated hallucination alerts. Stores
    assign ``id`` and ``created_at``; only ``read_at`` changes afterwards.
    """

    client_id: str
    severity: Severity
    metric: MetricKind
    title: str
    message: str
    rule_id: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None

    @property
    def read(self) -> bool:
        """Whether the alert has been read."""
        return self.read_at is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert alert to dictionary.

        Returns:
            Dictionary representation of the alert.
        """
        return {
            "id": self.id,
            "client_id": self.client_id,
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "metric": self.metric.value,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "read_at": self.read_at.isoformat() if self.read_at else None,
        }


@dataclass
class HallucinationCase:
    """A detected AI-platform hallucination about the client's brand."""

    id: str
    client_id: str
    risk_level: HallucinationRiskLevel
    status: HallucinationStatus = HallucinationStatus.OPEN
    platform: str | None = None
    query: str = ""
    detected_at: datetime = field(default_factory=_utcnow)
    resolved_at: datetime | None = None
    has_alert: bool = False

    @property
    def is_open(self) -> bool:
        """Case is open and has no resolution time.

        Cases under monitoring are not open; only open cases qualify for a
        critical alert.
        """
        return self.status == HallucinationStatus.OPEN and self.resolved_at is None


@dataclass(frozen=True)
class NotificationEvent:
    """Contract accepted by the notification dispatcher."""

    alert_id: str
    client_id: str
    severity: Severity
    metric: MetricKind
    message: str
    created_at: datetime

    @classmethod
    def from_alert(cls, alert: Alert) -> "NotificationEvent":
        """Build the event for a stored alert.

        Args:
            alert: Alert with ``id`` and ``created_at`` assigned.

        Returns:
            NotificationEvent for the alert.
        """
        if alert.id is None:
            raise ValueError("Cannot notify about an alert that has not been stored")
        return cls(
            alert_id=alert.id,
            client_id=alert.client_id,
            severity=alert.severity,
            metric=alert.metric,
            message=alert.message,
            created_at=alert.created_at or _utcnow(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary.

        Returns:
            Dictionary representation of the event.
        """
        return {
            "alert_id": self.alert_id,
            "client_id": self.client_id,
            "severity": self.severity.value,
            "metric": self.metric.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class SweepResult:
    """Outcome of one hallucination sweep."""

    created: int = 0
    notifications_sent: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"created": self.created, "notifications_sent": self.notifications_sent}


@dataclass
class EvaluationSummary:
    """Outcome of one persisted rule evaluation cycle."""

    evaluated: int = 0
    created: int = 0
    skipped_duplicates: int = 0
    failed: int = 0
    alerts: list[Alert] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "evaluated": self.evaluated,
            "created": self.created,
            "skipped_duplicates": self.skipped_duplicates,
            "failed": self.failed,
            "alerts": [alert.to_dict() for alert in self.alerts],
        }
