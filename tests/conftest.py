"""Pytest fixtures for radar-alerts tests."""

from datetime import UTC, datetime, timedelta

import pytest

from radar_alerts.alerts.models import (
    AlertRule,
    ConditionKind,
    HallucinationCase,
    HallucinationRiskLevel,
    MetricKind,
    MetricSnapshot,
    NotificationEvent,
)
from radar_alerts.core.config import Settings
from radar_alerts.stores.memory import InMemoryAlertStore, InMemoryCaseProvider

CLIENT_ID = "client-acme"
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


class StaticMetricsProvider:
    """Metrics provider returning fixed snapshots, optionally failing per metric."""

    def __init__(
        self,
        snapshots: dict[MetricKind, MetricSnapshot],
        failing: set[MetricKind] | None = None,
    ) -> None:
        self.snapshots = snapshots
        self.failing = failing or set()
        self.calls: list[tuple[str, MetricKind]] = []

    async def get_snapshot(self, client_id: str, metric: MetricKind) -> MetricSnapshot:
        self.calls.append((client_id, metric))
        if metric in self.failing:
            raise ConnectionError(f"metrics backend unavailable for {metric.value}")
        return self.snapshots[metric]


class RecordingNotifier:
    """Notifier that records events and returns a configurable outcome."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.events: list[NotificationEvent] = []

    async def send(self, event: NotificationEvent) -> bool:
        self.events.append(event)
        return self.succeed


def make_rule(
    rule_id: str,
    metric: MetricKind,
    condition: ConditionKind,
    threshold: float,
    enabled: bool = True,
) -> AlertRule:
    """Build a rule for CLIENT_ID."""
    return AlertRule(
        id=rule_id,
        client_id=CLIENT_ID,
        name=f"{metric.value} {condition.value}",
        metric=metric,
        condition=condition,
        threshold=threshold,
        enabled=enabled,
    )


def make_case(
    case_id: str,
    hours_ago: int = 1,
    risk_level: HallucinationRiskLevel = HallucinationRiskLevel.CRITICAL,
    **kwargs,
) -> HallucinationCase:
    """Build a hallucination case for CLIENT_ID."""
    return HallucinationCase(
        id=case_id,
        client_id=kwargs.pop("client_id", CLIENT_ID),
        risk_level=risk_level,
        platform=kwargs.pop("platform", "ChatGPT"),
        query=kwargs.pop("query", "Does Acme support SSO?"),
        detected_at=NOW - timedelta(hours=hours_ago),
        **kwargs,
    )


@pytest.fixture
def alert_store() -> InMemoryAlertStore:
    """Create an empty in-memory alert store."""
    return InMemoryAlertStore()


@pytest.fixture
def case_provider() -> InMemoryCaseProvider:
    """Create a case provider with three unalerted critical cases."""
    return InMemoryCaseProvider(
        [
            make_case("case-3", hours_ago=1),
            make_case("case-1", hours_ago=30),
            make_case("case-2", hours_ago=5, platform=None),
        ]
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a notifier whose deliveries succeed."""
    return RecordingNotifier()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-specific overrides."""
    return Settings(
        log_format="text",
        dedupe_window_minutes=60,
        console_notifications=True,
        webhook_url=None,
        smtp_host=None,
    )
