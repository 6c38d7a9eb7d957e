"""Tests for in-memory collaborators."""

import asyncio
from datetime import timedelta

import pytest
from conftest import CLIENT_ID, NOW, make_case

from radar_alerts.alerts.models import (
    Alert,
    HallucinationRiskLevel,
    HallucinationStatus,
    MetricKind,
    MetricSnapshot,
    Severity,
)
from radar_alerts.core.exceptions import CollaboratorError
from radar_alerts.stores.memory import (
    InMemoryAlertStore,
    InMemoryCaseProvider,
    InMemoryMetricsProvider,
)


def _alert(rule_id: str | None = "r1", **kwargs) -> Alert:
    return Alert(
        client_id=kwargs.pop("client_id", CLIENT_ID),
        rule_id=rule_id,
        severity=Severity.WARNING,
        metric=MetricKind.MENTIONS,
        title="Mentions spike",
        message="mentions above 5. Current=8.00, previous=2.00.",
        **kwargs,
    )


class TestInMemoryMetricsProvider:
    """Tests for InMemoryMetricsProvider."""

    @pytest.mark.asyncio
    async def test_counts_readings_per_window(self) -> None:
        """Test mentions are counted over the current and previous 24h."""
        provider = InMemoryMetricsProvider(now=NOW)
        for hours in (1, 5, 23):
            provider.record(CLIENT_ID, MetricKind.MENTIONS, NOW - timedelta(hours=hours))
        for hours in (25, 47):
            provider.record(CLIENT_ID, MetricKind.MENTIONS, NOW - timedelta(hours=hours))
        provider.record(CLIENT_ID, MetricKind.MENTIONS, NOW - timedelta(hours=49))
        provider.record("client-other", MetricKind.MENTIONS, NOW - timedelta(hours=1))

        snapshot = await provider.get_snapshot(CLIENT_ID, MetricKind.MENTIONS)

        assert snapshot == MetricSnapshot(current=3, previous=2)

    @pytest.mark.asyncio
    async def test_window_boundary_belongs_to_current(self) -> None:
        """Test a reading exactly 24h old counts in the current window."""
        provider = InMemoryMetricsProvider(now=NOW)
        provider.record(CLIENT_ID, MetricKind.CITATIONS, NOW - timedelta(hours=24))

        snapshot = await provider.get_snapshot(CLIENT_ID, MetricKind.CITATIONS)

        assert snapshot == MetricSnapshot(current=1, previous=0)

    @pytest.mark.asyncio
    async def test_hallucinations_use_weekly_window(self) -> None:
        """Test hallucinations are compared week over week."""
        provider = InMemoryMetricsProvider(now=NOW)
        provider.record(CLIENT_ID, MetricKind.HALLUCINATIONS, NOW - timedelta(days=3))
        provider.record(CLIENT_ID, MetricKind.HALLUCINATIONS, NOW - timedelta(days=10))

        snapshot = await provider.get_snapshot(CLIENT_ID, MetricKind.HALLUCINATIONS)

        assert snapshot == MetricSnapshot(current=1, previous=1)

    @pytest.mark.asyncio
    async def test_sentiment_is_averaged(self) -> None:
        """Test sentiment averages scores rounded to two decimals."""
        provider = InMemoryMetricsProvider(now=NOW)
        for score in (0.5, -0.2, 0.1):
            provider.record(CLIENT_ID, MetricKind.SENTIMENT, NOW - timedelta(hours=2), score)

        snapshot = await provider.get_snapshot(CLIENT_ID, MetricKind.SENTIMENT)

        assert snapshot.current == pytest.approx(0.13)
        assert snapshot.previous == 0.0


class TestInMemoryCaseProvider:
    """Tests for InMemoryCaseProvider."""

    @pytest.mark.asyncio
    async def test_mark_alerted_once(self) -> None:
        """Test only the first mark performs the transition."""
        provider = InMemoryCaseProvider([make_case("case-1")])

        assert await provider.mark_alerted("case-1")
        assert not await provider.mark_alerted("case-1")

    @pytest.mark.asyncio
    async def test_mark_unknown_case_fails(self) -> None:
        """Test marking a case that does not exist is a collaborator error."""
        provider = InMemoryCaseProvider()

        with pytest.raises(CollaboratorError, match="missing"):
            await provider.mark_alerted("missing")

    @pytest.mark.asyncio
    async def test_unalerted_listing_only_open_critical_cases(self) -> None:
        """Test monitoring, corrected and alerted cases are not listed."""
        provider = InMemoryCaseProvider(
            [
                make_case("open"),
                make_case("monitoring", status=HallucinationStatus.MONITORING),
                make_case("corrected", status=HallucinationStatus.CORRECTED),
                make_case("alerted", has_alert=True),
                make_case("low", risk_level=HallucinationRiskLevel.LOW),
            ]
        )

        listed = await provider.list_unalerted_critical_cases(CLIENT_ID)

        assert [case.id for case in listed] == ["open"]
        assert len(await provider.list_cases(CLIENT_ID)) == 5
        assert await provider.list_cases("client-other") == []

    @pytest.mark.asyncio
    async def test_concurrent_marks_have_one_winner(self) -> None:
        """Test concurrent marks on the same case succeed exactly once."""
        provider = InMemoryCaseProvider([make_case("case-1")])

        results = await asyncio.gather(*(provider.mark_alerted("case-1") for _ in range(5)))

        assert results.count(True) == 1

    @pytest.mark.asyncio
    async def test_listing_returns_copies(self) -> None:
        """Test listed cases do not alias stored state."""
        provider = InMemoryCaseProvider([make_case("case-1")])

        listed = await provider.list_unalerted_critical_cases(CLIENT_ID)
        listed[0].has_alert = True

        assert not provider.get_case("case-1").has_alert
        assert await provider.list_unalerted_critical_cases(CLIENT_ID) != []


class TestInMemoryAlertStore:
    """Tests for InMemoryAlertStore."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_time(self) -> None:
        """Test stored alerts get an id and creation time."""
        store = InMemoryAlertStore()

        stored = await store.create_alert(_alert())

        assert stored.id is not None
        assert stored.created_at is not None
        assert not stored.read

    @pytest.mark.asyncio
    async def test_duplicate_id_fails(self) -> None:
        """Test storing an alert id twice is a collaborator error."""
        store = InMemoryAlertStore()
        await store.create_alert(_alert(id="a1"))

        with pytest.raises(CollaboratorError, match="a1"):
            await store.create_alert(_alert(id="a1"))

    @pytest.mark.asyncio
    async def test_list_newest_first_with_limit(self) -> None:
        """Test alerts are listed newest first."""
        store = InMemoryAlertStore()
        for hours in (3, 1, 2):
            await store.create_alert(
                _alert(id=f"a{hours}", created_at=NOW - timedelta(hours=hours))
            )

        alerts = await store.list_alerts(CLIENT_ID, limit=2)

        assert [alert.id for alert in alerts] == ["a1", "a2"]

    @pytest.mark.asyncio
    async def test_mark_read_and_unread_count(self) -> None:
        """Test marking read updates the unread count once."""
        store = InMemoryAlertStore()
        first = await store.create_alert(_alert())
        await store.create_alert(_alert())

        assert await store.unread_count(CLIENT_ID) == 2
        assert await store.mark_read([first.id, "missing"]) == 1
        assert await store.mark_read([first.id]) == 0
        assert await store.unread_count(CLIENT_ID) == 1

    @pytest.mark.asyncio
    async def test_recent_unread_alert(self) -> None:
        """Test the dedupe lookup matches rule, recency and read state."""
        store = InMemoryAlertStore()
        await store.create_alert(_alert(created_at=NOW - timedelta(minutes=30)))
        since = NOW - timedelta(minutes=60)

        assert await store.has_recent_unread_alert(CLIENT_ID, "r1", since)
        assert not await store.has_recent_unread_alert(CLIENT_ID, "r2", since)
        assert not await store.has_recent_unread_alert("client-other", "r1", since)
        assert not await store.has_recent_unread_alert(
            CLIENT_ID, "r1", NOW - timedelta(minutes=10)
        )
