"""Tests for notification handlers."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from radar_alerts.alerts.models import MetricKind, NotificationEvent, Severity
from radar_alerts.notifications.handlers import (
    ConsoleHandler,
    EmailHandler,
    WebhookHandler,
)


@pytest.fixture
def sample_event() -> NotificationEvent:
    """Create a critical hallucination notification."""
    return NotificationEvent(
        alert_id="alert-1",
        client_id="client-acme",
        severity=Severity.CRITICAL,
        metric=MetricKind.HALLUCINATIONS,
        message='[hallucination:h1] Critical risk on ChatGPT. Query: "<b>SSO</b>?".',
        created_at=datetime(2026, 10, 18, 12, 0, tzinfo=UTC),
    )


def _mock_session(status: int, text: str) -> MagicMock:
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.text = AsyncMock(return_value=text)

    mock_post = MagicMock()
    mock_post.__aenter__ = AsyncMock(return_value=mock_response)
    mock_post.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.post = MagicMock(return_value=mock_post)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


class TestConsoleHandler:
    """Tests for ConsoleHandler."""

    @pytest.mark.asyncio
    async def test_console_handler_sends_event(self, sample_event: NotificationEvent) -> None:
        """Test console handler logs the event successfully."""
        handler = ConsoleHandler()
        result = await handler.send(sample_event)

        assert result.success
        assert result.handler_name == "console"

    @pytest.mark.asyncio
    async def test_console_handler_disabled(self, sample_event: NotificationEvent) -> None:
        """Test disabled console handler does not send."""
        handler = ConsoleHandler(enabled=False)
        result = await handler.send(sample_event)

        assert not result.success
        assert "disabled" in result.message.lower()


class TestWebhookHandler:
    """Tests for WebhookHandler."""

    @pytest.mark.asyncio
    async def test_webhook_handler_disabled(self, sample_event: NotificationEvent) -> None:
        """Test disabled webhook handler does not send."""
        handler = WebhookHandler(url="https://hooks.example.com/alerts", enabled=False)
        result = await handler.send(sample_event)

        assert not result.success
        assert "disabled" in result.message.lower()

    @pytest.mark.asyncio
    async def test_webhook_handler_success(self, sample_event: NotificationEvent) -> None:
        """Test webhook handler posts the event payload."""
        handler = WebhookHandler(
            url="https://hooks.example.com/alerts",
            headers={"Authorization": "Bearer token"},
        )

        with patch(
            "radar_alerts.notifications.handlers.aiohttp.ClientSession"
        ) as mock_session_class:
            mock_session = _mock_session(200, '{"status": "ok"}')
            mock_session_class.return_value = mock_session

            result = await handler.send(sample_event)

            assert result.success
            assert result.details["status_code"] == 200
            _, kwargs = mock_session.post.call_args
            assert kwargs["json"] == sample_event.to_dict()
            assert kwargs["headers"]["Authorization"] == "Bearer token"

    @pytest.mark.asyncio
    async def test_webhook_handler_failure(self, sample_event: NotificationEvent) -> None:
        """Test webhook handler reports a non-2xx response."""
        handler = WebhookHandler(url="https://hooks.example.com/alerts")

        with patch(
            "radar_alerts.notifications.handlers.aiohttp.ClientSession"
        ) as mock_session_class:
            mock_session_class.return_value = _mock_session(500, "Internal Server Error")

            result = await handler.send(sample_event)

            assert not result.success
            assert result.details["status_code"] == 500

    @pytest.mark.asyncio
    async def test_webhook_handler_timeout(self, sample_event: NotificationEvent) -> None:
        """Test webhook handler handles timeout."""
        handler = WebhookHandler(url="https://hooks.example.com/alerts")

        with patch(
            "radar_alerts.notifications.handlers.aiohttp.ClientSession"
        ) as mock_session_class:
            mock_session = MagicMock()
            mock_session.post = MagicMock(side_effect=TimeoutError())
            mock_session.__aenter__ = AsyncMock(return_value=mock_session)
            mock_session.__aexit__ = AsyncMock(return_value=None)
            mock_session_class.return_value = mock_session

            result = await handler.send(sample_event)

            assert not result.success
            assert "timeout" in result.message.lower()

    @pytest.mark.asyncio
    async def test_webhook_handler_connection_error(
        self, sample_event: NotificationEvent
    ) -> None:
        """Test webhook handler handles connection errors."""
        handler = WebhookHandler(url="https://hooks.example.com/alerts")

        with patch(
            "radar_alerts.notifications.handlers.aiohttp.ClientSession"
        ) as mock_session_class:
            mock_session_class.side_effect = ConnectionError("refused")

            result = await handler.send(sample_event)

            assert not result.success
            assert "refused" in result.message


class TestEmailHandler:
    """Tests for EmailHandler."""

    def _handler(self, **kwargs) -> EmailHandler:
        return EmailHandler(
            smtp_host="smtp.example.com",
            smtp_port=587,
            username="alerts@example.com",
            password="secret",
            from_email="alerts@example.com",
            to_emails=kwargs.pop("to_emails", ["brand-team@example.com"]),
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_email_handler_disabled(self, sample_event: NotificationEvent) -> None:
        """Test disabled email handler does not send."""
        result = await self._handler(enabled=False).send(sample_event)

        assert not result.success
        assert "disabled" in result.message.lower()

    @pytest.mark.asyncio
    async def test_email_handler_no_recipients(self, sample_event: NotificationEvent) -> None:
        """Test email handler fails without recipients."""
        result = await self._handler(to_emails=[]).send(sample_event)

        assert not result.success
        assert "recipients" in result.message.lower()

    @pytest.mark.asyncio
    async def test_email_handler_success(self, sample_event: NotificationEvent) -> None:
        """Test email handler sends one message to the configured server."""
        handler = self._handler()

        with patch(
            "radar_alerts.notifications.handlers.aiosmtplib.send", new_callable=AsyncMock
        ) as mock_send:
            result = await handler.send(sample_event)

            assert result.success
            mock_send.assert_awaited_once()
            msg = mock_send.call_args.args[0]
            kwargs = mock_send.call_args.kwargs
            assert msg["Subject"] == "[CRITICAL] hallucinations alert - client-acme"
            assert msg["To"] == "brand-team@example.com"
            assert kwargs["hostname"] == "smtp.example.com"
            assert kwargs["start_tls"] is True

    @pytest.mark.asyncio
    async def test_email_handler_smtp_failure(self, sample_event: NotificationEvent) -> None:
        """Test email handler reports SMTP errors."""
        handler = self._handler()

        with patch(
            "radar_alerts.notifications.handlers.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=OSError("connection refused"),
        ):
            result = await handler.send(sample_event)

            assert not result.success
            assert "connection refused" in result.message

    def test_html_content_escapes_message(self, sample_event: NotificationEvent) -> None:
        """Test user-provided text is escaped in the HTML body."""
        content = self._handler()._build_html_content(sample_event)

        assert "&lt;b&gt;SSO&lt;/b&gt;" in content
        assert "<b>SSO</b>" not in content
