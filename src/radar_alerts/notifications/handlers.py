"""Notification Handlers - deliver notification events to channels.

This module provides handlers for the notification channels:
- Console logging (for development)
- Webhook (generic HTTP POST)
- Email via SMTP
"""

import html
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

import aiohttp
import aiosmtplib

from radar_alerts.alerts.models import NotificationEvent, Severity

logger = logging.getLogger(__name__)


@dataclass
class HandlerResult:
    """Result of notification handler execution."""

    success: bool
    handler_name: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    details: dict[str, Any] = field(default_factory=dict)


class NotificationHandler(ABC):
    """Abstract base class for notification handlers."""

    def __init__(self, name: str, enabled: bool = True) -> None:
        """Initialize the handler.

        Args:
            name: Handler name.
            enabled: Whether the handler is enabled.
        """
        self.name = name
        self.enabled = enabled

    @abstractmethod
    async def send(self, event: NotificationEvent) -> HandlerResult:
        """Send a notification event.

        Args:
            event: Event to send.

        Returns:
            HandlerResult indicating success or failure.
        """
        pass

    def _disabled(self) -> HandlerResult:
        return HandlerResult(
            success=False,
            handler_name=self.name,
            message="Handler is disabled",
        )


class ConsoleHandler(NotificationHandler):
    """Console logging handler for development and debugging.

    Example:
        >>> handler = ConsoleHandler()
        >>> await handler.send(event)
    """

    def __init__(self, enabled: bool = True) -> None:
        """Initialize the console handler."""
        super().__init__("console", enabled)

    async def send(self, event: NotificationEvent) -> HandlerResult:
        """Log the event to the console.

        Args:
            event: Event to log.

        Returns:
            HandlerResult.
        """
        if not self.enabled:
            return self._disabled()

        log_message = (
            f"[{event.severity.value.upper()}] {event.metric.value}: {event.message} "
            f"(client: {event.client_id}, alert: {event.alert_id})"
        )

        if event.severity == Severity.CRITICAL:
            logger.error(log_message)
        elif event.severity == Severity.WARNING:
            logger.warning(log_message)
        else:
            logger.info(log_message)

        return HandlerResult(
            success=True,
            handler_name=self.name,
            message="Notification logged to console",
        )


class WebhookHandler(NotificationHandler):
    """Generic webhook handler for HTTP POST notifications.

    Example:
        >>> handler = WebhookHandler(
        ...     url="https://hooks.example.com/brand-alerts",
        ...     headers={"Authorization": "Bearer token"},
        ... )
        >>> await handler.send(event)
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: int = 10,
        enabled: bool = True,
    ) -> None:
        """Initialize the webhook handler.

        Args:
            url: Webhook URL.
            headers: Optional HTTP headers.
            timeout: Request timeout in seconds.
            enabled: Whether the handler is enabled.
        """
        super().__init__("webhook", enabled)
        self.url = url
        self.headers = headers or {}
        self.timeout = timeout

    async def send(self, event: NotificationEvent) -> HandlerResult:
        """Send the event via webhook.

        Args:
            event: Event to send.

        Returns:
            HandlerResult indicating success or failure.
        """
        if not self.enabled:
            return self._disabled()

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.url,
                    json=event.to_dict(),
                    headers={
                        "Content-Type": "application/json",
                        **self.headers,
                    },
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    response_text = await response.text()
                    success = 200 <= response.status < 300

                    return HandlerResult(
                        success=success,
                        handler_name=self.name,
                        message=f"Webhook {'succeeded' if success else 'failed'}",
                        details={
                            "status_code": response.status,
                            "response": response_text[:200],
                        },
                    )
        except TimeoutError:
            return HandlerResult(
                success=False,
                handler_name=self.name,
                message="Webhook timeout",
            )
        except Exception as e:
            logger.exception(f"Failed to send webhook: {e}")
            return HandlerResult(
                success=False,
                handler_name=self.name,
                message=f"Failed to send: {e!s}",
            )


class EmailHandler(NotificationHandler):
    """Email handler using SMTP.

    Example:
        >>> handler = EmailHandler(
        ...     smtp_host="smtp.example.com",
        ...     smtp_port=587,
        ...     username="alerts@example.com",
        ...     password="app_password",
        ...     from_email="alerts@example.com",
        ...     to_emails=["brand-team@example.com"],
        ... )
        >>> await handler.send(event)
    """

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: str | None,
        password: str | None,
        from_email: str,
        to_emails: list[str],
        use_tls: bool = True,
        enabled: bool = True,
    ) -> None:
        """Initialize the email handler.

        Args:
            smtp_host: SMTP server host.
            smtp_port: SMTP server port.
            username: SMTP username.
            password: SMTP password.
            from_email: Sender email address.
            to_emails: List of recipient email addresses.
            use_tls: Whether to use STARTTLS.
            enabled: Whether the handler is enabled.
        """
        super().__init__("email", enabled)
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.to_emails = to_emails
        self.use_tls = use_tls

    async def send(self, event: NotificationEvent) -> HandlerResult:
        """Send the event via email.

        Args:
            event: Event to send.

        Returns:
            HandlerResult indicating success or failure.
        """
        if not self.enabled:
            return self._disabled()

        if not self.to_emails:
            return HandlerResult(
                success=False,
                handler_name=self.name,
                message="No recipients configured",
            )

        msg = MIMEMultipart("alternative")
        msg["Subject"] = self._build_subject(event)
        msg["From"] = self.from_email
        msg["To"] = ", ".join(self.to_emails)
        msg.attach(MIMEText(self._build_text_content(event), "plain"))
        msg.attach(MIMEText(self._build_html_content(event), "html"))

        try:
            await aiosmtplib.send(
                msg,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.username,
                password=self.password,
                start_tls=self.use_tls,
            )
        except Exception as e:
            logger.exception(f"Failed to send email notification: {e}")
            return HandlerResult(
                success=False,
                handler_name=self.name,
                message=f"Failed to send email: {e!s}",
            )

        return HandlerResult(
            success=True,
            handler_name=self.name,
            message=f"Notification email sent to {len(self.to_emails)} recipients",
        )

    def _build_subject(self, event: NotificationEvent) -> str:
        """Build email subject.

        Args:
            event: Notification event.

        Returns:
            Email subject string.
        """
        return f"[{event.severity.value.upper()}] {event.metric.value} alert - {event.client_id}"

    def _build_text_content(self, event: NotificationEvent) -> str:
        return f"""
Brand Monitoring Alert

Severity: {event.severity.value.upper()}
Metric: {event.metric.value}
Client: {event.client_id}

Message: {event.message}

Alert ID: {event.alert_id}
Timestamp: {event.created_at.isoformat()}
"""

    def _build_html_content(self, event: NotificationEvent) -> str:
        severity_colors = {
            Severity.INFO: "#28a745",
            Severity.WARNING: "#ffc107",
            Severity.CRITICAL: "#dc3545",
        }
        color = severity_colors.get(event.severity, "#6c757d")
        message = html.escape(event.message)

        return f"""
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif;">
    <div style="border: 2px solid {color}; border-radius: 8px; padding: 20px; max-width: 600px;">
        <div style="background-color: {color}; color: white; padding: 10px; border-radius: 4px;">
            <h2>{event.metric.value} alert</h2>
            <span>{event.severity.value.upper()}</span>
        </div>
        <p><strong>Message:</strong> {message}</p>
        <p><strong>Client:</strong> {event.client_id}</p>
        <p style="color: #6c757d; font-size: 12px;">
            Alert {event.alert_id} at {event.created_at.isoformat()}
        </p>
    </div>
</body>
</html>
"""
