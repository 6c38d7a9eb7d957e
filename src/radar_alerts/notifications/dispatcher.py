"""Notification Dispatcher - fan notification events out to handlers."""

import asyncio
import logging
from typing import Any

from radar_alerts.alerts.models import NotificationEvent, Severity
from radar_alerts.core.config import Settings
from radar_alerts.core.exceptions import ConfigurationError
from radar_alerts.notifications.handlers import (
    ConsoleHandler,
    EmailHandler,
    HandlerResult,
    NotificationHandler,
    WebhookHandler,
)

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Dispatch notification events to multiple handlers.

    Implements the notifier contract used by the hallucination sweep:
    ``send`` returns True when at least one handler delivered the event.

    Example:
        >>> dispatcher = NotificationDispatcher()
        >>> dispatcher.add_handler(WebhookHandler(url="..."))
        >>> dispatcher.add_handler(ConsoleHandler())
        >>> delivered = await dispatcher.send(event)
    """

    def __init__(self, min_severity: Severity = Severity.INFO) -> None:
        """Initialize the dispatcher.

        Args:
            min_severity: Events below this severity are not delivered.
        """
        self.min_severity = min_severity
        self._handlers: list[NotificationHandler] = []

    def add_handler(self, handler: NotificationHandler) -> None:
        """Add a handler to the dispatcher.

        Args:
            handler: Handler to add.
        """
        self._handlers.append(handler)
        logger.info(f"Added notification handler: {handler.name}")

    def remove_handler(self, handler_name: str) -> bool:
        """Remove a handler by name.

        Args:
            handler_name: Name of the handler to remove.

        Returns:
            True if handler was removed, False if not found.
        """
        for i, handler in enumerate(self._handlers):
            if handler.name == handler_name:
                self._handlers.pop(i)
                logger.info(f"Removed notification handler: {handler_name}")
                return True
        return False

    async def dispatch(self, event: NotificationEvent) -> list[HandlerResult]:
        """Dispatch an event to all enabled handlers.

        Args:
            event: Event to dispatch.

        Returns:
            List of HandlerResults from all enabled handlers.
        """
        if event.severity < self.min_severity:
            logger.debug(f"Notification {event.alert_id} below {self.min_severity.value}")
            return []

        handlers = [handler for handler in self._handlers if handler.enabled]
        if not handlers:
            logger.warning("No handlers configured for notification dispatch")
            return []

        results = await asyncio.gather(
            *(handler.send(event) for handler in handlers),
            return_exceptions=True,
        )

        processed_results: list[HandlerResult] = []
        for handler, result in zip(handlers, results, strict=True):
            if isinstance(result, BaseException):
                processed_results.append(
                    HandlerResult(
                        success=False,
                        handler_name=handler.name,
                        message=f"Handler error: {result!s}",
                    )
                )
            else:
                processed_results.append(result)

        return processed_results

    async def send(self, event: NotificationEvent) -> bool:
        """Deliver an event.

        Args:
            event: Event to deliver.

        Returns:
            True if at least one handler succeeded.
        """
        results = await self.dispatch(event)
        for result in results:
            if not result.success:
                logger.warning(
                    f"Handler {result.handler_name} failed for alert {event.alert_id}: "
                    f"{result.message}"
                )
        return any(result.success for result in results)

    def list_handlers(self) -> list[dict[str, Any]]:
        """List all registered handlers.

        Returns:
            List of handler information dictionaries.
        """
        return [
            {
                "name": handler.name,
                "enabled": handler.enabled,
                "type": handler.__class__.__name__,
            }
            for handler in self._handlers
        ]


def build_dispatcher(settings: Settings) -> NotificationDispatcher:
    """Create a dispatcher with the handlers enabled in settings.

    Args:
        settings: Application settings.

    Returns:
        Configured NotificationDispatcher.

    Raises:
        ConfigurationError: If SMTP is configured without sender or recipients.
    """
    dispatcher = NotificationDispatcher(min_severity=Severity(settings.notification_min_severity))

    if settings.console_notifications:
        dispatcher.add_handler(ConsoleHandler())

    if settings.webhook_url:
        dispatcher.add_handler(
            WebhookHandler(url=settings.webhook_url, timeout=settings.webhook_timeout_seconds)
        )

    if settings.smtp_host:
        if not settings.alert_from_email or not settings.alert_recipients:
            raise ConfigurationError(
                "SMTP notifications need alert_from_email and alert_recipients"
            )
        dispatcher.add_handler(
            EmailHandler(
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                from_email=settings.alert_from_email,
                to_emails=settings.alert_recipients,
                use_tls=settings.smtp_use_tls,
            )
        )

    return dispatcher
