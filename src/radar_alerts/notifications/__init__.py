"""Notification delivery - handlers and dispatcher for alert notifications."""

from radar_alerts.notifications.dispatcher import NotificationDispatcher, build_dispatcher
from radar_alerts.notifications.handlers import (
    ConsoleHandler,
    EmailHandler,
    HandlerResult,
    NotificationHandler,
    WebhookHandler,
)

__all__ = [
    "ConsoleHandler",
    "EmailHandler",
    "HandlerResult",
    "NotificationDispatcher",
    "NotificationHandler",
    "WebhookHandler",
    "build_dispatcher",
]
