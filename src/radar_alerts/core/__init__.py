"""Core module for radar-alerts.

This module provides core functionality including:
- Configuration management (Settings, get_settings)
- Custom exceptions (RadarAlertsError and subclasses)
- Protocol definitions for the storage and delivery collaborators
- Logging utilities
"""

from radar_alerts.core.config import Settings, get_settings
from radar_alerts.core.exceptions import (
    CollaboratorError,
    ConfigurationError,
    InvalidRuleError,
    InvalidSnapshotError,
    RadarAlertsError,
)
from radar_alerts.core.logging import bind_client_context, get_logger
from radar_alerts.core.protocols import (
    AlertStoreProtocol,
    CaseProviderProtocol,
    MetricsProviderProtocol,
    NotifierProtocol,
)

__all__ = [
    "AlertStoreProtocol",
    "CaseProviderProtocol",
    "CollaboratorError",
    "ConfigurationError",
    "InvalidRuleError",
    "InvalidSnapshotError",
    "MetricsProviderProtocol",
    "NotifierProtocol",
    "RadarAlertsError",
    "Settings",
    "bind_client_context",
    "get_logger",
    "get_settings",
]
