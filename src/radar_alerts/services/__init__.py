"""Application services."""

from radar_alerts.services.alert_service import AlertService, get_alert_service

__all__ = ["AlertService", "get_alert_service"]
