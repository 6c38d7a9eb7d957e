"""HTTP API for radar-alerts."""

from radar_alerts.api.routes import router

__all__ = ["router"]
