"""Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from radar_alerts.alerts.models import (
    HallucinationRiskLevel,
    HallucinationStatus,
    MetricKind,
    Severity,
)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Service status")
    notification_handlers: int = Field(..., description="Number of configured handlers")


class AlertItem(BaseModel):
    """Single alert."""

    id: str | None = Field(default=None, description="Alert ID")
    client_id: str = Field(..., description="Owning client")
    rule_id: str | None = Field(default=None, description="Rule that fired, null for system alerts")
    severity: Severity = Field(..., description="Severity tier")
    metric: MetricKind = Field(..., description="Metric the alert is about")
    title: str = Field(..., description="Alert title")
    message: str = Field(..., description="Alert message")
    read: bool = Field(..., description="Whether the alert has been read")
    created_at: datetime | None = Field(default=None, description="Creation time")


class AlertListResponse(BaseModel):
    """Response model for a client's alerts."""

    alerts: list[AlertItem] = Field(..., description="Alerts, newest first")
    unread_count: int = Field(..., ge=0, description="Number of unread alerts")


class EvaluationResponse(BaseModel):
    """Response model for a rule evaluation cycle."""

    ok: bool = Field(default=True, description="Whether the cycle ran")
    evaluated: int = Field(..., ge=0, description="Enabled rules evaluated")
    created: int = Field(..., ge=0, description="Alerts created")
    skipped_duplicates: int = Field(..., ge=0, description="Fired rules with a recent alert")
    failed: int = Field(..., ge=0, description="Alerts that could not be stored")


class SweepResponse(BaseModel):
    """Response model for a hallucination sweep."""

    ok: bool = Field(default=True, description="Whether the sweep ran")
    created: int = Field(..., ge=0, description="Critical alerts created")
    notifications_sent: int = Field(..., ge=0, description="Notifications delivered")


class HallucinationItem(BaseModel):
    """Single hallucination case."""

    id: str = Field(..., description="Case ID")
    client_id: str = Field(..., description="Owning client")
    platform: str | None = Field(default=None, description="AI platform that produced it")
    query: str = Field(..., description="Query that triggered the hallucination")
    risk_level: HallucinationRiskLevel = Field(..., description="Assessed risk")
    status: HallucinationStatus = Field(..., description="Workflow status")
    detected_at: datetime = Field(..., description="Detection time")
    resolved_at: datetime | None = Field(default=None, description="Resolution time")
    has_alert: bool = Field(..., description="Whether a critical alert was created")
    correction_note: str | None = Field(
        default=None, description="Latest correction note, if the case was corrected"
    )


class CorrectionRequest(BaseModel):
    """Request model for marking a hallucination corrected."""

    note: str = Field(default="", max_length=2000, description="Correction note")


class ErrorResponse(BaseModel):
    """Response model for errors."""

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")


class MarkReadRequest(BaseModel):
    """Request model for marking alerts as read."""

    alert_ids: list[str] = Field(..., min_length=1, description="Alerts to mark as read")


class MarkReadResponse(BaseModel):
    """Response model for marking alerts as read."""

    ok: bool = Field(default=True, description="Whether the update ran")
    updated: int = Field(..., ge=0, description="Alerts that changed from unread to read")
