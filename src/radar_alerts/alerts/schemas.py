"""Pydantic schemas for validating untrusted alert rule input."""

import math
import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from radar_alerts.alerts.models import AlertRule, ConditionKind, MetricKind
from radar_alerts.core.exceptions import InvalidRuleError


class AlertRuleCreate(BaseModel):
    """Schema for creating an alert rule."""

    client_id: str = Field(..., description="Client that owns the rule")
    name: str = Field(..., max_length=200, description="Display name, used as alert title")
    metric: MetricKind = Field(..., description="Metric the rule watches")
    condition: ConditionKind = Field(..., description="Condition applied to the metric")
    threshold: float = Field(..., description="Threshold value or percent-change magnitude")
    enabled: bool = Field(default=True, description="Disabled rules are skipped")

    @field_validator("client_id", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("threshold")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @model_validator(mode="after")
    def _percent_threshold(self) -> "AlertRuleCreate":
        if self.condition == ConditionKind.CHANGES_BY and self.threshold < 0:
            raise ValueError("changes_by threshold must be a non-negative percentage")
        return self


class AlertRuleResponse(BaseModel):
    """Schema for an alert rule response."""

    id: str
    client_id: str
    name: str
    metric: MetricKind
    condition: ConditionKind
    threshold: float
    enabled: bool
    created_at: datetime | None = None


def build_rule(data: dict[str, Any] | AlertRuleCreate, rule_id: str | None = None) -> AlertRule:
    """Validate rule input and build an AlertRule.

    Args:
        data: Raw rule fields or an already-parsed schema.
        rule_id: Identifier to assign. A UUID is generated when omitted.

    Returns:
        Validated AlertRule.

    Raises:
        InvalidRuleError: If the input is malformed.
    """
    if isinstance(data, AlertRuleCreate):
        payload = data
    else:
        try:
            payload = AlertRuleCreate.model_validate(data)
        except ValidationError as e:
            raise InvalidRuleError(f"Invalid alert rule: {e}") from e

    return AlertRule(
        id=rule_id or str(uuid.uuid4()),
        client_id=payload.client_id,
        name=payload.name,
        metric=payload.metric,
        condition=payload.condition,
        threshold=payload.threshold,
        enabled=payload.enabled,
        created_at=datetime.now(UTC),
    )
