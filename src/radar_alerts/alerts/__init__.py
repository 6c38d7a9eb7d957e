"""Alert System - rule evaluation and hallucination alerts.

This module provides the decision logic for brand-monitoring alerts:
- Condition evaluation and severity classification
- Rule runs and persisted evaluation cycles
- Critical hallucination sweeps and correction records
"""

from radar_alerts.alerts.conditions import evaluate_condition, percent_change
from radar_alerts.alerts.engine import evaluate_alert_rules, run_rules
from radar_alerts.alerts.hallucinations import (
    parse_correction_notes,
    record_hallucination_correction,
    run_critical_hallucination_sweep,
)
from radar_alerts.alerts.models import (
    Alert,
    AlertEvent,
    AlertRule,
    ConditionKind,
    EvaluationSummary,
    HallucinationCase,
    HallucinationRiskLevel,
    HallucinationStatus,
    MetricKind,
    MetricSnapshot,
    NotificationEvent,
    Severity,
    SweepResult,
)
from radar_alerts.alerts.schemas import AlertRuleCreate, build_rule
from radar_alerts.alerts.severity import classify_severity
from radar_alerts.alerts.windows import METRIC_WINDOWS, comparison_window

__all__ = [
    "METRIC_WINDOWS",
    "Alert",
    "AlertEvent",
    "AlertRule",
    "AlertRuleCreate",
    "ConditionKind",
    "EvaluationSummary",
    "HallucinationCase",
    "HallucinationRiskLevel",
    "HallucinationStatus",
    "MetricKind",
    "MetricSnapshot",
    "NotificationEvent",
    "Severity",
    "SweepResult",
    "build_rule",
    "classify_severity",
    "comparison_window",
    "evaluate_alert_rules",
    "evaluate_condition",
    "parse_correction_notes",
    "percent_change",
    "record_hallucination_correction",
    "run_critical_hallucination_sweep",
    "run_rules",
]
