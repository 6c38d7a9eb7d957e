"""API routes for radar-alerts."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, status
from prometheus_client import Counter

from radar_alerts.alerts.models import Alert
from radar_alerts.alerts.schemas import AlertRuleResponse
from radar_alerts.api.schemas import (
    AlertItem,
    AlertListResponse,
    CorrectionRequest,
    ErrorResponse,
    EvaluationResponse,
    HallucinationItem,
    HealthResponse,
    MarkReadRequest,
    MarkReadResponse,
    SweepResponse,
)
from radar_alerts.core.exceptions import InvalidRuleError
from radar_alerts.services.alert_service import get_alert_service

API_REQUESTS = Counter(
    "radar_api_requests_total",
    "Total number of API requests",
    ["endpoint", "status"],
)

router = APIRouter()


def _alert_item(alert: Alert) -> AlertItem:
    return AlertItem(
        id=alert.id,
        client_id=alert.client_id,
        rule_id=alert.rule_id,
        severity=alert.severity,
        metric=alert.metric,
        title=alert.title,
        message=alert.message,
        read=alert.read,
        created_at=alert.created_at,
    )


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check() -> HealthResponse:
    """Check service health status."""
    service = get_alert_service()
    return HealthResponse(
        status="healthy",
        notification_handlers=len(service.list_notification_handlers()),
    )


@router.post(
    "/clients/{client_id}/alert-rules",
    response_model=AlertRuleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    tags=["rules"],
)
async def create_alert_rule(
    client_id: str,
    payload: dict[str, Any] = Body(...),  # noqa: B008
) -> AlertRuleResponse:
    """Create an alert rule for a client.

    The body is validated by the rule schema so malformed rules are rejected
    with the same error whether they arrive over HTTP or in-process.
    """
    service = get_alert_service()
    try:
        rule = service.create_rule({**payload, "client_id": client_id})
    except InvalidRuleError as e:
        API_REQUESTS.labels(endpoint="create_rule", status="invalid").inc()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        ) from e

    API_REQUESTS.labels(endpoint="create_rule", status="success").inc()
    return AlertRuleResponse(**rule.to_dict())


@router.get(
    "/clients/{client_id}/alert-rules",
    response_model=list[AlertRuleResponse],
    tags=["rules"],
)
async def list_alert_rules(client_id: str) -> list[AlertRuleResponse]:
    """List a client's alert rules."""
    service = get_alert_service()
    return [AlertRuleResponse(**rule.to_dict()) for rule in service.list_rules(client_id)]


@router.get("/clients/{client_id}/alerts", response_model=AlertListResponse, tags=["alerts"])
async def list_alerts(client_id: str, limit: int = 120) -> AlertListResponse:
    """List a client's alerts, newest first."""
    service = get_alert_service()
    alerts, unread = await service.list_alerts(client_id, limit=limit)
    return AlertListResponse(alerts=[_alert_item(a) for a in alerts], unread_count=unread)


@router.post(
    "/clients/{client_id}/alerts/evaluate",
    response_model=EvaluationResponse,
    tags=["alerts"],
)
async def evaluate_alert_rules(client_id: str) -> EvaluationResponse:
    """Evaluate a client's enabled rules and store new alerts."""
    service = get_alert_service()
    summary = await service.evaluate(client_id)
    API_REQUESTS.labels(endpoint="evaluate", status="success").inc()
    return EvaluationResponse(
        evaluated=summary.evaluated,
        created=summary.created,
        skipped_duplicates=summary.skipped_duplicates,
        failed=summary.failed,
    )


@router.post(
    "/clients/{client_id}/hallucinations/sweep",
    response_model=SweepResponse,
    tags=["hallucinations"],
)
async def run_hallucination_sweep(client_id: str) -> SweepResponse:
    """Create critical alerts for a client's unalerted critical hallucinations."""
    service = get_alert_service()
    result = await service.sweep(client_id)
    API_REQUESTS.labels(endpoint="sweep", status="success").inc()
    return SweepResponse(created=result.created, notifications_sent=result.notifications_sent)


@router.get(
    "/clients/{client_id}/hallucinations",
    response_model=list[HallucinationItem],
    tags=["hallucinations"],
)
async def list_hallucinations(client_id: str) -> list[HallucinationItem]:
    """List a client's hallucination cases with correction notes, highest risk first."""
    service = get_alert_service()
    cases = await service.list_cases(client_id)
    return [
        HallucinationItem(
            id=case.id,
            client_id=case.client_id,
            platform=case.platform,
            query=case.query,
            risk_level=case.risk_level,
            status=case.status,
            detected_at=case.detected_at,
            resolved_at=case.resolved_at,
            has_alert=case.has_alert,
            correction_note=note,
        )
        for case, note in cases
    ]


@router.post(
    "/hallucinations/{case_id}/correct",
    response_model=AlertItem,
    responses={404: {"model": ErrorResponse}},
    tags=["hallucinations"],
)
async def correct_hallucination(case_id: str, request: CorrectionRequest) -> AlertItem:
    """Mark a hallucination corrected and record the correction note."""
    service = get_alert_service()
    alert = await service.correct_case(case_id, request.note)
    if alert is None:
        API_REQUESTS.labels(endpoint="correct", status="not_found").inc()
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Hallucination record not found",
        )
    API_REQUESTS.labels(endpoint="correct", status="success").inc()
    return _alert_item(alert)


@router.post("/alerts/read", response_model=MarkReadResponse, tags=["alerts"])
async def mark_alerts_read(request: MarkReadRequest) -> MarkReadResponse:
    """Mark alerts as read."""
    service = get_alert_service()
    updated = await service.alert_store.mark_read(request.alert_ids)
    return MarkReadResponse(updated=updated)
