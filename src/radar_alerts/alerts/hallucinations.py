"""Hallucination Alert Pipeline - critical hallucination sweeps.

A sweep turns every open critical-risk hallucination case without an
alert into exactly one critical alert and one notification. The case is
claimed with a conditional mark before the alert is written, so a second
sweep (sequential or concurrent) finds nothing left to alert on.
"""

import re

from radar_alerts.alerts.models import (
    Alert,
    HallucinationCase,
    HallucinationRiskLevel,
    MetricKind,
    NotificationEvent,
    Severity,
    SweepResult,
)
from radar_alerts.core.logging import bind_client_context, get_logger
from radar_alerts.core.protocols import (
    AlertStoreProtocol,
    CaseProviderProtocol,
    NotifierProtocol,
)
from radar_alerts.metrics import ALERTS_CREATED, COLLABORATOR_FAILURES, NOTIFICATIONS

logger = get_logger(__name__)

CRITICAL_ALERT_TITLE = "Critical hallucination detected"
CORRECTED_ALERT_TITLE = "Hallucination corrected"
UNKNOWN_PLATFORM = "Unknown platform"

_CASE_TAG = re.compile(r"\[hallucination:([^\]]+)\]", re.IGNORECASE)
_CORRECTION_NOTE = re.compile(r"Correction note:\s*(.+)$", re.IGNORECASE)


def case_tag(case_id: str) -> str:
    """Tag that links an alert message to a hallucination case."""
    return f"[hallucination:{case_id}]"


def critical_case_message(case: HallucinationCase) -> str:
    """Alert message for a critical hallucination case."""
    platform = case.platform or UNKNOWN_PLATFORM
    return f'{case_tag(case.id)} Critical risk on {platform}. Query: "{case.query}".'


def _qualifies(case: HallucinationCase, client_id: str) -> bool:
    return (
        case.client_id == client_id
        and case.risk_level == HallucinationRiskLevel.CRITICAL
        and case.is_open
        and not case.has_alert
    )


async def run_critical_hallucination_sweep(
    client_id: str,
    case_provider: CaseProviderProtocol,
    alert_store: AlertStoreProtocol,
    notifier: NotifierProtocol,
) -> SweepResult:
    """Create critical alerts for a client's unalerted critical cases.

    Cases are processed one at a time, oldest first. For each case the
    conditional mark is taken first; a failed mark means another sweep
    already handled it and the case is skipped. Notifications are best
    effort: a delivery failure never removes the stored alert, it only
    lowers ``notifications_sent`` below ``created``.

    Args:
        client_id: Client to sweep.
        case_provider: Hallucination case source with conditional mark.
        alert_store: Alert persistence.
        notifier: Notification delivery.

    Returns:
        SweepResult with the number of alerts created and notifications sent.
    """
    with bind_client_context(client_id, operation="hallucination_sweep"):
        result = SweepResult()

        try:
            cases = await case_provider.list_unalerted_critical_cases(client_id)
        except Exception as e:
            COLLABORATOR_FAILURES.labels(component="case_provider").inc()
            logger.error("case_provider_failed", error=str(e))
            return result

        qualifying = sorted(
            (case for case in cases if _qualifies(case, client_id)),
            key=lambda case: (case.detected_at, case.id),
        )

        for case in qualifying:
            try:
                claimed = await case_provider.mark_alerted(case.id)
            except Exception as e:
                COLLABORATOR_FAILURES.labels(component="case_provider").inc()
                logger.warning("case_mark_failed", case_id=case.id, error=str(e))
                continue

            if not claimed:
                logger.debug("case_already_alerted", case_id=case.id)
                continue

            try:
                alert = await alert_store.create_alert(
                    Alert(
                        client_id=client_id,
                        rule_id=None,
                        severity=Severity.CRITICAL,
                        metric=MetricKind.HALLUCINATIONS,
                        title=CRITICAL_ALERT_TITLE,
                        message=critical_case_message(case),
                    )
                )
            except Exception as e:
                # The case stays marked; it needs a manual alert.
                COLLABORATOR_FAILURES.labels(component="alert_store").inc()
                logger.error(
                    "hallucination_alert_create_failed",
                    case_id=case.id,
                    error=str(e),
                )
                continue

            result.created += 1
            ALERTS_CREATED.labels(source="hallucination", severity=Severity.CRITICAL.value).inc()

            if await _notify(notifier, NotificationEvent.from_alert(alert)):
                result.notifications_sent += 1

        logger.info(
            "hallucination_sweep_complete",
            candidates=len(qualifying),
            created=result.created,
            notifications_sent=result.notifications_sent,
        )
        return result


async def _notify(notifier: NotifierProtocol, event: NotificationEvent) -> bool:
    try:
        sent = await notifier.send(event)
    except Exception as e:
        COLLABORATOR_FAILURES.labels(component="notifier").inc()
        logger.warning("notification_failed", alert_id=event.alert_id, error=str(e))
        sent = False

    if sent:
        NOTIFICATIONS.labels(outcome="sent").inc()
    else:
        NOTIFICATIONS.labels(outcome="failed").inc()
        logger.warning("notification_not_delivered", alert_id=event.alert_id)
    return sent


async def record_hallucination_correction(
    case: HallucinationCase,
    note: str,
    alert_store: AlertStoreProtocol,
) -> Alert:
    """Store the info alert that records a corrected hallucination.

    Args:
        case: The corrected case.
        note: Free-text correction note; may be empty.
        alert_store: Alert persistence.

    Returns:
        The stored alert.
    """
    clean_note = note.strip()
    message = f"{case_tag(case.id)} Marked as corrected."
    if clean_note:
        message = f"{message} Correction note: {clean_note}"

    alert = await alert_store.create_alert(
        Alert(
            client_id=case.client_id,
            rule_id=None,
            severity=Severity.INFO,
            metric=MetricKind.HALLUCINATIONS,
            title=CORRECTED_ALERT_TITLE,
            message=message,
        )
    )
    ALERTS_CREATED.labels(source="correction", severity=Severity.INFO.value).inc()
    return alert


def parse_correction_notes(messages: list[str | None]) -> dict[str, str]:
    """Recover correction notes from alert messages.

    Only the first note per case is kept, so pass messages newest first to
    get the latest note.

    Args:
        messages: Alert messages.

    Returns:
        Mapping of case id to correction note.
    """
    notes: dict[str, str] = {}
    for message in messages:
        message = message or ""
        tag = _CASE_TAG.search(message)
        if not tag:
            continue
        note = _CORRECTION_NOTE.search(message)
        if not note:
            continue

        case_id = tag.group(1).strip()
        if case_id and case_id not in notes:
            notes[case_id] = note.group(1).strip()
    return notes
