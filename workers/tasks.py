# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background tasks for medication reminders.
#
# Tasks:
# - dispatch_due_reminders: Periodic scan (celery beat) that notifies owners
#   of due reminders and schedules the next dose
# - send_push_notification: Push one message through the FCM relay
# =============================================================================

import logging
from datetime import datetime
from typing import Any

from celery import shared_task

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


def reminder_message(reminder: dict[str, Any]) -> tuple[str, str]:
    """Title and body for a reminder notification."""
    name = reminder.get("medicineName") or "your medicine"
    dosage = reminder.get("dosage")
    body = f"Time to take {name}" + (f" ({dosage})" if dosage else "")
    return "Medication Reminder", body


class PushDeliveryError(ApplicationError):
    """FCM (or the network in front of it) refused a push."""

    def __init__(self, status: int, payload: Any):
        super().__init__(
            message=f"FCM relay answered {status}",
            code="PUSH_DELIVERY_FAILED",
            suggestion="Check FIREBASE_SERVER_KEY and that FCM is reachable",
            details={"response": payload},
        )


@shared_task(
    bind=True,
    name="workers.tasks.send_push_notification",
    max_retries=3,
    default_retry_delay=30,
)
def send_push_notification(self, token: str, title: str, body: str) -> dict[str, Any]:
    """
    Push one notification through FCM.

    A non-200 from the relay is retried (3 times, 30s apart) before the
    task fails.

    Returns:
        Dict with success flag, status and FCM's response body

    Raises:
        PushDeliveryError: When FCM still refuses after the last retry
    """
    from core.services.notification_service import relay_push

    status, payload = relay_push(token, title, body)
    if status != 200:
        logger.warning(f"Push to {token[:12]}... failed (attempt {self.request.retries + 1}): {payload}")
        raise self.retry(exc=PushDeliveryError(status, payload))
    return {"success": True, "status": status, "response": payload}


@shared_task(bind=True, name="workers.tasks.dispatch_due_reminders")
def dispatch_due_reminders(self) -> dict[str, Any]:
    """
    Notify users whose reminders are due and advance each reminder.

    For every active reminder whose nextDose has arrived (and whose
    endDate hasn't passed):
    1. Store the recomputed nextDose
    2. Write an in-app notification for the owner
    3. Queue a push notification if the owner registered an FCM token

    A reminder whose schedule can't be computed is counted as failed
    before anything is written for it.
    Each reminder is handled independently; one failure doesn't stop the
    rest of the scan.

    Returns:
        Dict with counts of dispatched, pushed and failed reminders
    """
    from app.exceptions import MediCheckerException
    from core.services.notification_service import NotificationService
    from core.services.reminder_service import ReminderService
    from lib.firestore_client import FirestoreClient, USERS_COLLECTION

    now = datetime.now()
    due = ReminderService.due_reminders(now)
    logger.info(f"{len(due)} reminder(s) due at {now.isoformat(timespec='minutes')}")

    dispatched = pushed = failed = 0
    for reminder in due:
        try:
            ReminderService.advance_reminder(reminder, now)

            title, body = reminder_message(reminder)
            NotificationService.create_notification(reminder["userId"], title, body, type="reminder")
            dispatched += 1

            owner = FirestoreClient.fetch_document(USERS_COLLECTION, reminder["userId"])
            token = (owner or {}).get("fcmToken")
            if token:
                send_push_notification.delay(token, title, body)
                pushed += 1

        except (MediCheckerException, ApplicationError) as e:
            failed += 1
            logger.error(f"Reminder {reminder.get('id')} could not be dispatched: {e}")

    return {
        "due": len(due),
        "dispatched": dispatched,
        "pushed": pushed,
        "failed": failed,
    }
