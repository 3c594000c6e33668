# =============================================================================
# core/services/notification_service.py - In-app Notifications and FCM Relay
# =============================================================================
# Two channels:
# - In-app notifications: documents in `notifications`, addressed to a UID
#   or to "all" (broadcast)
# - Push: a thin relay to the legacy FCM HTTP send endpoint
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from app.config import settings
from app.exceptions import NotificationNotFoundError, NotificationValidationError
from core.models.notification import AdminNotificationRequest
from lib.firestore_client import FirestoreClient, NOTIFICATIONS_COLLECTION
from lib.utils import parse_datetime

logger = logging.getLogger(__name__)

BROADCAST = "all"
UNREAD_LIMIT = 20
ALL_LIMIT = 50


def relay_push(
    token: str,
    title: str = "MediChecker",
    body: str = "Test push",
    http_client: httpx.Client | None = None,
) -> tuple[int, Any]:
    """
    Forward a push notification to FCM.

    Args:
        token: Device registration token
        title: Notification title
        body: Notification body
        http_client: Optional client (tests pass one with a MockTransport)

    Returns:
        (status, payload): 200 and FCM's JSON when FCM answered 2xx,
        otherwise 500 and whatever FCM (or the transport) reported
    """
    payload = {
        "to": token,
        "notification": {"title": title, "body": body, "icon": "/favicon.ico"},
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"key={settings.FIREBASE_SERVER_KEY}",
    }

    client = http_client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
    try:
        response = client.post(settings.FCM_SEND_URL, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"FCM relay failed: {e}")
        return 500, {"error": str(e)}
    finally:
        if http_client is None:
            client.close()

    try:
        body_json = response.json()
    except ValueError:
        body_json = {"error": response.text}

    if response.is_success:
        logger.info("Push notification relayed to FCM")
        return 200, body_json

    logger.warning(f"FCM rejected push ({response.status_code}): {body_json}")
    return 500, body_json


class NotificationService:
    """
    Service for in-app notifications.
    """

    @staticmethod
    def list_user_notifications(uid: str, unread_only: bool = False) -> list[dict[str, Any]]:
        """
        Notifications visible to a user: their own plus broadcasts.

        Newest first; at most 20 when unread_only, otherwise 50.
        """
        filters = [("userId", "in", [uid, BROADCAST])]
        if unread_only:
            filters.append(("read", "==", False))

        notifications = FirestoreClient.list_documents(NOTIFICATIONS_COLLECTION, filters=filters)
        notifications.sort(
            key=lambda n: parse_datetime(n.get("createdAt")) or datetime.min,
            reverse=True,
        )
        return notifications[: UNREAD_LIMIT if unread_only else ALL_LIMIT]

    @staticmethod
    def mark_read(uid: str, notification_id: str) -> None:
        """
        Raises:
            NotificationNotFoundError: If the notification isn't visible to this user
        """
        notification = FirestoreClient.fetch_document(NOTIFICATIONS_COLLECTION, notification_id)
        if not notification or notification.get("userId") not in (uid, BROADCAST):
            raise NotificationNotFoundError(notification_id)
        FirestoreClient.update_document(NOTIFICATIONS_COLLECTION, notification_id, {"read": True})

    @staticmethod
    def mark_all_read(uid: str) -> int:
        """Mark every unread notification visible to the user. Returns the count."""
        unread = FirestoreClient.list_documents(
            NOTIFICATIONS_COLLECTION,
            filters=[("userId", "in", [uid, BROADCAST]), ("read", "==", False)],
        )
        for notification in unread:
            FirestoreClient.update_document(NOTIFICATIONS_COLLECTION, notification["id"], {"read": True})
        return len(unread)

    @staticmethod
    def create_notification(
        user_id: str,
        title: str,
        message: str,
        type: str = "system_update",
    ) -> dict[str, Any]:
        return FirestoreClient.add_document(NOTIFICATIONS_COLLECTION, {
            "userId": user_id,
            "title": title,
            "message": message,
            "type": type,
            "read": False,
            "createdAt": datetime.now(timezone.utc),
        })

    @staticmethod
    def send_admin_notification(request: AdminNotificationRequest) -> list[dict[str, Any]]:
        """
        Send an admin notification.

        target="all" writes one broadcast document. target="specific" writes
        one document per (non-blank) user ID.

        Raises:
            NotificationValidationError: If title or message is blank
        """
        title = request.title.strip()
        message = request.message.strip()
        if not title or not message:
            raise NotificationValidationError()

        if request.target == "all":
            recipients = [BROADCAST]
        else:
            recipients = [uid.strip() for uid in request.userIds if uid.strip()]

        created = [
            NotificationService.create_notification(uid, title, message, request.type)
            for uid in recipients
        ]
        logger.info(f"Admin notification '{title}' sent to {len(created)} recipient(s)")
        return created
