# =============================================================================
# app/routers/notifications.py - Notification Endpoints
# =============================================================================
# Two routers:
# - router: the caller's in-app notifications (mounted under /api/v1)
# - relay_router: the FCM push relay, mounted at /api/notify without a
#   version prefix because existing clients call it there
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from app.auth import get_current_user, AuthUser
from core.models.notification import NotifyRequest
from core.services.notification_service import NotificationService, relay_push

router = APIRouter()
relay_router = APIRouter()


@router.get("")
def list_notifications(
    user: AuthUser = Depends(get_current_user),
    unread_only: Annotated[bool, Query(description="Only unread notifications")] = False,
):
    notifications = NotificationService.list_user_notifications(user.uid, unread_only)
    return {
        "notifications": notifications,
        "unreadCount": sum(1 for n in notifications if not n.get("read")),
    }


@router.post("/read-all")
def mark_all_read(user: AuthUser = Depends(get_current_user)):
    updated = NotificationService.mark_all_read(user.uid)
    return {"updated": updated}


@router.post("/{notification_id}/read")
def mark_read(
    notification_id: Annotated[str, Path(description="Notification document ID")],
    user: AuthUser = Depends(get_current_user),
):
    NotificationService.mark_read(user.uid, notification_id)
    return {"id": notification_id, "read": True}


@relay_router.post("/notify")
def notify(request: NotifyRequest):
    """
    Relay a push notification to FCM.

    Returns FCM's response body as-is: 200 when FCM accepted the message,
    500 otherwise. A missing token is a 400.
    """
    if not request.token:
        return JSONResponse(status_code=400, content={"error": "Missing token"})

    status_code, payload = relay_push(request.token, request.title, request.body)
    return JSONResponse(status_code=status_code, content=payload)
