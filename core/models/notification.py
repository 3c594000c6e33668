# =============================================================================
# core/models/notification.py - Notification Schemas
# =============================================================================
# - AdminNotificationRequest: Broadcast or targeted message from an admin
# - NotifyRequest: Body of the FCM relay endpoint
# =============================================================================

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AdminNotificationRequest(BaseModel):
    """
    Admin notification form.

    target="all" writes one broadcast document; target="specific" writes
    one document per entry in userIds.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    message: str = ""
    type: str = "system_update"
    target: Literal["all", "specific"] = "all"
    userIds: list[str] = Field(default_factory=list)


class NotifyRequest(BaseModel):
    """FCM relay request. The token is checked in the route (400, not 422)."""

    model_config = ConfigDict(extra="ignore")

    token: str | None = None
    title: str = "MediChecker"
    body: str = "Test push"
