# =============================================================================
# app/routers/reminders.py - Reminder Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import get_current_user, AuthUser
from core.models.reminder import ReminderForm
from core.services.reminder_service import ReminderService

router = APIRouter()

ReminderId = Annotated[str, Path(description="Reminder document ID")]


@router.get("")
def list_reminders(user: AuthUser = Depends(get_current_user)):
    reminders = ReminderService.list_reminders(user.uid)
    return {
        "reminders": reminders,
        "active": sum(1 for r in reminders if r.get("active")),
        "total": len(reminders),
    }


@router.post("", status_code=201)
def add_reminder(form: ReminderForm, user: AuthUser = Depends(get_current_user)):
    reminder = ReminderService.add_reminder(user.uid, form)
    return {"reminder": reminder, "message": "Reminder created successfully!"}


@router.put("/{reminder_id}")
def update_reminder(
    reminder_id: ReminderId,
    form: ReminderForm,
    user: AuthUser = Depends(get_current_user),
):
    reminder = ReminderService.update_reminder(user.uid, reminder_id, form)
    return {"reminder": reminder, "message": "Reminder updated successfully!"}


@router.delete("/{reminder_id}")
def delete_reminder(reminder_id: ReminderId, user: AuthUser = Depends(get_current_user)):
    ReminderService.delete_reminder(user.uid, reminder_id)
    return {"id": reminder_id, "message": "Reminder deleted successfully!"}


@router.post("/{reminder_id}/toggle")
def toggle_reminder(reminder_id: ReminderId, user: AuthUser = Depends(get_current_user)):
    """Pause or resume a reminder."""
    return ReminderService.toggle_reminder(user.uid, reminder_id)
