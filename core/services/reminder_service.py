# =============================================================================
# core/services/reminder_service.py - Medication Reminders
# =============================================================================
# Handles the `reminders` collection and the next-dose schedule.
#
# Times are "HH:MM" strings in the user's local wall-clock time and
# nextDose is stored as a naive datetime in the same clock. No timezone
# conversion happens anywhere.
# =============================================================================

import logging
from datetime import datetime, time, timedelta
from typing import Any

from app.exceptions import ReminderNotFoundError, ReminderValidationError
from core.models.reminder import ReminderForm
from lib.firestore_client import FirestoreClient, REMINDERS_COLLECTION
from lib.utils import parse_datetime

logger = logging.getLogger(__name__)

DEFAULT_TIMES = ["08:00"]


def parse_times(times: list[str] | None) -> list[time]:
    """
    Parse and sort "HH:MM" strings.

    Browsers may submit "HH:MM:SS" from a time input; the seconds are
    dropped.

    Raises:
        ReminderValidationError: If any entry is not a valid 24-hour time
    """
    parsed = []
    for value in times or DEFAULT_TIMES:
        try:
            parts = value.split(":")
            if len(parts) not in (2, 3):
                raise ValueError(value)
            hours, minutes, *_ = [int(part) for part in parts]
            parsed.append(time(hours, minutes))
        except (ValueError, AttributeError):
            raise ReminderValidationError(["times"], message=f"Invalid reminder time: {value!r}")
    return sorted(parsed)


def calculate_next_dose(
    times: list[str] | None,
    start_date: Any = None,
    now: datetime | None = None,
) -> datetime:
    """
    When the next dose is due.

    The earliest time today that is still after `now`; if every time has
    passed, the earliest time tomorrow. The result is never before the
    start date (at its earliest time).

    Example:
        calculate_next_dose(["08:00", "20:00"], "2024-01-01", datetime(2024, 3, 1, 12, 0))
        # datetime(2024, 3, 1, 20, 0)
    """
    now = now or datetime.now()
    slots = parse_times(times)

    next_dose = None
    for slot in slots:
        candidate = datetime.combine(now.date(), slot)
        if candidate > now:
            next_dose = candidate
            break

    if next_dose is None:
        next_dose = datetime.combine(now.date() + timedelta(days=1), slots[0])

    start = parse_datetime(start_date)
    if start is not None and next_dose < start:
        next_dose = datetime.combine(start.date(), slots[0])

    return next_dose


class ReminderService:
    """
    Service for reminder operations.
    """

    @staticmethod
    def _validate(form: ReminderForm) -> dict[str, Any]:
        data = form.model_dump()
        missing = [field for field in ("medicineName", "dosage") if not data[field].strip()]
        if missing:
            raise ReminderValidationError(missing)
        parse_times(data["times"])
        return data

    @staticmethod
    def list_reminders(uid: str) -> list[dict[str, Any]]:
        """The user's reminders, most recently created first."""
        reminders = FirestoreClient.list_documents(
            REMINDERS_COLLECTION, filters=[("userId", "==", uid)]
        )
        reminders.sort(key=lambda r: parse_datetime(r.get("createdAt")) or datetime.min, reverse=True)
        return reminders

    @staticmethod
    def get_reminder(uid: str, reminder_id: str) -> dict[str, Any]:
        """
        Raises:
            ReminderNotFoundError: Missing, or owned by another user
        """
        reminder = FirestoreClient.fetch_document(REMINDERS_COLLECTION, reminder_id)
        if not reminder or reminder.get("userId") != uid:
            raise ReminderNotFoundError(reminder_id)
        return reminder

    @staticmethod
    def add_reminder(uid: str, form: ReminderForm, now: datetime | None = None) -> dict[str, Any]:
        """
        Create a reminder with its first nextDose.

        Raises:
            ReminderValidationError: If medicineName or dosage is missing
        """
        data = ReminderService._validate(form)
        now = now or datetime.now()
        data.update({
            "userId": uid,
            "createdAt": now,
            "nextDose": calculate_next_dose(data["times"], data["startDate"], now),
            "totalDoses": 0,
            "missedDoses": 0,
        })

        reminder = FirestoreClient.add_document(REMINDERS_COLLECTION, data)
        logger.info(f"Reminder {reminder['id']} created for {uid}, next dose {data['nextDose']}")
        return reminder

    @staticmethod
    def update_reminder(uid: str, reminder_id: str, form: ReminderForm, now: datetime | None = None) -> dict[str, Any]:
        existing = ReminderService.get_reminder(uid, reminder_id)
        data = ReminderService._validate(form)
        now = now or datetime.now()
        data.update({
            "nextDose": calculate_next_dose(data["times"], data["startDate"], now),
            "updatedAt": now,
        })

        FirestoreClient.update_document(REMINDERS_COLLECTION, reminder_id, data)
        return {**existing, **data}

    @staticmethod
    def delete_reminder(uid: str, reminder_id: str) -> None:
        ReminderService.get_reminder(uid, reminder_id)
        FirestoreClient.delete_document(REMINDERS_COLLECTION, reminder_id)

    @staticmethod
    def toggle_reminder(uid: str, reminder_id: str) -> dict[str, Any]:
        """
        Flip a reminder between active and paused.

        Returns:
            Dict with the new `active` value and a message
        """
        reminder = ReminderService.get_reminder(uid, reminder_id)
        active = not reminder.get("active", True)
        FirestoreClient.update_document(REMINDERS_COLLECTION, reminder_id, {
            "active": active,
            "updatedAt": datetime.now(),
        })
        return {
            "id": reminder_id,
            "active": active,
            "message": f"Reminder {'activated' if active else 'deactivated'}!",
        }

    # -------------------------------------------------------------------------
    # Worker support
    # -------------------------------------------------------------------------

    @staticmethod
    def due_reminders(now: datetime | None = None) -> list[dict[str, Any]]:
        """
        Active reminders whose nextDose has arrived.

        Reminders past their endDate are left out.
        """
        now = now or datetime.now()
        reminders = FirestoreClient.list_documents(
            REMINDERS_COLLECTION, filters=[("active", "==", True)]
        )

        due = []
        for reminder in reminders:
            next_dose = parse_datetime(reminder.get("nextDose"))
            if next_dose is None or next_dose > now:
                continue
            end = parse_datetime(reminder.get("endDate"))
            if end is not None and end.date() < now.date():
                continue
            due.append(reminder)
        return due

    @staticmethod
    def count_overdue(reminders: list[dict[str, Any]], now: datetime | None = None) -> int:
        """Active reminders whose nextDose is in the past."""
        now = now or datetime.now()
        count = 0
        for reminder in reminders:
            next_dose = parse_datetime(reminder.get("nextDose"))
            if reminder.get("active") and next_dose is not None and next_dose < now:
                count += 1
        return count

    @staticmethod
    def advance_reminder(reminder: dict[str, Any], now: datetime | None = None) -> datetime:
        """
        Move a reminder past the dose that just fired.

        Returns:
            The new nextDose
        """
        now = now or datetime.now()
        next_dose = calculate_next_dose(reminder.get("times"), reminder.get("startDate"), now)
        FirestoreClient.update_document(REMINDERS_COLLECTION, reminder["id"], {
            "nextDose": next_dose,
            "totalDoses": int(reminder.get("totalDoses") or 0) + 1,
            "updatedAt": now,
        })
        logger.debug(f"Reminder {reminder['id']} advanced to {next_dose}")
        return next_dose
