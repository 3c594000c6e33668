# =============================================================================
# core/services/prescription_service.py - Prescription Tracking
# =============================================================================
# Per-user prescriptions with a refill cycle:
# - CRUD on the `prescriptions` collection (owner only)
# - days remaining until the next refill, derived at read time
# - the analytics cards (total / active / maintenance / upcoming refills)
# - the dose log helper (the log itself lives in the browser)
#
# Refill arithmetic is done on naive UTC datetimes, which is what
# lastRefill (an ISO "...Z" string) parses to.
# =============================================================================

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

from app.exceptions import PrescriptionNotFoundError, PrescriptionValidationError
from core.models.prescription import PrescriptionForm
from lib.firestore_client import FirestoreClient, PRESCRIPTIONS_COLLECTION
from lib.utils import parse_datetime

logger = logging.getLogger(__name__)

UPCOMING_REFILL_DAYS = 7
SECONDS_PER_DAY = 86400


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_iso(value: datetime) -> str:
    """Format like JavaScript's Date.toISOString()."""
    return value.isoformat(timespec="milliseconds") + "Z"


class PrescriptionService:
    """
    Service for prescription operations.
    """

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @staticmethod
    def get_days_remaining(prescription: dict[str, Any], now: datetime | None = None) -> int | None:
        """
        Whole days until the next refill is due.

        The next refill is lastRefill + refillDays. The result is floored,
        so it is negative exactly when that moment has passed (-1 means
        "overdue by less than a day").

        Returns:
            Days remaining, or None if refillDays or lastRefill is missing
        """
        refill_days = prescription.get("refillDays")
        last_refill = parse_datetime(prescription.get("lastRefill"))
        if not refill_days or last_refill is None:
            return None

        now = now or utcnow()
        next_refill = last_refill + timedelta(days=int(refill_days))
        return math.floor((next_refill - now).total_seconds() / SECONDS_PER_DAY)

    @staticmethod
    def is_active(prescription: dict[str, Any], now: datetime | None = None) -> bool:
        """Active means no end date, or an end date not yet passed."""
        end = parse_datetime(prescription.get("endDate"))
        return end is None or end >= (now or utcnow())

    @staticmethod
    def get_analytics(prescriptions: list[dict[str, Any]], now: datetime | None = None) -> dict[str, int]:
        """
        Summary counts for the prescriptions page.

        upcomingRefills counts maintenance prescriptions with at most
        seven days remaining (overdue ones included).
        """
        now = now or utcnow()
        upcoming = 0
        for prescription in prescriptions:
            if prescription.get("rxType") != "maintenance":
                continue
            days = PrescriptionService.get_days_remaining(prescription, now)
            if days is not None and days <= UPCOMING_REFILL_DAYS:
                upcoming += 1

        return {
            "total": len(prescriptions),
            "active": sum(1 for p in prescriptions if PrescriptionService.is_active(p, now)),
            "maintenance": sum(1 for p in prescriptions if p.get("rxType") == "maintenance"),
            "upcomingRefills": upcoming,
        }

    @staticmethod
    def log_dose(
        dose_logs: dict[str, dict[str, Any]],
        medicine_name: str,
        now: datetime | None = None,
    ) -> dict[str, dict[str, Any]]:
        """
        Record that a dose was taken now.

        Returns a new mapping; the input is not modified.
        """
        return {**dose_logs, medicine_name: {"lastTaken": to_iso(now or utcnow())}}

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(form: PrescriptionForm) -> dict[str, Any]:
        data = form.model_dump()
        missing = [field for field in ("medicine", "dosage", "startDate") if not str(data[field]).strip()]
        if not missing and parse_datetime(data["startDate"]) is None:
            missing.append("startDate")
        if missing:
            raise PrescriptionValidationError(missing)
        return data

    @staticmethod
    def list_prescriptions(uid: str, now: datetime | None = None) -> list[dict[str, Any]]:
        """
        The user's prescriptions, newest start date first, each with
        daysRemaining filled in.
        """
        prescriptions = FirestoreClient.list_documents(
            PRESCRIPTIONS_COLLECTION, filters=[("userId", "==", uid)]
        )
        prescriptions.sort(
            key=lambda p: parse_datetime(p.get("startDate")) or datetime.min,
            reverse=True,
        )

        now = now or utcnow()
        for prescription in prescriptions:
            prescription["daysRemaining"] = PrescriptionService.get_days_remaining(prescription, now)
        return prescriptions

    @staticmethod
    def get_prescription(uid: str, prescription_id: str) -> dict[str, Any]:
        """
        Raises:
            PrescriptionNotFoundError: Missing, or owned by another user
        """
        prescription = FirestoreClient.fetch_document(PRESCRIPTIONS_COLLECTION, prescription_id)
        if not prescription or prescription.get("userId") != uid:
            raise PrescriptionNotFoundError(prescription_id)
        return prescription

    @staticmethod
    def add_prescription(uid: str, form: PrescriptionForm) -> dict[str, Any]:
        """
        Add a prescription. The first refill is counted from the start date.

        Raises:
            PrescriptionValidationError: If medicine, dosage or startDate is missing
        """
        data = PrescriptionService._validate(form)
        data.update({
            "userId": uid,
            "lastRefill": to_iso(parse_datetime(data["startDate"])),
            "createdAt": datetime.now(timezone.utc),
        })

        prescription = FirestoreClient.add_document(PRESCRIPTIONS_COLLECTION, data)
        prescription["daysRemaining"] = PrescriptionService.get_days_remaining(prescription)
        logger.info(f"Prescription {prescription['id']} added for {uid}")
        return prescription

    @staticmethod
    def update_prescription(uid: str, prescription_id: str, form: PrescriptionForm) -> dict[str, Any]:
        existing = PrescriptionService.get_prescription(uid, prescription_id)
        data = PrescriptionService._validate(form)
        data["updatedAt"] = datetime.now(timezone.utc)

        FirestoreClient.update_document(PRESCRIPTIONS_COLLECTION, prescription_id, data)
        updated = {**existing, **data}
        updated["daysRemaining"] = PrescriptionService.get_days_remaining(updated)
        return updated

    @staticmethod
    def delete_prescription(uid: str, prescription_id: str) -> None:
        PrescriptionService.get_prescription(uid, prescription_id)
        FirestoreClient.delete_document(PRESCRIPTIONS_COLLECTION, prescription_id)
