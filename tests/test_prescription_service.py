# =============================================================================
# tests/test_prescription_service.py - Prescription Tracking Tests
# =============================================================================
# This module contains tests for:
# - Days remaining until refill (sign and rounding)
# - Analytics counts
# - Dose logging
# - CRUD with ownership checks
# =============================================================================

from datetime import datetime

import pytest

from app.exceptions import PrescriptionNotFoundError, PrescriptionValidationError
from core.models.prescription import PrescriptionForm
from core.services.prescription_service import PrescriptionService, to_iso
from lib.firestore_client import PRESCRIPTIONS_COLLECTION

NOW = datetime(2024, 3, 1, 12, 0)


# =============================================================================
# Days Remaining Tests
# =============================================================================

class TestDaysRemaining:
    """Test PrescriptionService.get_days_remaining."""

    def test_future_refill(self):
        prescription = {"refillDays": 30, "lastRefill": "2024-02-20T12:00:00.000Z"}

        # Next refill 2024-03-21 12:00, exactly 20 days away
        assert PrescriptionService.get_days_remaining(prescription, NOW) == 20

    def test_partial_day_rounds_down(self):
        prescription = {"refillDays": 30, "lastRefill": "2024-02-20T00:00:00.000Z"}

        # 19.5 days away
        assert PrescriptionService.get_days_remaining(prescription, NOW) == 19

    def test_overdue_by_hours_is_negative(self):
        prescription = {"refillDays": 10, "lastRefill": "2024-02-20T06:00:00.000Z"}

        # Refill was due six hours ago
        assert PrescriptionService.get_days_remaining(prescription, NOW) == -1

    def test_overdue_by_days(self):
        prescription = {"refillDays": 7, "lastRefill": "2024-02-01T12:00:00.000Z"}

        assert PrescriptionService.get_days_remaining(prescription, NOW) == -22

    @pytest.mark.parametrize("prescription", [
        {"lastRefill": "2024-02-20T12:00:00.000Z"},
        {"refillDays": 30},
        {"refillDays": 0, "lastRefill": "2024-02-20T12:00:00.000Z"},
    ])
    def test_missing_data(self, prescription):
        assert PrescriptionService.get_days_remaining(prescription, NOW) is None


# =============================================================================
# Analytics Tests
# =============================================================================

class TestAnalytics:
    """Test PrescriptionService.get_analytics."""

    def test_counts(self):
        prescriptions = [
            # maintenance, refill in 5 days
            {"rxType": "maintenance", "refillDays": 30, "lastRefill": "2024-02-05T12:00:00.000Z"},
            # maintenance, overdue
            {"rxType": "maintenance", "refillDays": 30, "lastRefill": "2024-01-01T12:00:00.000Z",
             "endDate": "2024-02-01"},
            # maintenance, refill in 25 days
            {"rxType": "maintenance", "refillDays": 30, "lastRefill": "2024-02-25T12:00:00.000Z"},
            # acute, ends next week
            {"rxType": "acute", "refillDays": 30, "lastRefill": "2024-02-29T12:00:00.000Z",
             "endDate": "2024-03-08"},
        ]

        analytics = PrescriptionService.get_analytics(prescriptions, NOW)

        assert analytics == {"total": 4, "active": 3, "maintenance": 3, "upcomingRefills": 2}

    @pytest.mark.parametrize("last_refill, days_remaining, upcoming", [
        # Refill 7.5 days out floors to 7 and counts as upcoming
        ("2024-02-08T00:00:00.000Z", 7, 1),
        # Exactly 8 days out does not
        ("2024-02-08T12:00:00.000Z", 8, 0),
    ])
    def test_upcoming_refill_boundary(self, last_refill, days_remaining, upcoming):
        prescription = {"rxType": "maintenance", "refillDays": 30, "lastRefill": last_refill}

        assert PrescriptionService.get_days_remaining(prescription, NOW) == days_remaining
        assert PrescriptionService.get_analytics([prescription], NOW)["upcomingRefills"] == upcoming

    def test_empty(self):
        assert PrescriptionService.get_analytics([], NOW) == {
            "total": 0, "active": 0, "maintenance": 0, "upcomingRefills": 0,
        }


class TestDoseLog:

    def test_records_last_taken(self):
        logs = {"Metformin": {"lastTaken": "2024-02-29T08:00:00.000Z"}}

        updated = PrescriptionService.log_dose(logs, "Lisinopril", NOW)

        assert updated["Lisinopril"] == {"lastTaken": "2024-03-01T12:00:00.000Z"}
        assert updated["Metformin"] == logs["Metformin"]
        assert "Lisinopril" not in logs

    def test_to_iso_matches_javascript_format(self):
        assert to_iso(datetime(2024, 1, 15, 10, 30, 0, 123000)) == "2024-01-15T10:30:00.123Z"


# =============================================================================
# CRUD Tests
# =============================================================================

class TestPrescriptionCrud:
    """Test CRUD with the in-memory Firestore."""

    def test_add_sets_last_refill_from_start_date(self, firestore):
        form = PrescriptionForm(medicine="Lisinopril", dosage="10mg", startDate="2024-02-01", rxType="maintenance")

        prescription = PrescriptionService.add_prescription("user-1", form)

        stored = firestore.get(PRESCRIPTIONS_COLLECTION, prescription["id"])
        assert stored["userId"] == "user-1"
        assert stored["lastRefill"] == "2024-02-01T00:00:00.000Z"
        assert stored["refillDays"] == 30
        assert "daysRemaining" not in stored

    @pytest.mark.parametrize("overrides", [
        {"medicine": ""},
        {"dosage": "  "},
        {"startDate": ""},
        {"startDate": "next tuesday"},
    ])
    def test_add_requires_fields(self, firestore, overrides):
        data = {"medicine": "Lisinopril", "dosage": "10mg", "startDate": "2024-02-01", **overrides}

        with pytest.raises(PrescriptionValidationError):
            PrescriptionService.add_prescription("user-1", PrescriptionForm(**data))

        assert firestore.writes == []

    def test_list_only_own_newest_first(self, firestore):
        firestore.seed(PRESCRIPTIONS_COLLECTION, "p1", {"userId": "user-1", "medicine": "A", "startDate": "2024-01-01"})
        firestore.seed(PRESCRIPTIONS_COLLECTION, "p2", {"userId": "user-1", "medicine": "B", "startDate": "2024-02-01"})
        firestore.seed(PRESCRIPTIONS_COLLECTION, "p3", {"userId": "user-2", "medicine": "C", "startDate": "2024-03-01"})

        prescriptions = PrescriptionService.list_prescriptions("user-1", NOW)

        assert [p["id"] for p in prescriptions] == ["p2", "p1"]
        assert all("daysRemaining" in p for p in prescriptions)

    def test_other_users_prescription_is_not_found(self, firestore):
        firestore.seed(PRESCRIPTIONS_COLLECTION, "p3", {"userId": "user-2", "medicine": "C", "startDate": "2024-03-01"})

        with pytest.raises(PrescriptionNotFoundError):
            PrescriptionService.delete_prescription("user-1", "p3")

        assert firestore.get(PRESCRIPTIONS_COLLECTION, "p3") is not None
