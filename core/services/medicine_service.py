# =============================================================================
# core/services/medicine_service.py - Admin Medicine Catalog
# =============================================================================
# CRUD for the `medicines` collection used by the admin panel.
# Every mutation is a single Firestore write; the list is always re-read
# from Firestore afterwards (no caching, no optimistic updates).
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from app.exceptions import MedicineNotFoundError, MedicineValidationError
from core.models.medicine import MedicineForm
from lib.firestore_client import FirestoreClient, MEDICINES_COLLECTION

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "category")
SEARCH_FIELDS = ("name", "genericName", "category", "manufacturer")


class MedicineService:
    """
    Service for the admin medicine catalog.

    Provides a clean interface between API routes and Firestore.
    """

    @staticmethod
    def validate(form: MedicineForm) -> dict[str, Any]:
        """
        Check that name and category are filled in.

        Returns:
            The form as a dict, ready to store

        Raises:
            MedicineValidationError: If name or category is blank
        """
        data = form.model_dump()
        missing = [field for field in REQUIRED_FIELDS if not str(data.get(field, "")).strip()]
        if missing:
            raise MedicineValidationError(missing)
        return data

    @staticmethod
    def list_medicines() -> list[dict[str, Any]]:
        """Fetch every medicine document."""
        medicines = FirestoreClient.list_documents(MEDICINES_COLLECTION)
        logger.debug(f"Loaded {len(medicines)} medicines")
        return medicines

    @staticmethod
    def get_medicine(medicine_id: str) -> dict[str, Any]:
        """
        Raises:
            MedicineNotFoundError: If the document doesn't exist
        """
        medicine = FirestoreClient.fetch_document(MEDICINES_COLLECTION, medicine_id)
        if not medicine:
            raise MedicineNotFoundError(medicine_id)
        return medicine

    @staticmethod
    def add_medicine(form: MedicineForm, actor_id: str) -> dict[str, Any]:
        """
        Add a medicine to the catalog.

        Args:
            form: Admin form contents
            actor_id: UID of the admin doing the add

        Returns:
            The stored document including its new ID

        Raises:
            MedicineValidationError: If name or category is blank (nothing is written)
        """
        data = MedicineService.validate(form)
        now = datetime.now(timezone.utc)
        data.update({
            "createdAt": now,
            "createdBy": actor_id,
            "updatedAt": now,
        })

        medicine = FirestoreClient.add_document(MEDICINES_COLLECTION, data)
        logger.info(f"Medicine '{data['name']}' added by {actor_id}")
        return medicine

    @staticmethod
    def update_medicine(medicine_id: str, form: MedicineForm, actor_id: str) -> dict[str, Any]:
        """
        Overwrite the form fields of an existing medicine.

        Raises:
            MedicineNotFoundError: If the medicine doesn't exist
            MedicineValidationError: If name or category is blank
        """
        existing = MedicineService.get_medicine(medicine_id)
        data = MedicineService.validate(form)
        data.update({
            "updatedAt": datetime.now(timezone.utc),
            "updatedBy": actor_id,
        })

        FirestoreClient.update_document(MEDICINES_COLLECTION, medicine_id, data)
        logger.info(f"Medicine {medicine_id} updated by {actor_id}")
        return {**existing, **data}

    @staticmethod
    def delete_medicine(medicine_id: str) -> None:
        """
        Raises:
            MedicineNotFoundError: If the medicine doesn't exist
        """
        MedicineService.get_medicine(medicine_id)
        FirestoreClient.delete_document(MEDICINES_COLLECTION, medicine_id)

    @staticmethod
    def filter_medicines(
        medicines: list[dict[str, Any]],
        search_term: str = "",
        category: str = "all",
    ) -> list[dict[str, Any]]:
        """
        Filter the admin list in memory.

        The search term matches (case-insensitively) any of name, generic
        name, category or manufacturer; category must match exactly unless
        it is "all".
        """
        term = search_term.strip().lower()
        result = []
        for medicine in medicines:
            if term and not any(term in str(medicine.get(field) or "").lower() for field in SEARCH_FIELDS):
                continue
            if category != "all" and medicine.get("category") != category:
                continue
            result.append(medicine)
        return result
