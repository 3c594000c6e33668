# =============================================================================
# core/services/history_service.py - Search History
# =============================================================================
# Per-user search history in the `searchHistory` collection.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from app.exceptions import HistoryItemNotFoundError
from core.models.history import HistoryEntryCreate
from lib.firestore_client import FirestoreClient, SEARCH_HISTORY_COLLECTION
from lib.utils import parse_datetime

logger = logging.getLogger(__name__)


class HistoryService:
    """
    Service for search history operations.
    """

    @staticmethod
    def list_history(uid: str) -> list[dict[str, Any]]:
        """The user's history, newest first."""
        items = FirestoreClient.list_documents(
            SEARCH_HISTORY_COLLECTION, filters=[("userId", "==", uid)]
        )
        items.sort(key=lambda item: parse_datetime(item.get("timestamp")) or datetime.min, reverse=True)
        return items

    @staticmethod
    def filter_history(
        items: list[dict[str, Any]],
        search_term: str = "",
        result_type: str = "all",
    ) -> list[dict[str, Any]]:
        """Match the term against the query and medicine name; optionally one result type."""
        term = search_term.strip().lower()
        result = []
        for item in items:
            if term:
                haystack = f"{item.get('searchQuery') or ''} {item.get('medicineName') or ''}".lower()
                if term not in haystack:
                    continue
            if result_type != "all" and item.get("resultType") != result_type:
                continue
            result.append(item)
        return result

    @staticmethod
    def add_entry(uid: str, entry: HistoryEntryCreate) -> dict[str, Any]:
        data = entry.model_dump()
        data.update({
            "userId": uid,
            "timestamp": datetime.now(timezone.utc),
        })
        return FirestoreClient.add_document(SEARCH_HISTORY_COLLECTION, data)

    @staticmethod
    def delete_items(uid: str, item_ids: list[str]) -> int:
        """
        Delete selected history items.

        Every ID must belong to the caller; nothing is deleted otherwise.

        Raises:
            HistoryItemNotFoundError: For the first ID that isn't the caller's
        """
        for item_id in item_ids:
            item = FirestoreClient.fetch_document(SEARCH_HISTORY_COLLECTION, item_id)
            if not item or item.get("userId") != uid:
                raise HistoryItemNotFoundError(item_id)

        for item_id in item_ids:
            FirestoreClient.delete_document(SEARCH_HISTORY_COLLECTION, item_id)

        logger.info(f"Deleted {len(item_ids)} history items for {uid}")
        return len(item_ids)

    @staticmethod
    def clear_history(uid: str) -> int:
        """Delete all of the user's history. Returns the number deleted."""
        items = FirestoreClient.list_documents(
            SEARCH_HISTORY_COLLECTION, filters=[("userId", "==", uid)]
        )
        for item in items:
            FirestoreClient.delete_document(SEARCH_HISTORY_COLLECTION, item["id"])

        logger.info(f"Cleared {len(items)} history items for {uid}")
        return len(items)
