# =============================================================================
# tests/test_history_service.py - Search History Tests
# =============================================================================

from datetime import datetime

import pytest

from app.exceptions import HistoryItemNotFoundError
from core.models.history import HistoryEntryCreate
from core.services.history_service import HistoryService
from lib.firestore_client import SEARCH_HISTORY_COLLECTION


@pytest.fixture
def history(firestore):
    firestore.seed(SEARCH_HISTORY_COLLECTION, "h1", {
        "userId": "user-1", "searchQuery": "tylenol", "medicineName": "Tylenol",
        "resultType": "search", "timestamp": datetime(2024, 3, 1, 9, 0),
    })
    firestore.seed(SEARCH_HISTORY_COLLECTION, "h2", {
        "userId": "user-1", "searchQuery": "zyr", "medicineName": "Zyrtec",
        "resultType": "view", "timestamp": "2024-03-01T10:00:00.000Z",
    })
    firestore.seed(SEARCH_HISTORY_COLLECTION, "h3", {
        "userId": "user-2", "searchQuery": "advil", "medicineName": "Advil",
        "resultType": "search", "timestamp": datetime(2024, 3, 1, 11, 0),
    })
    return firestore


class TestHistory:
    """Test HistoryService."""

    def test_list_own_newest_first(self, history):
        items = HistoryService.list_history("user-1")

        assert [item["id"] for item in items] == ["h2", "h1"]

    def test_filter(self, history):
        items = HistoryService.list_history("user-1")

        assert [i["id"] for i in HistoryService.filter_history(items, "zyrtec")] == ["h2"]
        assert [i["id"] for i in HistoryService.filter_history(items, "", "search")] == ["h1"]
        assert HistoryService.filter_history(items, "advil") == []

    def test_add_entry(self, firestore):
        entry = HistoryService.add_entry("user-1", HistoryEntryCreate(searchQuery="advil", resultCount=3))

        stored = firestore.get(SEARCH_HISTORY_COLLECTION, entry["id"])
        assert stored["userId"] == "user-1"
        assert stored["resultCount"] == 3
        assert stored["timestamp"].tzinfo is not None

    def test_delete_selected(self, history):
        deleted = HistoryService.delete_items("user-1", ["h1", "h2"])

        assert deleted == 2
        assert history.all(SEARCH_HISTORY_COLLECTION)[0]["userId"] == "user-2"

    def test_delete_with_foreign_id_deletes_nothing(self, history):
        with pytest.raises(HistoryItemNotFoundError):
            HistoryService.delete_items("user-1", ["h1", "h3"])

        assert len(history.all(SEARCH_HISTORY_COLLECTION)) == 3

    def test_clear(self, history):
        assert HistoryService.clear_history("user-1") == 2
        assert len(history.all(SEARCH_HISTORY_COLLECTION)) == 1
