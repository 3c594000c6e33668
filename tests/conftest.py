# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for FirestoreClient, patched into every module
#   that talks to Firestore
# - A TestClient with authentication overridden
# =============================================================================

import copy
import itertools
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("FIREBASE_PROJECT_ID", "medichecker-test")
os.environ.setdefault("FIREBASE_SERVER_KEY", "test-server-key")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient


# Modules that import FirestoreClient by name
FIRESTORE_USERS = [
    "lib.firestore_client",
    "app.auth.dependencies",
    "app.auth.routes",
    "core.services.admin_service",
    "core.services.history_service",
    "core.services.medicine_service",
    "core.services.notification_service",
    "core.services.prescription_service",
    "core.services.reminder_service",
    "core.services.user_service",
]


class InMemoryFirestore:
    """
    Dict-backed replacement for FirestoreClient.

    Supports the same calls the services make: ==, != and "in" filters,
    generated IDs, merge writes and deletes. Reads return copies so callers
    can't change stored data by accident.
    """

    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = {}
        self._ids = itertools.count(1)
        self.writes: list[tuple[str, str, str]] = []

    # Test helpers -----------------------------------------------------------

    def seed(self, collection: str, document_id: str, data: dict) -> None:
        self.collections.setdefault(collection, {})[document_id] = copy.deepcopy(data)

    def get(self, collection: str, document_id: str) -> dict | None:
        return self.collections.get(collection, {}).get(document_id)

    def all(self, collection: str) -> list[dict]:
        return list(self.collections.get(collection, {}).values())

    # FirestoreClient API ----------------------------------------------------

    def get_app(self):
        return None

    def fetch_document(self, collection, document_id):
        data = self.get(collection, document_id)
        if data is None:
            return None
        return {**copy.deepcopy(data), "id": document_id}

    def list_documents(self, collection, filters=None, order_by=None, descending=False, limit=None):
        results = []
        for document_id, data in self.collections.get(collection, {}).items():
            if all(self._matches(data, field, op, value) for field, op, value in filters or []):
                results.append({**copy.deepcopy(data), "id": document_id})
        if order_by:
            results.sort(key=lambda d: d.get(order_by), reverse=descending)
        return results[:limit] if limit else results

    def count_documents(self, collection, filters=None):
        return len(self.list_documents(collection, filters=filters))

    def add_document(self, collection, data):
        document_id = f"{collection}-{next(self._ids)}"
        self.seed(collection, document_id, data)
        self.writes.append(("add", collection, document_id))
        return {**copy.deepcopy(data), "id": document_id}

    def set_document(self, collection, document_id, data, merge=False):
        existing = self.get(collection, document_id) if merge else None
        self.seed(collection, document_id, {**(existing or {}), **data})
        self.writes.append(("set", collection, document_id))

    def update_document(self, collection, document_id, data):
        existing = self.get(collection, document_id)
        if existing is None:
            raise KeyError(f"{collection}/{document_id}")
        existing.update(copy.deepcopy(data))
        self.writes.append(("update", collection, document_id))

    def delete_document(self, collection, document_id):
        self.collections.get(collection, {}).pop(document_id, None)
        self.writes.append(("delete", collection, document_id))

    @staticmethod
    def _matches(data, field, op, value):
        actual = data.get(field)
        if op == "==":
            return actual == value
        if op == "!=":
            return actual != value
        if op == "in":
            return actual in value
        raise ValueError(f"Unsupported operator: {op}")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def firestore(monkeypatch):
    """Fresh in-memory Firestore, patched in wherever FirestoreClient is used."""
    store = InMemoryFirestore()
    for module in FIRESTORE_USERS:
        monkeypatch.setattr(f"{module}.FirestoreClient", store)
    return store


@pytest.fixture
def current_user():
    from app.auth.models import AuthUser

    return AuthUser(
        uid="user-1",
        email="jane@example.com",
        name="Jane Doe",
        email_verified=True,
    )


@pytest.fixture
def admin_user():
    from app.auth.models import AuthUser

    return AuthUser(uid="admin-1", email="admin@example.com", name="Ada Admin", email_verified=True)


@pytest.fixture
def client(firestore, current_user):
    """TestClient authenticated as `current_user`."""
    from app.auth.dependencies import get_current_user, get_current_user_optional
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_current_user_optional] = lambda: current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(firestore):
    """TestClient with no credentials."""
    from app.auth.dependencies import get_current_user, get_current_user_optional
    from app.main import app

    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_current_user_optional, None)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_users():
    """A regular user and an admin, as stored in `users`."""
    return {
        "user-1": {
            "uid": "user-1",
            "email": "jane@example.com",
            "displayName": "Jane Doe",
            "role": "user",
            "fcmToken": "token-jane",
        },
        "admin-1": {
            "uid": "admin-1",
            "email": "admin@example.com",
            "firstName": "Ada",
            "lastName": "Admin",
            "role": "admin",
            "isAdmin": True,
        },
    }


@pytest.fixture
def fda_label():
    """One openFDA drug label as returned by /drug/label.json."""
    return {
        "openfda": {
            "brand_name": ["Tylenol Extra Strength"],
            "generic_name": ["ACETAMINOPHEN"],
            "manufacturer_name": ["Kenvue Brands LLC"],
            "route": ["ORAL"],
            "substance_name": ["ACETAMINOPHEN"],
            "rxcui": ["209387"],
        },
        "dosage_and_administration": ["Take 2 caplets every 6 hours while symptoms last."],
        "indications_and_usage": ["Temporarily relieves minor aches and pains."],
        "warnings": ["Liver warning: This product contains acetaminophen."],
        "description": ["Pain reliever/fever reducer."],
        "active_ingredient": ["Acetaminophen 500 mg"],
        "purpose": ["Pain reliever/fever reducer"],
    }
