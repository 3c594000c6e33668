# =============================================================================
# tests/test_routes.py - API Endpoint Tests
# =============================================================================
# End-to-end tests through FastAPI's TestClient. Firestore is the in-memory
# fake from conftest.py, authentication is overridden, and outbound HTTP
# goes through httpx.MockTransport.
# =============================================================================

import io
import inspect
from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient
from firebase_admin import auth as firebase_auth
from PIL import Image

from app.config import settings
from app.dependencies import get_assistant_service, get_pharmacy_service, get_search_service
from app.main import app
from core.services.assistant_service import AssistantService
from core.services.pharmacy_service import PharmacyService
from core.services.search_service import MedicineSearchService
from lib.firestore_client import (
    FirestoreClientError,
    MEDICINES_COLLECTION,
    PRESCRIPTIONS_COLLECTION,
    SEARCH_HISTORY_COLLECTION,
    USERS_COLLECTION,
)


def offline_search_service():
    """Search service whose API calls all come back empty (openFDA 404)."""
    transport = httpx.MockTransport(lambda request: httpx.Response(404, json={}))
    service = MedicineSearchService(http_client=httpx.Client(transport=transport))
    try:
        yield service
    finally:
        service.close()


@pytest.fixture
def users(firestore, sample_users):
    for uid, doc in sample_users.items():
        firestore.seed(USERS_COLLECTION, uid, doc)
    return firestore


@pytest.fixture
def admin_client(users, admin_user):
    from app.auth.dependencies import get_current_user

    app.dependency_overrides[get_current_user] = lambda: admin_user
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Root / Health
# =============================================================================

class TestRoot:

    def test_root(self, anonymous_client):
        response = anonymous_client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "MediChecker API"

    def test_liveness(self, anonymous_client):
        assert anonymous_client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_run_binds_configured_host_and_port(self, monkeypatch):
        from app import main
        from app.config import settings

        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
        monkeypatch.setattr(settings, "API_HOST", "127.0.0.1")
        monkeypatch.setattr(settings, "API_PORT", 9100)

        main.run()

        assert calls == [("app.main:app", {"host": "127.0.0.1", "port": 9100, "reload": settings.DEBUG})]


# =============================================================================
# Push Relay
# =============================================================================

class TestNotifyRelay:
    """Test POST /api/notify."""

    def test_missing_token(self, anonymous_client):
        response = anonymous_client.post("/api/notify", json={"title": "Hi"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing token"}

    def test_relays_fcm_response(self, anonymous_client, monkeypatch):
        sent = {}

        def fake_relay(token, title, body):
            sent.update(token=token, title=title, body=body)
            return 200, {"success": 1}

        monkeypatch.setattr("app.routers.notifications.relay_push", fake_relay)

        response = anonymous_client.post("/api/notify", json={"token": "abc"})

        assert response.status_code == 200
        assert response.json() == {"success": 1}
        assert sent == {"token": "abc", "title": "MediChecker", "body": "Test push"}

    def test_fcm_failure_is_500(self, anonymous_client, monkeypatch):
        monkeypatch.setattr(
            "app.routers.notifications.relay_push",
            lambda token, title, body: (500, {"error": "InvalidRegistration"}),
        )

        response = anonymous_client.post("/api/notify", json={"token": "abc"})

        assert response.status_code == 500
        assert response.json() == {"error": "InvalidRegistration"}


# =============================================================================
# Medicine Search
# =============================================================================

class TestSearchEndpoint:
    """Test GET /api/v1/medicines/search."""

    @pytest.fixture(autouse=True)
    def offline(self):
        app.dependency_overrides[get_search_service] = offline_search_service
        yield
        app.dependency_overrides.pop(get_search_service, None)

    def test_signed_in_search_is_recorded(self, client, firestore):
        response = client.get("/api/v1/medicines/search", params={"q": "tylenol"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["results"][0]["source"] == "local"

        history = firestore.all(SEARCH_HISTORY_COLLECTION)
        assert len(history) == 1
        assert history[0]["userId"] == "user-1"
        assert history[0]["medicineName"] == "Tylenol"

    def test_anonymous_search_not_recorded(self, anonymous_client, firestore):
        response = anonymous_client.get("/api/v1/medicines/search", params={"q": "advil"})

        assert response.json()["total"] == 1
        assert firestore.all(SEARCH_HISTORY_COLLECTION) == []

    def test_signed_in_search_lists_recent_queries(self, client, firestore):
        firestore.seed(SEARCH_HISTORY_COLLECTION, "h1", {
            "userId": "user-1", "searchQuery": "advil", "timestamp": datetime(2024, 3, 1, 9, 0),
        })
        firestore.seed(SEARCH_HISTORY_COLLECTION, "h2", {
            "userId": "user-1", "searchQuery": "zyrtec", "timestamp": datetime(2024, 3, 1, 10, 0),
        })
        firestore.seed(SEARCH_HISTORY_COLLECTION, "h3", {
            "userId": "user-2", "searchQuery": "prozac", "timestamp": datetime(2024, 3, 1, 11, 0),
        })

        body = client.get("/api/v1/medicines/search", params={"q": "advil"}).json()

        assert body["recentSearches"] == ["advil", "zyrtec"]

    def test_anonymous_search_has_no_recent_queries(self, anonymous_client):
        body = anonymous_client.get("/api/v1/medicines/search", params={"q": "advil"}).json()

        assert body["recentSearches"] == []

    def test_history_failure_does_not_fail_search(self, client, firestore, monkeypatch):
        def broken(collection, data):
            raise FirestoreClientError("quota exceeded")

        monkeypatch.setattr(firestore, "add_document", broken)

        response = client.get("/api/v1/medicines/search", params={"q": "tylenol"})

        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_blank_query(self, client):
        response = client.get("/api/v1/medicines/search")

        assert response.json() == {"query": "", "category": "all", "results": [], "total": 0, "recentSearches": []}

    def test_catalog(self, anonymous_client):
        body = anonymous_client.get("/api/v1/medicines/catalog").json()

        assert len(body["categories"]) == 7
        assert "Respiratory" in body["adminCategories"]


# =============================================================================
# Admin
# =============================================================================

class TestAdminEndpoints:
    """Test admin access control and actions."""

    def test_regular_user_forbidden(self, client, users):
        response = client.get("/api/v1/admin/stats")

        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"

    def test_user_without_document_forbidden(self, client, firestore):
        assert client.get("/api/v1/admin/medicines").status_code == 403

    def test_stats(self, admin_client):
        response = admin_client.get("/api/v1/admin/stats")

        assert response.status_code == 200
        assert response.json()["adminUsers"] == 1

    def test_add_medicine(self, admin_client, users):
        response = admin_client.post("/api/v1/admin/medicines", json={
            "name": "Ventolin", "genericName": "Salbutamol", "category": "Respiratory",
        })

        assert response.status_code == 201
        medicine = response.json()["medicine"]
        assert medicine["icon"] == "🫁"
        assert medicine["color"] == "#3b82f6"
        assert len(users.all(MEDICINES_COLLECTION)) == 1

    def test_add_medicine_missing_category(self, admin_client, users):
        response = admin_client.post("/api/v1/admin/medicines", json={"name": "Ventolin"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Please fill in at least the medicine name and category."
        assert users.all(MEDICINES_COLLECTION) == []

    def test_cannot_toggle_self(self, admin_client, users):
        response = admin_client.post("/api/v1/admin/users/admin-1/toggle-admin")

        assert response.status_code == 400
        assert response.json()["code"] == "SELF_ROLE_CHANGE"
        assert users.get(USERS_COLLECTION, "admin-1")["role"] == "admin"

    def test_toggle_other_user(self, admin_client, users):
        response = admin_client.post("/api/v1/admin/users/user-1/toggle-admin")

        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    def test_users_list_marks_current_user(self, admin_client):
        users = admin_client.get("/api/v1/admin/users").json()["users"]

        current = {u["id"]: u["isCurrentUser"] for u in users}
        assert current == {"user-1": False, "admin-1": True}

    def test_broadcast_notification(self, admin_client):
        response = admin_client.post("/api/v1/admin/notifications", json={"title": "Hi", "message": "All"})

        assert response.status_code == 201
        assert response.json()["sent"] == 1


# =============================================================================
# User Features
# =============================================================================

class TestUserEndpoints:
    """Test prescriptions, reminders, history and profile endpoints."""

    def test_requires_authentication(self, anonymous_client):
        response = anonymous_client.get("/api/v1/prescriptions")

        assert response.status_code in (401, 403)

    def test_add_prescription_missing_fields(self, client, firestore):
        response = client.post("/api/v1/prescriptions", json={"medicine": "Lisinopril"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Please fill all required fields."
        assert firestore.all(PRESCRIPTIONS_COLLECTION) == []

    def test_add_and_list_prescription(self, client):
        created = client.post("/api/v1/prescriptions", json={
            "medicine": "Lisinopril", "dosage": "10mg", "startDate": "2024-02-01", "rxType": "maintenance",
        })
        listed = client.get("/api/v1/prescriptions").json()

        assert created.status_code == 201
        assert [p["medicine"] for p in listed["prescriptions"]] == ["Lisinopril"]

    def test_dose_log(self, client):
        response = client.post("/api/v1/prescriptions/dose-log", json={"medicineName": "Metformin"})

        assert response.status_code == 200
        assert "lastTaken" in response.json()["doseLogs"]["Metformin"]

    def test_add_reminder(self, client):
        response = client.post("/api/v1/reminders", json={
            "medicineName": "Metformin", "dosage": "500mg", "times": ["08:00", "20:00"],
        })

        assert response.status_code == 201
        assert response.json()["reminder"]["nextDose"]

    def test_bad_reminder_time(self, client):
        response = client.post("/api/v1/reminders", json={
            "medicineName": "Metformin", "dosage": "500mg", "times": ["8 o'clock"],
        })

        assert response.status_code == 400
        assert response.json()["code"] == "REMINDER_INVALID"

    def test_delete_foreign_history_item(self, client, firestore):
        firestore.seed(SEARCH_HISTORY_COLLECTION, "h1", {"userId": "user-2", "searchQuery": "advil"})

        response = client.post("/api/v1/history/delete", json={"ids": ["h1"]})

        assert response.status_code == 404
        assert firestore.get(SEARCH_HISTORY_COLLECTION, "h1") is not None

    def test_profile_hides_push_token(self, client, users):
        body = client.get("/api/v1/profile").json()

        assert body["email"] == "jane@example.com"
        assert body["isAdmin"] is False
        assert "fcmToken" not in body

    def test_avatar_upload(self, client, users, monkeypatch):
        class Bucket:
            def upload(self, path, file, file_options=None):
                self.path = path

            def get_public_url(self, path):
                return f"https://test-project.supabase.co/storage/v1/object/public/profile-pictures/{path}"

        monkeypatch.setattr("core.services.storage_service.SupabaseClient.bucket", lambda name: Bucket())
        monkeypatch.setattr(firebase_auth, "update_user", lambda uid, **kwargs: None)

        buffer = io.BytesIO()
        Image.new("RGB", (100, 100)).save(buffer, format="PNG")
        response = client.post(
            "/api/v1/profile/avatar",
            files={"file": ("me.png", buffer.getvalue(), "image/png")},
        )

        assert response.status_code == 200
        url = response.json()["profilePictureUrl"]
        stored = users.get(USERS_COLLECTION, "user-1")
        assert stored["profilePictureUrl"] == url
        assert stored["hasProfilePicture"] is True

    def test_avatar_rejects_non_image(self, client, users):
        response = client.post(
            "/api/v1/profile/avatar",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_IMAGE"


# =============================================================================
# Auth Helpers / Errors
# =============================================================================

class TestAuthEndpoints:

    def test_error_message(self, anonymous_client):
        body = anonymous_client.get("/api/v1/auth/errors/auth/wrong-password").json()

        assert body["message"] == "Incorrect password. Please try again or reset your password."

    def test_unknown_error_code(self, anonymous_client):
        body = anonymous_client.get("/api/v1/auth/errors/auth/odd-thing").json()

        assert body["message"] == "Login failed: auth/odd-thing. Please try again."

    def test_password_strength(self, anonymous_client):
        body = anonymous_client.post("/api/v1/auth/password-strength", json={"password": "Abcdef1!"}).json()

        assert body == {"score": 5, "label": "Strong", "color": "#28a745"}

    def test_signup_validation(self, anonymous_client):
        response = anonymous_client.post("/api/v1/auth/signup", json={"firstName": "Jane"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Last name is required"

    def test_firestore_outage_is_503(self, client, firestore, monkeypatch):
        def down(*args, **kwargs):
            raise FirestoreClientError("Firestore unavailable", code="LIST_DOCUMENTS_FAILED")

        monkeypatch.setattr(firestore, "list_documents", down)

        response = client.get("/api/v1/reminders")

        assert response.status_code == 503
        assert response.json()["code"] == "LIST_DOCUMENTS_FAILED"


# =============================================================================
# Pharmacy Locator / Health Assistant
# =============================================================================

OVERPASS_ONE_PHARMACY = {
    "elements": [{"type": "node", "id": 7, "lat": 14.6, "lon": 120.98, "tags": {"name": "Generika"}}]
}


def offline_pharmacy_service():
    """Pharmacy service whose Overpass endpoints all return one pharmacy."""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=OVERPASS_ONE_PHARMACY))
    service = PharmacyService(http_client=httpx.Client(transport=transport))
    try:
        yield service
    finally:
        service.close()


def unreachable_assistant_service():
    """Assistant service whose providers all fail."""
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    service = AssistantService(http_client=httpx.Client(transport=transport))
    try:
        yield service
    finally:
        service.close()


class TestPharmacyEndpoints:
    """Test /api/v1/pharmacies/*."""

    @pytest.fixture(autouse=True)
    def offline(self):
        app.dependency_overrides[get_pharmacy_service] = offline_pharmacy_service
        yield
        app.dependency_overrides.pop(get_pharmacy_service, None)

    def test_nearby(self, anonymous_client):
        response = anonymous_client.get("/api/v1/pharmacies/nearby", params={"lat": 14.6, "lng": 120.98})

        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "osm"
        assert body["total"] == 1
        assert body["results"][0]["name"] == "Generika"

    @pytest.mark.parametrize("params", [
        {"lat": 91, "lng": 0},
        {"lat": 0, "lng": -181},
        {"lng": 0},
    ])
    def test_nearby_rejects_bad_coordinates(self, anonymous_client, params):
        response = anonymous_client.get("/api/v1/pharmacies/nearby", params=params)

        assert response.status_code == 422

    def test_places_without_key(self, anonymous_client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_PLACES_API_KEY", None)

        response = anonymous_client.get("/api/v1/pharmacies/places", params={"lat": 14.6, "lng": 120.98})

        assert response.status_code == 503
        assert response.json()["code"] == "PROVIDER_NOT_CONFIGURED"

    def test_duty_requires_city(self, anonymous_client):
        response = anonymous_client.get("/api/v1/pharmacies/duty")

        assert response.status_code == 422


class TestAssistantEndpoint:
    """Test POST /api/v1/assistant/chat."""

    @pytest.fixture(autouse=True)
    def unreachable(self):
        app.dependency_overrides[get_assistant_service] = unreachable_assistant_service
        yield
        app.dependency_overrides.pop(get_assistant_service, None)

    def test_falls_back_to_knowledge_base(self, anonymous_client, monkeypatch):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", "gemini-key")

        response = anonymous_client.post("/api/v1/assistant/chat", json={"prompt": "I have a headache"})

        assert response.status_code == 200
        body = response.json()
        assert body["model"] == "medical-knowledge-base"
        assert body["fallback"] is True
        assert body["response"].startswith("For headaches")

    def test_empty_prompt_rejected(self, anonymous_client):
        response = anonymous_client.post("/api/v1/assistant/chat", json={"prompt": ""})

        assert response.status_code == 422


# =============================================================================
# Handler Execution
# =============================================================================

class TestHandlerExecution:
    """Handlers that reach Firestore or an HTTP API must not block the event loop."""

    # No I/O: safe to run on the loop
    IN_MEMORY_HANDLERS = {
        "root", "health_check", "liveness_check", "get_catalog",
        "password_strength", "auth_error_message",
    }

    def test_io_handlers_run_in_threadpool(self):
        from fastapi.routing import APIRoute

        coroutine_handlers = {
            route.endpoint.__name__
            for route in app.routes
            if isinstance(route, APIRoute) and inspect.iscoroutinefunction(route.endpoint)
        }

        assert coroutine_handlers == self.IN_MEMORY_HANDLERS

    def test_auth_dependencies_are_sync(self):
        from app.auth.dependencies import get_current_user, get_current_user_optional, require_admin

        for dependency in (get_current_user, get_current_user_optional, require_admin):
            assert not inspect.iscoroutinefunction(dependency)
