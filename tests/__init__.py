# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the MediChecker API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_*_service.py: Service tests against an in-memory Firestore
# - test_routes.py: Endpoint tests through FastAPI's TestClient
# - test_tasks.py: Celery reminder tasks
#
# Run tests with: pytest
# =============================================================================
