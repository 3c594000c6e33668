# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Firestore/Storage-backed operations per feature
# - catalog.py: Built-in medicine catalog
# - medicine_icons.py: Icon and color lookup for medicines
#
# Code in this package should NOT import from FastAPI or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
