# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - medicines.py: Medicine search and built-in catalog
# - admin.py: Catalog management, user roles, stats, notifications (admins only)
# - profile.py: The caller's profile, preferences, avatar and push token
# - prescriptions.py: Prescription tracking and dose logging
# - reminders.py: Medication reminders
# - history.py: Search history
# - notifications.py: In-app notifications and the FCM push relay
# - pharmacies.py: Pharmacy locator (OpenStreetMap, Google Places, CollectAPI)
# - assistant.py: Health assistant chat
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import medicines
from . import admin
from . import profile
from . import prescriptions
from . import reminders
from . import history
from . import notifications
from . import pharmacies
from . import assistant

__all__ = [
    "health",
    "medicines",
    "admin",
    "profile",
    "prescriptions",
    "reminders",
    "history",
    "notifications",
    "pharmacies",
    "assistant",
]
