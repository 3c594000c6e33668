# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - medicine.py: Medicine form and search result schemas
# - user.py: Signup, profile, preferences and role schemas
# - prescription.py: Prescription form, analytics and dose log schemas
# - reminder.py: Reminder form schema
# - history.py: Search history schemas
# - notification.py: Admin notification and FCM relay schemas
# - admin.py: Dashboard stats and analytics schemas
# - pharmacy.py: Pharmacy locator results
# - assistant.py: Health assistant chat schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Medicine Models - Catalog and search
# -----------------------------------------------------------------------------
from .medicine import (
    MedicineForm,
    MedicineResult,
    SearchResponse,
)

# -----------------------------------------------------------------------------
# User Models - Accounts and profile
# -----------------------------------------------------------------------------
from .user import (
    EmergencyContact,
    NotificationPreferences,
    PasswordStrength,
    PasswordStrengthRequest,
    PreferencesUpdate,
    PrivacyPreferences,
    ProfileUpdate,
    PushTokenUpdate,
    RoleToggleResponse,
    SignupRequest,
)

# -----------------------------------------------------------------------------
# Prescription / Reminder / History Models
# -----------------------------------------------------------------------------
from .prescription import (
    DoseLogRequest,
    DoseLogResponse,
    PrescriptionAnalytics,
    PrescriptionForm,
)
from .reminder import ReminderForm
from .history import HistoryDeleteRequest, HistoryEntryCreate

# -----------------------------------------------------------------------------
# Notification / Admin Models
# -----------------------------------------------------------------------------
from .notification import AdminNotificationRequest, NotifyRequest
from .admin import AdminAnalytics, AdminStats, DailyCount, TopMedicine

# -----------------------------------------------------------------------------
# Pharmacy Locator / Assistant Models
# -----------------------------------------------------------------------------
from .pharmacy import Pharmacy, PharmacySearchResponse
from .assistant import ChatRequest, ChatResponse

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Medicine
    "MedicineForm",
    "MedicineResult",
    "SearchResponse",
    # User
    "EmergencyContact",
    "NotificationPreferences",
    "PasswordStrength",
    "PasswordStrengthRequest",
    "PreferencesUpdate",
    "PrivacyPreferences",
    "ProfileUpdate",
    "PushTokenUpdate",
    "RoleToggleResponse",
    "SignupRequest",
    # Prescription
    "DoseLogRequest",
    "DoseLogResponse",
    "PrescriptionAnalytics",
    "PrescriptionForm",
    # Reminder
    "ReminderForm",
    # History
    "HistoryDeleteRequest",
    "HistoryEntryCreate",
    # Notification
    "AdminNotificationRequest",
    "NotifyRequest",
    # Admin
    "AdminAnalytics",
    "AdminStats",
    "DailyCount",
    "TopMedicine",
    # Pharmacy locator
    "Pharmacy",
    "PharmacySearchResponse",
    # Assistant
    "ChatRequest",
    "ChatResponse",
]
