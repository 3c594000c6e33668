# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .search_service import MedicineSearchService, recent_queries
from .medicine_service import MedicineService
from .user_service import UserService
from .storage_service import StorageService
from .prescription_service import PrescriptionService
from .reminder_service import ReminderService, calculate_next_dose
from .history_service import HistoryService
from .notification_service import NotificationService, relay_push
from .admin_service import AdminService
from .pharmacy_service import PharmacyService
from .assistant_service import AssistantService

__all__ = [
    "MedicineSearchService",
    "recent_queries",
    "MedicineService",
    "UserService",
    "StorageService",
    "PrescriptionService",
    "ReminderService",
    "calculate_next_dose",
    "HistoryService",
    "NotificationService",
    "relay_push",
    "AdminService",
    "PharmacyService",
    "AssistantService",
]
