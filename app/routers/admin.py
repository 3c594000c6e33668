# =============================================================================
# app/routers/admin.py - Admin Endpoints
# =============================================================================
# Medicine catalog management, user roles, dashboard stats and
# notifications. Every endpoint requires an administrator.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query

from app.auth import require_admin, AuthUser
from core.catalog import ADMIN_CATEGORIES
from core.medicine_icons import get_category_color, get_category_icon
from core.models.admin import AdminAnalytics, AdminStats
from core.models.medicine import MedicineForm
from core.models.notification import AdminNotificationRequest
from core.models.user import RoleToggleResponse
from core.services.admin_service import AdminService
from core.services.medicine_service import MedicineService
from core.services.notification_service import NotificationService
from core.services.user_service import UserService

router = APIRouter()


def _decorate(medicine: dict) -> dict:
    category = medicine.get("category", "")
    return {
        **medicine,
        "icon": get_category_icon(category),
        "color": get_category_color(category),
    }


# =============================================================================
# Medicines
# =============================================================================

@router.get("/medicines")
def list_medicines(
    admin: AuthUser = Depends(require_admin),
    search: Annotated[str, Query(description="Match name, generic name, category or manufacturer")] = "",
    category: Annotated[str, Query(description="Exact category, or 'all'")] = "all",
):
    """
    List catalog medicines, re-read from Firestore on every call.
    """
    medicines = MedicineService.list_medicines()
    filtered = MedicineService.filter_medicines(medicines, search, category)
    return {
        "medicines": [_decorate(m) for m in filtered],
        "total": len(medicines),
        "showing": len(filtered),
        "categories": ADMIN_CATEGORIES,
    }


@router.post("/medicines", status_code=201)
def add_medicine(
    form: MedicineForm,
    admin: AuthUser = Depends(require_admin),
):
    """
    Add a medicine. Name and category are required.
    """
    medicine = MedicineService.add_medicine(form, actor_id=admin.uid)
    return {"medicine": _decorate(medicine), "message": "Medicine added successfully!"}


@router.put("/medicines/{medicine_id}")
def update_medicine(
    medicine_id: Annotated[str, Path(description="Medicine document ID")],
    form: MedicineForm,
    admin: AuthUser = Depends(require_admin),
):
    medicine = MedicineService.update_medicine(medicine_id, form, actor_id=admin.uid)
    return {"medicine": _decorate(medicine), "message": "Medicine updated successfully!"}


@router.delete("/medicines/{medicine_id}")
def delete_medicine(
    medicine_id: Annotated[str, Path(description="Medicine document ID")],
    admin: AuthUser = Depends(require_admin),
):
    MedicineService.delete_medicine(medicine_id)
    return {"id": medicine_id, "message": "Medicine deleted successfully!"}


# =============================================================================
# Users
# =============================================================================

@router.get("/users")
def list_users(
    admin: AuthUser = Depends(require_admin),
    search: Annotated[str, Query(description="Match name or email")] = "",
    role: Annotated[Literal["all", "admin", "user"], Query()] = "all",
):
    users = UserService.list_users()
    filtered = UserService.filter_users(users, search, role)
    return {
        "users": [
            {
                **user,
                "isAdmin": UserService.is_admin(user),
                "isCurrentUser": user["id"] == admin.uid,
                "profileImageUrl": UserService.profile_image_url(user),
            }
            for user in filtered
        ],
        "total": len(users),
        "showing": len(filtered),
    }


@router.post("/users/{user_id}/toggle-admin", response_model=RoleToggleResponse)
def toggle_admin(
    user_id: Annotated[str, Path(description="UID of the user to promote or demote")],
    admin: AuthUser = Depends(require_admin),
):
    """
    Promote a user to admin, or remove admin rights.

    Administrators cannot change their own status.
    """
    return UserService.toggle_admin(user_id, acting_id=admin.uid)


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/stats", response_model=AdminStats)
def get_stats(admin: AuthUser = Depends(require_admin)):
    return AdminService.load_stats()


@router.get("/analytics", response_model=AdminAnalytics)
def get_analytics(admin: AuthUser = Depends(require_admin)):
    return AdminService.load_analytics()


@router.post("/notifications", status_code=201)
def send_notification(
    request: AdminNotificationRequest,
    admin: AuthUser = Depends(require_admin),
):
    """
    Send an in-app notification to everyone or to specific users.
    """
    created = NotificationService.send_admin_notification(request)
    return {
        "sent": len(created),
        "ids": [notification["id"] for notification in created],
        "message": "Notification sent successfully!",
    }
