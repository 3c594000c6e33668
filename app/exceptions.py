# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class MediCheckerException(Exception):
    """
    Base exception for the MediChecker API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MEDICHECKER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authorization Exceptions
# =============================================================================

class AdminRequiredError(MediCheckerException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Administrator access is required",
            code="ADMIN_REQUIRED",
            status_code=403,
            suggestion="Ask an existing administrator to grant your account the admin role",
            details={"user_id": user_id}
        )


class SignupValidationError(MediCheckerException):
    """Raised when the signup form is incomplete or inconsistent."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="SIGNUP_INVALID",
            status_code=400,
            details={"field": field} if field else None
        )


# =============================================================================
# Medicine Exceptions
# =============================================================================

class MedicineNotFoundError(MediCheckerException):
    """Raised when a medicine ID doesn't exist."""

    def __init__(self, medicine_id: str):
        super().__init__(
            message=f"Medicine not found: {medicine_id}",
            code="MEDICINE_NOT_FOUND",
            status_code=404,
            suggestion="Reload the medicine list; it may have been deleted",
            details={"medicine_id": medicine_id}
        )


class MedicineValidationError(MediCheckerException):
    """Raised when the medicine form is missing required fields."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Please fill in at least the medicine name and category.",
            code="MEDICINE_INVALID",
            status_code=400,
            details={"missing_fields": missing}
        )


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(MediCheckerException):
    """Raised when a user document doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Sign in once so your profile is created, then retry",
            details={"user_id": user_id}
        )


class SelfRoleChangeError(MediCheckerException):
    """Raised when an admin tries to change their own admin flag."""

    def __init__(self, user_id: str):
        super().__init__(
            message="You cannot modify your own admin status.",
            code="SELF_ROLE_CHANGE",
            status_code=400,
            suggestion="Ask another administrator to change your role",
            details={"user_id": user_id}
        )


# =============================================================================
# Prescription / Reminder / History Exceptions
# =============================================================================

class PrescriptionNotFoundError(MediCheckerException):
    """Raised when a prescription doesn't exist or belongs to someone else."""

    def __init__(self, prescription_id: str):
        super().__init__(
            message=f"Prescription not found: {prescription_id}",
            code="PRESCRIPTION_NOT_FOUND",
            status_code=404,
            details={"prescription_id": prescription_id}
        )


class PrescriptionValidationError(MediCheckerException):
    """Raised when medicine, dosage or start date is missing."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Please fill all required fields.",
            code="PRESCRIPTION_INVALID",
            status_code=400,
            details={"missing_fields": missing}
        )


class ReminderNotFoundError(MediCheckerException):
    """Raised when a reminder doesn't exist or belongs to someone else."""

    def __init__(self, reminder_id: str):
        super().__init__(
            message=f"Reminder not found: {reminder_id}",
            code="REMINDER_NOT_FOUND",
            status_code=404,
            details={"reminder_id": reminder_id}
        )


class ReminderValidationError(MediCheckerException):
    """Raised when medicine name or dosage is missing, or a time is malformed."""

    def __init__(self, missing: list[str], message: str = "Please fill in required fields."):
        super().__init__(
            message=message,
            code="REMINDER_INVALID",
            status_code=400,
            suggestion="Times must use 24-hour HH:MM format" if "times" in missing else None,
            details={"missing_fields": missing}
        )


class HistoryItemNotFoundError(MediCheckerException):
    """Raised when a search history item doesn't exist for this user."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"History item not found: {item_id}",
            code="HISTORY_ITEM_NOT_FOUND",
            status_code=404,
            details={"item_id": item_id}
        )


class NotificationValidationError(MediCheckerException):
    """Raised when an admin notification is missing its title or message."""

    def __init__(self):
        super().__init__(
            message="Please fill in both title and message",
            code="NOTIFICATION_INVALID",
            status_code=400,
        )


class NotificationNotFoundError(MediCheckerException):
    """Raised when a notification isn't visible to the caller."""

    def __init__(self, notification_id: str):
        super().__init__(
            message=f"Notification not found: {notification_id}",
            code="NOTIFICATION_NOT_FOUND",
            status_code=404,
            details={"notification_id": notification_id}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidImageError(MediCheckerException):
    """Raised when an uploaded avatar is not a usable image."""

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(
            message=message,
            code="INVALID_IMAGE",
            status_code=400,
            suggestion="Select a JPG, PNG or GIF image between 50x50 and 4000x4000 pixels",
            details={"filename": filename} if filename else None
        )


class ImageTooLargeError(MediCheckerException):
    """Raised when uploaded avatar exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image size must be less than {max_mb}MB.",
            code="IMAGE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an image smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class StorageUploadError(MediCheckerException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Upload failed: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# External Provider Exceptions
# =============================================================================

class PharmacyLookupError(MediCheckerException):
    """Raised when a pharmacy directory can't be reached or answers with an error."""

    def __init__(self, provider: str, error: str):
        super().__init__(
            message=f"{provider} lookup failed: {error}",
            code="PHARMACY_LOOKUP_FAILED",
            status_code=502,
            suggestion="Try again in a moment, or search a different area",
            details={"provider": provider, "error": error}
        )


class ProviderNotConfiguredError(MediCheckerException):
    """Raised when a keyed provider is called without its API key."""

    def __init__(self, provider: str, setting: str):
        super().__init__(
            message=f"{provider} is not configured",
            code="PROVIDER_NOT_CONFIGURED",
            status_code=503,
            suggestion=f"Set {setting} in the environment",
            details={"provider": provider}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def medichecker_exception_handler(
    request: Request,
    exc: MediCheckerException
) -> JSONResponse:
    """
    Convert MediCheckerException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
