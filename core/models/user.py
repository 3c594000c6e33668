# =============================================================================
# core/models/user.py - User / Profile Schemas
# =============================================================================
# - SignupRequest: Registration form
# - ProfileUpdate: Editable profile fields
# - PreferencesUpdate: Theme, notification and privacy flags
# - PushTokenUpdate: FCM registration token
# - PasswordStrength: Signup password meter
# - RoleToggleResponse: Result of an admin toggle
# =============================================================================

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """
    Registration form.

    Checked field by field in UserService.register_user so that the first
    problem is reported the way the signup page shows it.
    """

    model_config = ConfigDict(extra="ignore")

    firstName: str = ""
    middleName: str = ""
    lastName: str = ""
    email: str = ""
    gender: str = ""
    password: str = ""
    confirmPassword: str = ""
    acceptTerms: bool = False


class EmergencyContact(BaseModel):
    name: str = ""
    phone: str = ""
    relationship: str = ""


class ProfileUpdate(BaseModel):
    """Fields the profile page can edit. Unset fields are left alone."""

    model_config = ConfigDict(extra="ignore")

    displayName: str | None = Field(default=None, max_length=100)
    phone: str | None = None
    dateOfBirth: str | None = None
    emergencyContact: EmergencyContact | None = None


class NotificationPreferences(BaseModel):
    email: bool = True
    push: bool = True
    sms: bool = False


class PrivacyPreferences(BaseModel):
    profileVisible: bool = True
    dataSharing: bool = False


class PreferencesUpdate(BaseModel):
    """
    User preferences.

    Example:
        {
            "theme": "dark",
            "notifications": {"email": true, "push": false, "sms": false},
            "privacy": {"profileVisible": true, "dataSharing": false}
        }
    """

    theme: Literal["light", "dark"] = "light"
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    privacy: PrivacyPreferences = Field(default_factory=PrivacyPreferences)


class PushTokenUpdate(BaseModel):
    token: str = Field(..., min_length=1, description="FCM registration token for this browser")


class PasswordStrengthRequest(BaseModel):
    password: str = ""


class PasswordStrength(BaseModel):
    """Password meter: score 0-5 with a label and display color."""

    score: int = Field(..., ge=0, le=5)
    label: str
    color: str


class RoleToggleResponse(BaseModel):
    userId: str
    isAdmin: bool
    role: Literal["admin", "user"]
    message: str
