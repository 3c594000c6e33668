# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Login itself happens client-side with Firebase Authentication.
# These routes cover what happens around it: creating/syncing the users
# document, email signup, and turning Firebase error codes into messages.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthErrorResponse, AuthUser, UserResponse
from core.models.user import PasswordStrength, PasswordStrengthRequest, SignupRequest
from core.services.user_service import UserService
from lib.firestore_client import FirestoreClient, USERS_COLLECTION

logger = logging.getLogger(__name__)

router = APIRouter()

AUTH_ERROR_MESSAGES = {
    "auth/user-not-found": "No account found with this email address. Please check your email or sign up.",
    "auth/wrong-password": "Incorrect password. Please try again or reset your password.",
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/user-disabled": "This account has been disabled. Please contact support.",
    "auth/too-many-requests": "Too many failed login attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Please check your internet connection and try again.",
    "auth/invalid-credential": "Invalid email or password. Please check your credentials and try again.",
    "auth/missing-password": "Please enter your password.",
    "auth/configuration-not-found": "Firebase configuration error. Please contact support.",
    "auth/api-key-not-valid": "Firebase API key is invalid. Please contact support.",
    "auth/app-not-authorized": "This app is not authorized to use Firebase Authentication.",
    "auth/popup-closed-by-user": "Sign-in was cancelled. Please try again.",
    "auth/popup-blocked": "Sign-in popup was blocked. Please allow popups and try again.",
    "auth/cancelled-popup-request": "Sign-in was cancelled. Please try again.",
    "auth/account-exists-with-different-credential":
        "An account already exists with this email. Please sign in with your original method.",
}


def describe_auth_error(code: str | None) -> str:
    """Human-readable message for a Firebase Authentication error code."""
    if code in AUTH_ERROR_MESSAGES:
        return AUTH_ERROR_MESSAGES[code]
    return f"Login failed: {code or 'Unknown error'}. Please try again."


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Falls back to token data when no users document exists yet.
    """
    user_doc = FirestoreClient.fetch_document(USERS_COLLECTION, user.uid)

    if user_doc:
        return UserResponse(
            uid=user.uid,
            email=user_doc.get("email") or user.email,
            displayName=user_doc.get("displayName"),
            photoURL=UserService.profile_image_url(user_doc),
            role="admin" if UserService.is_admin(user_doc) else "user",
            isAdmin=UserService.is_admin(user_doc),
            preferences=user_doc.get("preferences") or {},
        )

    return UserResponse(
        uid=user.uid,
        email=user.email,
        displayName=user.name,
        photoURL=user.picture,
    )


@router.get("/verify")
def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "uid": user.uid,
        "email": user.email,
    }


@router.post("/sync")
def sync_user(user: AuthUser = Depends(get_current_user)) -> dict:
    """
    Called by the client right after sign-in.

    Creates the users document on first sign-in, otherwise records the
    login time.
    """
    user_doc = UserService.sync_signed_in_user(user.claims(), provider=user.provider)
    return {
        "uid": user.uid,
        "isAdmin": UserService.is_admin(user_doc),
        "created": user_doc.get("createdAt") == user_doc.get("lastLoginAt"),
    }


@router.post("/signup", status_code=201)
def signup(request: SignupRequest) -> dict:
    """
    Register with email and password.

    Returns 400 with the first problem in the form, or if Firebase refuses
    the account (e.g. email already in use).
    """
    user_doc = UserService.register_user(request)
    return {
        "uid": user_doc["uid"],
        "email": user_doc["email"],
        "message": "Account created successfully. Please sign in.",
    }


@router.post("/password-strength", response_model=PasswordStrength)
async def password_strength(request: PasswordStrengthRequest) -> PasswordStrength:
    return PasswordStrength(**UserService.password_strength(request.password))


@router.get("/errors/{code:path}", response_model=AuthErrorResponse)
async def auth_error_message(code: str) -> AuthErrorResponse:
    """Message to show for a Firebase Authentication error code (e.g. auth/wrong-password)."""
    return AuthErrorResponse(code=code, message=describe_auth_error(code))
