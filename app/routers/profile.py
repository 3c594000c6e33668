# =============================================================================
# app/routers/profile.py - Profile Endpoints
# =============================================================================
# The signed-in user's own profile: details, preferences, avatar and the
# push notification token.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import get_current_user, AuthUser
from core.models.user import PreferencesUpdate, ProfileUpdate, PushTokenUpdate
from core.services.storage_service import StorageService
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_profile(user: AuthUser = Depends(get_current_user)):
    """
    The caller's users document with the avatar URL resolved.
    """
    user_doc = UserService.get_user(user.uid)
    user_doc.pop("fcmToken", None)
    return {
        **user_doc,
        "isAdmin": UserService.is_admin(user_doc),
        "profileImageUrl": UserService.profile_image_url(user_doc),
    }


@router.patch("")
def update_profile(
    form: ProfileUpdate,
    user: AuthUser = Depends(get_current_user),
):
    updates = UserService.update_profile(user.uid, form)
    return {"updated": updates, "message": "Profile updated successfully!"}


@router.put("/preferences")
def update_preferences(
    preferences: PreferencesUpdate,
    user: AuthUser = Depends(get_current_user),
):
    saved = UserService.update_preferences(user.uid, preferences)
    return {"preferences": saved, "message": "Settings saved successfully!"}


@router.post("/avatar")
def upload_avatar(
    file: Annotated[UploadFile, File(description="Profile picture (JPG, PNG, GIF)")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a new profile picture.

    The image must be at most 5MB and between 50x50 and 4000x4000 pixels.
    A previous Supabase-hosted picture is removed.
    """
    filename = file.filename or "avatar.jpg"
    content = file.file.read()
    width, height = StorageService.validate_image(content, file.content_type, filename)
    logger.info(f"Avatar upload from {user.uid}: {filename} {width}x{height}")

    user_doc = UserService.get_user(user.uid)
    url = StorageService.upload_avatar(
        user.uid,
        content,
        filename,
        file.content_type,
        previous_url=user_doc.get("profilePictureUrl") or user_doc.get("photoURL"),
    )
    UserService.set_avatar(user.uid, url)
    return {"profilePictureUrl": url, "message": "Profile picture updated successfully!"}


@router.delete("/avatar")
def remove_avatar(user: AuthUser = Depends(get_current_user)):
    user_doc = UserService.get_user(user.uid)
    StorageService.remove_avatar(user_doc.get("profilePictureUrl") or user_doc.get("photoURL"))
    UserService.set_avatar(user.uid, None)

    cleared = {**user_doc, "photoURL": None, "profilePictureUrl": None}
    return {
        "profileImageUrl": UserService.profile_image_url(cleared),
        "message": "Profile picture removed successfully!",
    }


@router.put("/push-token")
def register_push_token(
    request: PushTokenUpdate,
    user: AuthUser = Depends(get_current_user),
):
    UserService.register_push_token(user.uid, request.token)
    return {"registered": True}
