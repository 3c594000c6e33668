# =============================================================================
# core/services/user_service.py - Users, Roles and Profile
# =============================================================================
# Handles the `users` collection:
# - admin checks and the admin role toggle
# - creating the user document on signup / first sign-in
# - profile, preference and push-token updates
#
# Firebase Authentication accounts are managed through firebase_admin.auth;
# the Firestore document is the profile that goes with the account.
# =============================================================================

import logging
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from app.exceptions import SelfRoleChangeError, SignupValidationError, UserNotFoundError
from core.models.user import PreferencesUpdate, ProfileUpdate, SignupRequest
from lib.firestore_client import FirestoreClient, USERS_COLLECTION

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8

# score -> (label, color)
STRENGTH_LEVELS = {
    0: ("Very Weak", "#dc3545"),
    1: ("Very Weak", "#dc3545"),
    2: ("Weak", "#fd7e14"),
    3: ("Fair", "#ffc107"),
    4: ("Good", "#20c997"),
    5: ("Strong", "#28a745"),
}

AVATAR_FALLBACK_URL = (
    "https://ui-avatars.com/api/?name={initials}"
    "&background=10b981&color=fff&size=120&font-size=0.6&bold=true"
)


def default_preferences() -> dict[str, Any]:
    return PreferencesUpdate().model_dump()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserService:
    """
    Service for user documents and account management.
    """

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    @staticmethod
    def is_admin(user_doc: dict[str, Any] | None) -> bool:
        """A user is an admin if role == "admin" or isAdmin is True."""
        if not user_doc:
            return False
        return user_doc.get("role") == "admin" or user_doc.get("isAdmin") is True

    @staticmethod
    def display_name(user_doc: dict[str, Any]) -> str:
        """Best available human name for a user document."""
        if user_doc.get("displayName"):
            return user_doc["displayName"]
        full_name = " ".join(
            part for part in (user_doc.get("firstName"), user_doc.get("lastName")) if part
        )
        return full_name or user_doc.get("email") or "User"

    @staticmethod
    def get_user(user_id: str) -> dict[str, Any]:
        """
        Raises:
            UserNotFoundError: If no users document exists for this UID
        """
        user = FirestoreClient.fetch_document(USERS_COLLECTION, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    @staticmethod
    def list_users() -> list[dict[str, Any]]:
        return FirestoreClient.list_documents(USERS_COLLECTION)

    @staticmethod
    def filter_users(
        users: list[dict[str, Any]],
        search_term: str = "",
        role: str = "all",
    ) -> list[dict[str, Any]]:
        """
        Filter the admin user list.

        Args:
            users: User documents
            search_term: Case-insensitive match on name or email
            role: "all", "admin" or "user"
        """
        term = search_term.strip().lower()
        result = []
        for user in users:
            if term:
                haystack = " ".join(
                    str(user.get(field) or "")
                    for field in ("displayName", "firstName", "lastName", "email")
                ).lower()
                if term not in haystack:
                    continue
            admin = UserService.is_admin(user)
            if role == "admin" and not admin:
                continue
            if role == "user" and admin:
                continue
            result.append(user)
        return result

    @staticmethod
    def toggle_admin(target_id: str, acting_id: str) -> dict[str, Any]:
        """
        Flip a user's admin flag.

        Args:
            target_id: UID of the user to promote/demote
            acting_id: UID of the admin performing the change

        Returns:
            Dict with userId, isAdmin, role and a confirmation message

        Raises:
            SelfRoleChangeError: If an admin targets themself (nothing is written)
            UserNotFoundError: If the target doesn't exist
        """
        if target_id == acting_id:
            raise SelfRoleChangeError(acting_id)

        target = UserService.get_user(target_id)
        new_status = not UserService.is_admin(target)
        role = "admin" if new_status else "user"

        FirestoreClient.update_document(USERS_COLLECTION, target_id, {
            "isAdmin": new_status,
            "role": role,
        })

        name = UserService.display_name(target)
        action = "promoted to" if new_status else "removed from"
        logger.info(f"User {target_id} {action} admin by {acting_id}")
        return {
            "userId": target_id,
            "isAdmin": new_status,
            "role": role,
            "message": f"{name} {action} admin successfully!",
        }

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @staticmethod
    def sync_signed_in_user(auth_user: dict[str, Any], provider: str = "password") -> dict[str, Any]:
        """
        Make sure a signed-in user has a users document.

        Creates it with default preferences on first sign-in; afterwards
        only the login bookkeeping fields are merged in.

        Args:
            auth_user: Decoded ID token claims (uid, email, name, picture, ...)
            provider: Sign-in provider ID
        """
        uid = auth_user["uid"]
        existing = FirestoreClient.fetch_document(USERS_COLLECTION, uid)
        now = _now_iso()

        if existing is None:
            display_name = auth_user.get("name") or None
            name_parts = (display_name or "").split(" ")
            user_doc = {
                "uid": uid,
                "email": auth_user.get("email"),
                "displayName": display_name,
                "photoURL": auth_user.get("picture"),
                "emailVerified": bool(auth_user.get("email_verified", False)),
                "provider": provider,
                "createdAt": now,
                "updatedAt": now,
                "lastLoginAt": now,
                "isActive": True,
                "role": "user",
                "profile": {
                    "firstName": name_parts[0] if display_name else "",
                    "lastName": " ".join(name_parts[1:]) if display_name else "",
                    "dateOfBirth": None,
                    "gender": None,
                },
                "preferences": default_preferences(),
            }
            FirestoreClient.set_document(USERS_COLLECTION, uid, user_doc)
            logger.info(f"Created users document for {uid} ({provider})")
            return {**user_doc, "id": uid}

        updates = {
            "updatedAt": now,
            "lastLoginAt": now,
            "emailVerified": bool(auth_user.get("email_verified", False)),
        }
        FirestoreClient.set_document(USERS_COLLECTION, uid, updates, merge=True)
        return {**existing, **updates}

    @staticmethod
    def validate_signup(form: SignupRequest) -> None:
        """
        Check the signup form, reporting the first problem found.

        Raises:
            SignupValidationError: With the message the signup page shows
        """
        if not form.firstName.strip():
            raise SignupValidationError("First name is required", "firstName")
        if not form.lastName.strip():
            raise SignupValidationError("Last name is required", "lastName")
        if not form.email.strip():
            raise SignupValidationError("Email is required", "email")
        if not EMAIL_PATTERN.match(form.email.strip()):
            raise SignupValidationError("Please enter a valid email address", "email")
        if not form.gender:
            raise SignupValidationError("Please select your gender", "gender")
        if not form.password:
            raise SignupValidationError("Password is required", "password")
        if len(form.password) < MIN_PASSWORD_LENGTH:
            raise SignupValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", "password"
            )
        if not form.confirmPassword:
            raise SignupValidationError("Please confirm your password", "confirmPassword")
        if form.password != form.confirmPassword:
            raise SignupValidationError("Passwords do not match", "confirmPassword")
        if not form.acceptTerms:
            raise SignupValidationError("You must accept the terms and conditions", "acceptTerms")

    @staticmethod
    def register_user(form: SignupRequest) -> dict[str, Any]:
        """
        Create a Firebase Authentication account and its users document.

        Returns:
            The stored users document

        Raises:
            SignupValidationError: If the form is invalid or Firebase rejects it
        """
        UserService.validate_signup(form)
        email = form.email.strip()
        display_name = " ".join(part for part in (form.firstName.strip(), form.lastName.strip()) if part)

        try:
            account = firebase_auth.create_user(
                email=email,
                password=form.password,
                display_name=display_name,
                app=FirestoreClient.get_app(),
            )
        except firebase_auth.EmailAlreadyExistsError:
            raise SignupValidationError("The email address is already in use by another account.", "email")
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning(f"Firebase rejected signup for {email}: {e}")
            raise SignupValidationError(str(e))

        user_doc = {
            "uid": account.uid,
            "userId": account.uid,
            "firstName": form.firstName.strip(),
            "middleName": form.middleName.strip(),
            "lastName": form.lastName.strip(),
            "displayName": display_name,
            "email": email,
            "gender": form.gender,
            "role": "user",
            "isActive": True,
            "createdAt": _now_iso(),
            "hasProfilePicture": False,
            "profilePictureUrl": None,
            "preferences": default_preferences(),
        }
        FirestoreClient.set_document(USERS_COLLECTION, account.uid, user_doc)
        logger.info(f"Registered user {account.uid}")
        return {**user_doc, "id": account.uid}

    @staticmethod
    def password_strength(password: str) -> dict[str, Any]:
        """
        Score a password 0-5: one point each for length >= 8, an uppercase
        letter, a lowercase letter, a digit and a symbol.
        """
        checks = (
            len(password) >= MIN_PASSWORD_LENGTH,
            re.search(r"[A-Z]", password) is not None,
            re.search(r"[a-z]", password) is not None,
            re.search(r"[0-9]", password) is not None,
            re.search(r"[^A-Za-z0-9]", password) is not None,
        )
        score = sum(checks)
        label, color = STRENGTH_LEVELS[score]
        return {"score": score, "label": label, "color": color}

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    @staticmethod
    def update_profile(uid: str, form: ProfileUpdate) -> dict[str, Any]:
        """
        Save profile edits.

        displayName is mirrored onto the Firebase Authentication user so
        that new ID tokens carry it.
        """
        updates = form.model_dump(exclude_unset=True)
        updates["updatedAt"] = _now_iso()

        if form.displayName is not None:
            firebase_auth.update_user(uid, display_name=form.displayName, app=FirestoreClient.get_app())

        FirestoreClient.set_document(USERS_COLLECTION, uid, updates, merge=True)
        logger.info(f"Profile updated for {uid}: {sorted(updates)}")
        return updates

    @staticmethod
    def update_preferences(uid: str, preferences: PreferencesUpdate) -> dict[str, Any]:
        data = {"preferences": preferences.model_dump(), "updatedAt": _now_iso()}
        FirestoreClient.set_document(USERS_COLLECTION, uid, data, merge=True)
        return data["preferences"]

    @staticmethod
    def set_avatar(uid: str, url: str | None) -> None:
        """Store (or clear) the profile picture URL in both places it is read from."""
        FirestoreClient.set_document(USERS_COLLECTION, uid, {
            "photoURL": url,
            "profilePictureUrl": url,
            "hasProfilePicture": url is not None,
            "updatedAt": _now_iso(),
        }, merge=True)
        firebase_auth.update_user(uid, photo_url=url, app=FirestoreClient.get_app())

    @staticmethod
    def register_push_token(uid: str, token: str) -> None:
        FirestoreClient.set_document(USERS_COLLECTION, uid, {
            "fcmToken": token,
            "updatedAt": _now_iso(),
        }, merge=True)
        logger.info(f"Registered push token for {uid}")

    @staticmethod
    def profile_image_url(user_doc: dict[str, Any]) -> str:
        """
        URL to show as the user's avatar.

        profilePictureUrl, then photoURL, then a generated initials avatar.
        """
        if user_doc.get("profilePictureUrl"):
            return user_doc["profilePictureUrl"]
        if user_doc.get("photoURL"):
            return user_doc["photoURL"]

        email = user_doc.get("email") or ""
        name = user_doc.get("displayName") or email.split("@")[0] or "User"
        initials = "".join(word[0] for word in name.split() if word)[:2].upper()
        return AVATAR_FALLBACK_URL.format(initials=quote(initials, safe=""))
