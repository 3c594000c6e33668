# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Firebase ID token.

    This is the minimal user info available from the token itself,
    without reading the users document.
    """

    model_config = ConfigDict(frozen=True)

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    email_verified: bool = False
    provider: str = "password"

    def claims(self) -> dict[str, Any]:
        """Token-style claims, as UserService.sync_signed_in_user expects them."""
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "email_verified": self.email_verified,
        }


class UserResponse(BaseModel):
    """
    Current user as returned by GET /auth/me.

    Includes profile data from the users document when it exists.
    """

    uid: str
    email: Optional[str] = None
    displayName: Optional[str] = None
    photoURL: Optional[str] = None
    role: str = "user"
    isAdmin: bool = False
    preferences: dict[str, Any] = Field(default_factory=dict)


class AuthErrorResponse(BaseModel):
    code: str
    message: str
