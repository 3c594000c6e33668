# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides Firebase ID token authentication and the admin guard.
#
# Usage:
#   from app.auth import get_current_user, require_admin, AuthUser
#
#   @router.get("/protected")
#   def protected(user: AuthUser = Depends(get_current_user)):
#       return {"uid": user.uid}
# =============================================================================

from app.auth.dependencies import get_current_user, get_current_user_optional, require_admin
from app.auth.models import AuthUser, UserResponse

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "require_admin",
    "AuthUser",
    "UserResponse",
]
