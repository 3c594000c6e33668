# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Clients sign in with Firebase Authentication and send the resulting ID
# token as a Bearer token. Tokens are verified with firebase_admin, which
# checks signature, audience (the Firebase project) and expiry.
#
# Admin access is decided here, from the caller's users document, never
# from anything the client sends.
#
# Usage:
#   from app.auth import get_current_user, require_admin, AuthUser
#
#   @router.get("/protected")
#   def protected(user: AuthUser = Depends(get_current_user)):
#       return {"uid": user.uid}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth as firebase_auth

from app.auth.models import AuthUser
from app.exceptions import AdminRequiredError
from core.services.user_service import UserService
from lib.firestore_client import FirestoreClient, USERS_COLLECTION

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str) -> AuthUser:
    """
    Verify a Firebase ID token and build the AuthUser.

    Raises:
        HTTPException: 401 if the token is expired, revoked or invalid
    """
    try:
        claims = firebase_auth.verify_id_token(token, app=FirestoreClient.get_app())

    except firebase_auth.ExpiredIdTokenError:
        logger.warning("ID token has expired")
        raise _unauthorized("Token has expired")

    except firebase_auth.RevokedIdTokenError:
        logger.warning("ID token has been revoked")
        raise _unauthorized("Token has been revoked")

    except (firebase_auth.InvalidIdTokenError, ValueError) as e:
        logger.warning(f"ID token validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    uid = claims.get("uid") or claims.get("sub")
    if not uid:
        logger.warning("ID token missing uid")
        raise _unauthorized("Invalid token: missing user ID")

    provider = (claims.get("firebase") or {}).get("sign_in_provider", "password")

    logger.debug(f"Authenticated user: {uid}")
    return AuthUser(
        uid=uid,
        email=claims.get("email"),
        name=claims.get("name"),
        picture=claims.get("picture"),
        email_verified=bool(claims.get("email_verified", False)),
        provider=provider,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Extract and validate the user from the Firebase ID token.

    Raises:
        HTTPException: 401 if token is missing, invalid or expired
    """
    return verify_token(credentials.credentials)


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional)
) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None if no token is provided or the token is invalid, instead
    of raising an error. Used by endpoints that work for guests too, such
    as medicine search.
    """
    if credentials is None:
        return None

    try:
        return verify_token(credentials.credentials)
    except HTTPException:
        return None


def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Allow only administrators through.

    Raises:
        AdminRequiredError: 403 unless the users document has role "admin"
            or isAdmin true
    """
    user_doc = FirestoreClient.fetch_document(USERS_COLLECTION, user.uid)
    if not UserService.is_admin(user_doc):
        logger.warning(f"Non-admin {user.uid} tried to reach an admin endpoint")
        raise AdminRequiredError(user.uid)
    return user
