# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides the shared Supabase client. Only Supabase Storage is
# used (profile pictures); documents live in Firestore.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   bucket = SupabaseClient.bucket("profile-pictures")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(ApplicationError):
    """Error during Supabase operations."""

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class SupabaseClient:
    """
    Singleton holder for the Supabase client.

    Uses the service_role key when configured (server-side uploads bypass
    storage policies), otherwise the anon key, matching the web client.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            key = settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_ANON_KEY
            try:
                cls._instance = create_client(settings.SUPABASE_URL, key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def bucket(cls, name: str):
        """Storage bucket handle (``client.storage.from_(name)``)."""
        return cls.get_client().storage.from_(name)
