# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - firestore_client.py: Typed Firestore wrapper for document operations
# - supabase_client.py: Shared Supabase client (Storage only)
# - utils.py: Shared utilities (error base class, date parsing, truncation)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.firestore_client import FirestoreClient, FirestoreClientError
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError, parse_datetime, truncate

__all__ = [
    # Firestore
    "FirestoreClient",
    "FirestoreClientError",
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "parse_datetime",
    "truncate",
]
