# =============================================================================
# lib/firestore_client.py - Firestore Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Firestore document operations.
# It implements the singleton pattern to reuse a single Firebase app and
# Firestore client, and exposes the handful of calls the services need:
# - fetch one document by ID
# - list documents with equality/comparison filters, ordering and limits
# - add / set (optionally merged) / update / delete one document
#
# Every write is a single independent Firestore call. There are no
# transactions and no cross-collection guarantees; last write wins.
#
# Usage:
#   from lib.firestore_client import FirestoreClient
#   medicines = FirestoreClient.list_documents("medicines")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Iterable

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# Collection names (schema-in-code; Firestore creates them on first write)
USERS_COLLECTION = "users"
MEDICINES_COLLECTION = "medicines"
PRESCRIPTIONS_COLLECTION = "prescriptions"
REMINDERS_COLLECTION = "reminders"
SEARCH_HISTORY_COLLECTION = "searchHistory"
NOTIFICATIONS_COLLECTION = "notifications"

# A filter is (field, operator, value), e.g. ("userId", "==", uid)
Filter = tuple[str, str, Any]


class FirestoreClientError(ApplicationError):
    """Error during Firestore operations."""

    def __init__(
        self,
        message: str,
        code: str = "FIRESTORE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class FirestoreClient:
    """
    Typed wrapper for Firestore operations.

    All methods are class methods for easy access without instantiation.
    Documents are returned as plain dicts with the document ID merged in
    under the "id" key.

    Example:
        user = FirestoreClient.fetch_document("users", uid)
        mine = FirestoreClient.list_documents(
            "prescriptions", filters=[("userId", "==", uid)]
        )
    """

    _app: firebase_admin.App | None = None
    _instance: Any = None

    @classmethod
    def get_app(cls) -> firebase_admin.App:
        """
        Get or initialize the Firebase Admin app.

        Uses the service-account file when FIREBASE_CREDENTIALS_PATH is set,
        otherwise application default credentials.
        """
        if cls._app is None:
            try:
                cls._app = firebase_admin.get_app()
            except ValueError:
                try:
                    if settings.FIREBASE_CREDENTIALS_PATH:
                        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
                    else:
                        cred = credentials.ApplicationDefault()
                    cls._app = firebase_admin.initialize_app(
                        cred, {"projectId": settings.FIREBASE_PROJECT_ID}
                    )
                    logger.info(f"Firebase app initialized for project {settings.FIREBASE_PROJECT_ID}")
                except Exception as e:
                    raise FirestoreClientError(
                        message=f"Failed to initialize Firebase: {e}",
                        code="CLIENT_INIT_FAILED",
                        suggestion="Check FIREBASE_PROJECT_ID and FIREBASE_CREDENTIALS_PATH in your .env file"
                    )
        return cls._app

    @classmethod
    def get_client(cls):
        """
        Get or create the singleton Firestore client.

        Raises:
            FirestoreClientError: If client creation fails
        """
        if cls._instance is None:
            app = cls.get_app()
            try:
                cls._instance = firestore.client(app)
                logger.info("Firestore client initialized successfully")
            except Exception as e:
                raise FirestoreClientError(
                    message=f"Failed to create Firestore client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check that the service account has Firestore access"
                )
        return cls._instance

    @staticmethod
    def _to_dict(snapshot) -> dict[str, Any]:
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return data

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_document(cls, collection: str, document_id: str) -> dict[str, Any] | None:
        """
        Fetch a single document by ID.

        Returns:
            Document dict (with "id"), or None if it doesn't exist

        Raises:
            FirestoreClientError: If the read fails
        """
        client = cls.get_client()

        try:
            snapshot = client.collection(collection).document(document_id).get()
        except Exception as e:
            raise FirestoreClientError(
                message=f"Failed to fetch {collection}/{document_id}: {e}",
                code="FETCH_DOCUMENT_FAILED",
                details={"collection": collection, "document_id": document_id}
            )

        if not snapshot.exists:
            return None
        return cls._to_dict(snapshot)

    @classmethod
    def list_documents(
        cls,
        collection: str,
        filters: Iterable[Filter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        List documents in a collection.

        Args:
            collection: Collection name
            filters: (field, op, value) tuples, combined with AND
            order_by: Optional field to sort by on the server
            descending: Sort direction for order_by
            limit: Maximum number of documents

        Returns:
            List of document dicts (each with "id")

        Raises:
            FirestoreClientError: If the query fails

        Note:
            Ordering on a different field than an equality filter needs a
            composite index, so most callers sort in memory instead.
        """
        client = cls.get_client()
        filters = list(filters or [])

        try:
            query = client.collection(collection)
            for field, op, value in filters:
                query = query.where(filter=FieldFilter(field, op, value))
            if order_by:
                direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
                query = query.order_by(order_by, direction=direction)
            if limit:
                query = query.limit(limit)

            documents = [cls._to_dict(snapshot) for snapshot in query.stream()]
            logger.debug(f"Fetched {len(documents)} documents from {collection}")
            return documents

        except Exception as e:
            raise FirestoreClientError(
                message=f"Failed to list {collection}: {e}",
                code="LIST_DOCUMENTS_FAILED",
                suggestion="If the error mentions an index, create it from the link in the message",
                details={"collection": collection, "filters": [f"{f} {op} {v}" for f, op, v in filters]}
            )

    @classmethod
    def count_documents(cls, collection: str, filters: Iterable[Filter] | None = None) -> int:
        """Count documents matching the filters."""
        return len(cls.list_documents(collection, filters=filters))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def add_document(cls, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Add a document with a generated ID.

        Returns:
            The stored data with its new "id"

        Raises:
            FirestoreClientError: If the write fails
        """
        client = cls.get_client()

        try:
            _, doc_ref = client.collection(collection).add(data)
            logger.info(f"Added document {collection}/{doc_ref.id}")
            return {**data, "id": doc_ref.id}

        except Exception as e:
            raise FirestoreClientError(
                message=f"Failed to add document to {collection}: {e}",
                code="ADD_DOCUMENT_FAILED",
                details={"collection": collection}
            )

    @classmethod
    def set_document(
        cls,
        collection: str,
        document_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """
        Create or overwrite a document with a known ID.

        With merge=True only the given fields are written.
        """
        client = cls.get_client()

        try:
            client.collection(collection).document(document_id).set(data, merge=merge)
            logger.info(f"Set document {collection}/{document_id} (merge={merge})")

        except Exception as e:
            raise FirestoreClientError(
                message=f"Failed to set {collection}/{document_id}: {e}",
                code="SET_DOCUMENT_FAILED",
                details={"collection": collection, "document_id": document_id}
            )

    @classmethod
    def update_document(cls, collection: str, document_id: str, data: dict[str, Any]) -> None:
        """
        Update fields of an existing document.

        Raises:
            FirestoreClientError: If the document is missing or the write fails
        """
        client = cls.get_client()

        try:
            client.collection(collection).document(document_id).update(data)
            logger.info(f"Updated document {collection}/{document_id}")

        except Exception as e:
            raise FirestoreClientError(
                message=f"Failed to update {collection}/{document_id}: {e}",
                code="UPDATE_DOCUMENT_FAILED",
                suggestion="Check that the document still exists",
                details={"collection": collection, "document_id": document_id}
            )

    @classmethod
    def delete_document(cls, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        client = cls.get_client()

        try:
            client.collection(collection).document(document_id).delete()
            logger.info(f"Deleted document {collection}/{document_id}")

        except Exception as e:
            raise FirestoreClientError(
                message=f"Failed to delete {collection}/{document_id}: {e}",
                code="DELETE_DOCUMENT_FAILED",
                details={"collection": collection, "document_id": document_id}
            )
