# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles profile picture upload/removal with Supabase Storage.
# Images are checked with Pillow before anything is uploaded.
# =============================================================================

import io
import logging
import time

from PIL import Image, UnidentifiedImageError

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import ImageTooLargeError, InvalidImageError, StorageUploadError

logger = logging.getLogger(__name__)

# Folder inside the bucket that holds avatars
AVATAR_FOLDER = "profile-pictures"


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading and removing profile pictures.
    """

    @staticmethod
    def validate_image(
        content: bytes,
        content_type: str | None,
        filename: str | None = None,
    ) -> tuple[int, int]:
        """
        Check an uploaded avatar.

        Args:
            content: Raw file bytes
            content_type: MIME type sent by the browser
            filename: Original filename (for error details)

        Returns:
            (width, height) of the image

        Raises:
            InvalidImageError: Not an image, unreadable, or outside the size bounds
            ImageTooLargeError: File larger than MAX_AVATAR_SIZE_MB
        """
        if not content_type or not content_type.startswith("image/"):
            raise InvalidImageError("Please select a valid image file.", filename)

        if len(content) > settings.max_avatar_size_bytes:
            raise ImageTooLargeError(len(content) / (1024 * 1024), settings.MAX_AVATAR_SIZE_MB)

        try:
            with Image.open(io.BytesIO(content)) as image:
                width, height = image.size
        except (UnidentifiedImageError, OSError):
            raise InvalidImageError("Invalid image file. Please select a different image.", filename)

        low, high = settings.MIN_AVATAR_DIMENSION, settings.MAX_AVATAR_DIMENSION
        if not (low <= width <= high and low <= height <= high):
            raise InvalidImageError(
                f"Image dimensions must be between {low}x{low} and {high}x{high} pixels.",
                filename,
            )

        return width, height

    @staticmethod
    def avatar_path(uid: str, filename: str) -> str:
        """Storage path: profile-pictures/<uid>-<millis>.<ext>"""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
        return f"{AVATAR_FOLDER}/{uid}-{int(time.time() * 1000)}.{ext}"

    @staticmethod
    def upload_avatar(
        uid: str,
        content: bytes,
        filename: str,
        content_type: str,
        previous_url: str | None = None,
    ) -> str:
        """
        Upload a new profile picture.

        Args:
            uid: Owner's UID (part of the object name)
            content: Image bytes (already validated)
            filename: Original filename, for the extension
            content_type: MIME type to store
            previous_url: Current avatar URL; removed if it lives in Supabase

        Returns:
            Public URL of the uploaded image

        Raises:
            StorageUploadError: If the upload fails
        """
        if previous_url:
            StorageService.remove_avatar(previous_url)

        path = StorageService.avatar_path(uid, filename)
        bucket = SupabaseClient.bucket(settings.PROFILE_PICTURES_BUCKET)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "true",
                },
            )
            logger.info(f"Uploaded avatar to storage: {path}")
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        public_url = bucket.get_public_url(path)
        if not public_url:
            raise StorageUploadError("Failed to get public URL for uploaded image")
        return public_url

    @staticmethod
    def remove_avatar(url: str | None) -> bool:
        """
        Delete a Supabase-hosted avatar.

        URLs that don't point at Supabase (e.g. Google profile photos) are
        left alone. Failures are logged, not raised.

        Returns:
            True if a delete was issued and succeeded
        """
        if not url or "supabase" not in url:
            return False

        object_name = url.split("?")[0].rstrip("/").split("/")[-1]
        path = f"{AVATAR_FOLDER}/{object_name}"

        try:
            SupabaseClient.bucket(settings.PROFILE_PICTURES_BUCKET).remove([path])
            logger.info(f"Removed avatar from storage: {path}")
            return True
        except Exception as e:
            logger.warning(f"Could not delete avatar {path}: {e}")
            return False
