# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import date, datetime
from typing import Any


# =============================================================================
# Date Utilities
# =============================================================================

def parse_datetime(value: Any) -> datetime | None:
    """
    Coerce a stored timestamp into a naive datetime.

    Firestore documents written by the web client hold dates in several
    shapes: native timestamps (returned as timezone-aware datetimes),
    ISO strings ("2024-01-15T10:30:00.000Z") and bare dates ("2024-01-15").

    Args:
        value: datetime, date, ISO string, or None

    Returns:
        Naive datetime in the value's own wall-clock time, or None if the
        value is empty or unparseable

    Example:
        parse_datetime("2024-01-15")            # datetime(2024, 1, 15, 0, 0)
        parse_datetime("2024-01-15T10:30:00Z")  # datetime(2024, 1, 15, 10, 30)
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).replace(tzinfo=None)
        except ValueError:
            return None

    return None


def truncate(text: str | None, limit: int, default: str = "Not specified") -> str:
    """
    Shorten text to `limit` characters, marking the cut with "...".

    Missing or blank text is replaced by `default`.
    """
    if not text or not text.strip():
        return default
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
