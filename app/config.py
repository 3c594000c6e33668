# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.FIREBASE_PROJECT_ID)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Firebase Configuration
    # -------------------------------------------------------------------------
    # Firestore is the system of record; Firebase Auth issues the ID tokens
    # that clients send as Bearer tokens.

    FIREBASE_PROJECT_ID: str = Field(
        ...,
        description="Firebase project ID (used for Firestore and token audience)"
    )

    FIREBASE_CREDENTIALS_PATH: str | None = Field(
        default=None,
        description="Path to a service-account JSON file (falls back to application default credentials)"
    )

    FIREBASE_SERVER_KEY: str | None = Field(
        default=None,
        description="Legacy FCM server key used by the push relay"
    )

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Only Supabase Storage is used (profile pictures)

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (preferred for server-side uploads)"
    )

    PROFILE_PICTURES_BUCKET: str = Field(
        default="profile-pictures",
        description="Storage bucket holding avatar images"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    REMINDER_SCAN_INTERVAL_SECONDS: int = Field(
        default=60,
        ge=10,
        le=3600,
        description="How often the worker looks for reminders that are due"
    )

    # -------------------------------------------------------------------------
    # External Drug APIs / Push
    # -------------------------------------------------------------------------

    OPENFDA_BASE_URL: str = Field(
        default="https://api.fda.gov",
        description="openFDA API root"
    )

    RXNAV_BASE_URL: str = Field(
        default="https://rxnav.nlm.nih.gov",
        description="RxNav API root"
    )

    FCM_SEND_URL: str = Field(
        default="https://fcm.googleapis.com/fcm/send",
        description="Legacy FCM HTTP send endpoint"
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for each outbound HTTP call"
    )

    SEARCH_RESULT_LIMIT: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Maximum number of medicines returned by one search"
    )

    FDA_RESULTS_PER_QUERY: int = Field(
        default=10,
        ge=1,
        le=100,
        description="limit= parameter sent with each openFDA query"
    )

    # -------------------------------------------------------------------------
    # Pharmacy Locator
    # -------------------------------------------------------------------------
    # OpenStreetMap needs no key; Google Places and CollectAPI lookups are
    # refused with a 503 until their key is set.

    OVERPASS_ENDPOINTS: str = Field(
        default="https://overpass-api.de/api/interpreter,https://overpass.kumi.systems/api/interpreter",
        description="Overpass interpreter URLs, tried in order (comma-separated)"
    )

    GOOGLE_PLACES_BASE_URL: str = Field(
        default="https://maps.googleapis.com/maps/api/place",
        description="Google Places API root"
    )

    GOOGLE_PLACES_API_KEY: str | None = Field(
        default=None,
        description="Google Places key for nearby pharmacy search"
    )

    COLLECTAPI_BASE_URL: str = Field(
        default="https://api.collectapi.com",
        description="CollectAPI root (Turkish duty pharmacies)"
    )

    COLLECTAPI_KEY: str | None = Field(
        default=None,
        description="CollectAPI key, without the 'apikey ' prefix"
    )

    # -------------------------------------------------------------------------
    # Health Assistant
    # -------------------------------------------------------------------------
    # Providers are tried in order (Gemini, then Hugging Face); with neither
    # key set the assistant answers from its built-in knowledge base.

    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API root"
    )

    GEMINI_API_KEY: str | None = Field(
        default=None,
        description="Gemini API key"
    )

    GEMINI_MODELS: str = Field(
        default="gemini-1.5-flash,gemini-pro",
        description="Gemini models to try, in order (comma-separated)"
    )

    HUGGINGFACE_BASE_URL: str = Field(
        default="https://api-inference.huggingface.co/models",
        description="Hugging Face Inference API root"
    )

    HUGGINGFACE_API_KEY: str | None = Field(
        default=None,
        description="Hugging Face Inference API token"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Avatar Upload Settings
    # -------------------------------------------------------------------------

    MAX_AVATAR_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum profile picture size in MB"
    )

    MIN_AVATAR_DIMENSION: int = Field(
        default=50,
        ge=1,
        description="Smallest accepted width/height in pixels"
    )

    MAX_AVATAR_DIMENSION: int = Field(
        default=4000,
        ge=1,
        description="Largest accepted width/height in pixels"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://medichecker.app" -> ["http://localhost:3000", "https://medichecker.app"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def overpass_endpoints_list(self) -> list[str]:
        return [url.strip() for url in self.OVERPASS_ENDPOINTS.split(",") if url.strip()]

    @property
    def gemini_models_list(self) -> list[str]:
        return [model.strip() for model in self.GEMINI_MODELS.split(",") if model.strip()]

    @property
    def max_avatar_size_bytes(self) -> int:
        """Convert MB to bytes for avatar size validation."""
        return self.MAX_AVATAR_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
