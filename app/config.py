# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Settings for the CMS API: Supabase credentials, upload ceilings per editor,
# the notification banner timeout and the related-events carousel size.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
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
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS, used for admin writes)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
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
    # Upload Limits
    # -------------------------------------------------------------------------
    # The image library and gallery editors accept large photos; section
    # editors keep the smaller deferred-upload ceiling.

    MAX_IMAGE_UPLOAD_MB: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum image size for the image library and galleries"
    )

    MAX_SECTION_UPLOAD_MB: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum image size for section editors (deferred uploads)"
    )

    MAX_DOCUMENT_UPLOAD_MB: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum PDF size for company profile documents"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp,image/gif",
        description="Allowed image MIME types (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Editor / Page Behaviour
    # -------------------------------------------------------------------------

    NOTIFICATION_AUTO_HIDE_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="How long an admin notification banner stays visible"
    )

    RELATED_EVENTS_LIMIT: int = Field(
        default=6,
        ge=1,
        le=50,
        description="Number of events in the related-events carousel"
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

        Example: "http://localhost:3000, https://site.ae" -> ["http://localhost:3000", "https://site.ae"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_types_list(self) -> list[str]:
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
