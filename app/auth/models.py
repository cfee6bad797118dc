# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the signed-in admin.
# =============================================================================

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Admin identity taken from a verified Supabase access token.

    Any signed-in user may use the admin editors; there is no role check.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        """String id, used for created_by/updated_by and notification banners."""
        return str(self.id)


class UserResponse(BaseModel):
    """
    Admin profile as stored in the admin_users table (matched by email).
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")
