# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-in itself happens client-side with Supabase Auth. These routes let the
# admin UI check a token and load the admin's profile.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_admin(user: AuthUser = Depends(get_current_user)) -> UserResponse:
    """
    Get the signed-in admin's profile.

    Falls back to the token's own claims when the admin_users row is
    missing (the sign-up webhook may not have run yet).
    """
    if user.email:
        try:
            profile = SupabaseClient.fetch_one("admin_users", "email", user.email)
        except Exception as e:
            logger.warning(f"Could not fetch admin profile: {e}")
            profile = None

        if profile:
            return UserResponse(**{**profile, "id": user.id})

    return UserResponse(id=user.id, email=user.email, role=user.role)


@router.get("/verify")
async def verify_token(user: AuthUser = Depends(get_current_user)) -> dict:
    """
    Check that the current token is still valid.
    """
    return {
        "valid": True,
        "user_id": user.key,
        "email": user.email,
    }
