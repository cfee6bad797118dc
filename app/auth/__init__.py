# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Supabase JWT verification for the admin endpoints.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.post("")
#   async def create(user: AuthUser = Depends(get_current_user)):
#       return {"created_by": user.key}
# =============================================================================

from app.auth.dependencies import (
    decode_access_token,
    get_current_user,
    get_current_user_optional,
)
from app.auth.models import AuthUser, UserResponse

__all__ = [
    "decode_access_token",
    "get_current_user",
    "get_current_user_optional",
    "AuthUser",
    "UserResponse",
]
