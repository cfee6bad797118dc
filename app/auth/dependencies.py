# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase access tokens sent as "Authorization: Bearer <jwt>".
#
# Supports both:
# - ES256/RS256 tokens signed with the project's JWKS keys
# - HS256 tokens signed with the legacy project JWT secret
#
# Public page endpoints don't use these; every admin editor endpoint does.
# =============================================================================

import logging
import time
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

bearer = HTTPBearer()
bearer_optional = HTTPBearer(auto_error=False)

JWKS_CACHE_TTL = 3600  # 1 hour
_jwks: dict[str, Any] = {}
_jwks_fetched_at: float = 0


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_jwks() -> dict[str, Any]:
    """
    Fetch the project's public signing keys, cached for an hour.

    On a failed refresh the previous keys are kept.
    """
    global _jwks, _jwks_fetched_at

    now = time.time()
    if _jwks and now - _jwks_fetched_at < JWKS_CACHE_TTL:
        return _jwks

    url = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"
    try:
        response = httpx.get(url, timeout=10)
        response.raise_for_status()
        _jwks = response.json()
        _jwks_fetched_at = now
        logger.debug(f"Fetched JWKS from {url}")
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")

    return _jwks or {"keys": []}


def _verification_key(token: str) -> tuple[Any, str]:
    """
    Pick the key and algorithm a token must be verified with.

    Returns:
        (key, algorithm); the legacy secret with HS256 when no JWKS key matches
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    algorithm = header.get("alg", "HS256")
    kid = header.get("kid")

    if algorithm != "HS256" and kid:
        for key in _load_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, algorithm
        logger.warning(f"No JWKS key for alg={algorithm}, kid={kid}; trying legacy secret")

    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the AuthUser.

    Raises:
        HTTPException: 401 for expired, badly signed or malformed tokens
    """
    key, algorithm = _verification_key(token)

    # An empty legacy secret would accept tokens signed with ""
    if algorithm == "HS256" and not key:
        logger.warning("HS256 token received but SUPABASE_JWT_SECRET is not configured")
        raise _unauthorized("Invalid token: signing key not available")

    try:
        claims = jwt.decode(token, key, algorithms=[algorithm], audience="authenticated")
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    subject = claims.get("sub")
    if not subject:
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_id = UUID(subject)
    except ValueError:
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_id, email=claims.get("email"), role=claims.get("role"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
) -> AuthUser:
    """
    Require a signed-in admin.

    Usage:
        @router.put("/{key}")
        async def save(user: AuthUser = Depends(get_current_user)):
            ...
    """
    user = decode_access_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_optional),
) -> Optional[AuthUser]:
    """
    Identify the caller if a valid token was sent; None otherwise.

    Used where admins see more than the public, e.g. unpublished events.
    """
    if credentials is None:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except HTTPException:
        return None
