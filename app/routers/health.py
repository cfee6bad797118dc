# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness and readiness for the hosting platform. Readiness also confirms
# that every storage bucket the editors upload into exists, since a missing
# bucket only shows up as a failed save otherwise.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.config import settings
from core.services.company_profile_service import BUCKET as COMPANY_PROFILE_BUCKET
from core.services.event_image_service import BUCKET as EVENT_IMAGES_BUCKET
from core.services.events_portfolio_service import BUCKET as EVENTS_PORTFOLIO_BUCKET
from core.services.portfolio_service import BUCKET as PORTFOLIO_BUCKET
from core.services.section_service import SECTIONS
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

APP_VERSION = "1.0.0"

REQUIRED_BUCKETS = tuple(sorted(
    {definition.bucket for definition in SECTIONS.values()}
    | {EVENT_IMAGES_BUCKET, EVENTS_PORTFOLIO_BUCKET, PORTFOLIO_BUCKET, COMPANY_PROFILE_BUCKET}
))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _bucket_name(bucket: Any) -> str | None:
    # storage3 returns bucket objects; plain dicts are accepted too
    name = getattr(bucket, "name", None)
    if name is None and isinstance(bucket, dict):
        name = bucket.get("name")
    return name


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    database: str = "unknown"
    storage: str = "unknown"
    missing_buckets: list[str] = Field(default_factory=list)


class ReadinessResponse(BaseModel):
    """
    status is "ready" only when the database answers, storage answers and
    no upload bucket is missing.
    """
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=APP_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Check the events table and the storage buckets.
    """
    checks = ChecksResponse()
    client = SupabaseClient.get_client()

    try:
        client.table("events").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: database check failed: {e}")
        checks.database = f"unhealthy: {str(e)[:50]}"

    try:
        existing = {_bucket_name(bucket) for bucket in client.storage.list_buckets() or []}
        checks.storage = "healthy"
        checks.missing_buckets = [name for name in REQUIRED_BUCKETS if name not in existing]
    except Exception as e:
        logger.warning(f"Readiness: storage check failed: {e}")
        checks.storage = f"unhealthy: {str(e)[:50]}"

    ready = (
        checks.database == "healthy"
        and checks.storage == "healthy"
        and not checks.missing_buckets
    )

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=_now())
