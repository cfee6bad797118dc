# =============================================================================
# app/routers/pages.py - Public Page Endpoints
# =============================================================================
# One call per public page. No authentication; everything here is what the
# marketing site renders.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from core.services.page_service import PageService

router = APIRouter()


@router.get("/about")
async def about_page():
    return PageService.about_page()


@router.get("/conference")
async def conference_page():
    return PageService.conference_page()


@router.get("/portfolio")
async def portfolio_page():
    return PageService.portfolio_page()


@router.get("/events")
async def events_page(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 12,
    category: Annotated[str | None, Query(description="Category slug")] = None,
):
    """
    Events listing page: hero section plus published events by start date.
    """
    return PageService.events_page(page=page, limit=limit, category_slug=category)


@router.get("/events/{slug}")
async def event_detail_page(
    slug: Annotated[str, Path(description="Event URL slug")],
):
    """
    Event detail page: the event, its images and related events.
    """
    return PageService.event_detail_page(slug)
