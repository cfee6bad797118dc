# =============================================================================
# core/services/page_service.py - Public Page Data
# =============================================================================
# Composes the data each public page needs in one call. A section that
# fails to load comes back as None so the rest of the page still renders.
# =============================================================================

import logging
from typing import Any

from lib.dates import display_date_range
from core.services.section_service import SectionService
from core.services.portfolio_service import PortfolioService
from core.services.event_service import EventService
from core.services.event_image_service import EventImageService
from core.services.events_portfolio_service import EventsPortfolioService
from app.exceptions import CMSException

logger = logging.getLogger(__name__)

ABOUT_SECTIONS = ("about-main", "about-description", "about-dedication")

CONFERENCE_SECTIONS = (
    "conference-hero",
    "conference-management",
    "conference-solution",
    "conference-communicate",
    "event-management",
)

CONFERENCE_PORTFOLIO_LIMIT = 12


def _section_or_none(key: str) -> dict[str, Any] | None:
    try:
        return SectionService.get_section(key)
    except CMSException as e:
        logger.warning(f"Section {key} unavailable: {e.message}")
        return None


def _compose(keys: tuple[str, ...]) -> dict[str, Any]:
    return {key.replace("-", "_"): _section_or_none(key) for key in keys}


class PageService:
    """
    Data for the public pages.
    """

    @staticmethod
    def about_page() -> dict[str, Any]:
        """About page: main, description and dedication (with items)."""
        return _compose(ABOUT_SECTIONS)

    @staticmethod
    def conference_page() -> dict[str, Any]:
        """
        Conference page: hero, management services, solution, communicate,
        event management and the active conference photos of the events
        portfolio.
        """
        page = _compose(CONFERENCE_SECTIONS)
        try:
            page["events_portfolio"] = EventsPortfolioService.list_images(
                active_only=True,
                event_type="conference",
                limit=CONFERENCE_PORTFOLIO_LIMIT,
            )["images"]
        except CMSException as e:
            logger.warning(f"Events portfolio unavailable: {e.message}")
            page["events_portfolio"] = []
        return page

    @staticmethod
    def portfolio_page() -> dict[str, Any]:
        try:
            items = PortfolioService.list_items(active_only=True)
        except CMSException as e:
            logger.warning(f"Portfolio unavailable: {e.message}")
            items = []
        return {"items": items}

    @staticmethod
    def events_page(page: int = 1, limit: int = 12, category_slug: str | None = None) -> dict[str, Any]:
        """
        Events listing page: hero plus published events by start date.
        """
        listing = EventService.list_events(
            page=page,
            limit=limit,
            category_slug=category_slug,
            sort_by="start_date",
            sort_order="asc",
        )
        for event in listing["events"]:
            event["display_date_range"] = display_date_range(event)

        return {
            "hero": _section_or_none("events-hero"),
            **listing,
        }

    @staticmethod
    def event_detail_page(slug: str) -> dict[str, Any]:
        """
        Event detail page: the event, its gallery and related events.

        Raises:
            NotFoundError: No published event with that slug
        """
        detail = EventService.get_event(slug)
        event = detail["event"]
        images = EventImageService.list_images(event["id"], include_inactive=False)

        return {
            "event": event,
            "gallery_images": images["images"]["gallery"],
            "images": images["images"],
            "related_events": detail["related_events"],
        }
