# =============================================================================
# app/routers/events.py - Event Endpoints
# =============================================================================
# Public listing/detail plus the admin event editor:
# - events CRUD and bulk actions
# - event images (featured / hero / logo / gallery)
# - event categories
# - the events page hero section
# - dashboard statistics
#
# Static paths (/categories, /hero, /statistics) are declared before
# /{event_id} so they are not captured as event identifiers.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Query
from pydantic import BaseModel, Field

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.dependencies import NotificationsDep, report_outcome
from core.models.events import (
    BulkCategoryAction,
    BulkDeleteRequest,
    BulkEventAction,
    EventCategoryInput,
    EventCategoryUpdate,
    EventImageInput,
    EventInput,
    EventUpdate,
    ImageType,
)
from core.services.category_service import CategoryService
from core.services.event_image_service import EventImageService
from core.services.event_service import EventService
from core.services.event_statistics_service import EventStatisticsService
from core.services.section_service import SectionService

logger = logging.getLogger(__name__)

router = APIRouter()

EVENTS_HERO_KEY = "events-hero"


# =============================================================================
# Request Models
# =============================================================================

class EventImageUpdate(BaseModel):
    """One entry of a reorder / caption edit."""
    id: str
    display_order: int | None = None
    caption: str | None = None
    is_active: bool | None = None


class EventImagesUpdateRequest(BaseModel):
    images: list[EventImageUpdate] = Field(..., min_length=1)


# =============================================================================
# Events
# =============================================================================

@router.get("")
async def list_events(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
    category: Annotated[str | None, Query(description="Category slug")] = None,
    featured: Annotated[bool | None, Query(description="Only featured / non-featured")] = None,
    search: Annotated[str | None, Query(description="Search title, description, organizer")] = None,
    sort_by: str = "created_at",
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$")] = "desc",
    is_active: bool = True,
    start_date: Annotated[str | None, Query(description="Events starting on or after")] = None,
    end_date: Annotated[str | None, Query(description="Events ending on or before")] = None,
):
    """
    List events with filtering and pagination.

    By default only active, published events are returned.
    """
    return EventService.list_events(
        page=page,
        limit=limit,
        category_slug=category,
        is_featured=featured,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        is_active=is_active,
        start_date=start_date,
        end_date=end_date,
    )


@router.post("", status_code=201)
async def create_event(
    event: EventInput,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create an event.

    The slug is derived from the title when omitted and the display date
    range from start/end dates.
    """
    with report_outcome(notifications, user, "Event created successfully!", "Create Failed"):
        created = EventService.create_event(event, user_id=user.key)

    return {"event": created, "message": "Event created successfully"}


@router.put("")
async def bulk_update_events(
    request: BulkEventAction,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Apply one action (activate, publish, feature, update, ...) to many events.
    """
    with report_outcome(
        notifications, user, f"Bulk {request.action.value} applied", "Bulk Update Failed"
    ):
        result = EventService.bulk_action(request, user_id=user.key)

    return {**result, "message": f"{result['updated_count']} event(s) updated"}


@router.delete("")
async def bulk_delete_events(
    request: BulkDeleteRequest,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete many events and their image rows.
    """
    with report_outcome(notifications, user, "Events deleted", "Delete Failed"):
        result = EventService.bulk_delete(request.event_ids)

    return {**result, "message": f"{result['deleted_count']} event(s) deleted"}


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories")
async def list_categories(
    is_active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
    include_counts: Annotated[bool, Query(description="Add published event counts")] = False,
):
    """
    List event categories ordered by display_order, then name.
    """
    return CategoryService.list_categories(is_active=is_active, include_counts=include_counts)


@router.post("/categories", status_code=201)
async def create_category(
    category: EventCategoryInput,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Category created successfully!", "Create Failed"):
        created = CategoryService.create_category(category)

    return {"category": created, "message": "Category created successfully"}


@router.put("/categories")
async def bulk_update_categories(
    request: BulkCategoryAction,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(
        notifications, user, f"Bulk {request.action.value} applied", "Bulk Update Failed"
    ):
        return CategoryService.bulk_action(request)


@router.get("/categories/{category_id}")
async def get_category(
    category_id: Annotated[str, Path(description="Category UUID")],
):
    return {"category": CategoryService.get_category(category_id)}


@router.put("/categories/{category_id}")
async def update_category(
    category_id: Annotated[str, Path(description="Category UUID")],
    update: EventCategoryUpdate,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Category updated successfully!", "Update Failed"):
        updated = CategoryService.update_category(category_id, update)

    return {"category": updated, "message": "Category updated successfully"}


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: Annotated[str, Path(description="Category UUID")],
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a category. Refused while any event still uses it.
    """
    with report_outcome(notifications, user, "Category deleted successfully!", "Delete Failed"):
        CategoryService.delete_category(category_id)

    return {"message": "Category deleted successfully"}


# =============================================================================
# Events Page Hero
# =============================================================================

@router.get("/hero")
async def get_events_hero():
    """
    Get the events page hero; defaults when none has been saved.
    """
    return {"hero": SectionService.get_section(EVENTS_HERO_KEY)}


@router.put("/hero")
async def save_events_hero(
    notifications: NotificationsDep,
    payload: dict[str, Any] = Body(...),
    user: AuthUser = Depends(get_current_user),
):
    """
    Save the events page hero. The background image is sent as a URL.
    """
    with report_outcome(notifications, user, "Hero section saved successfully!", "Save Failed"):
        hero = SectionService.save_section(EVENTS_HERO_KEY, payload)

    return {"hero": hero, "message": "Hero section saved successfully"}


# =============================================================================
# Dashboard Statistics
# =============================================================================

@router.get("/statistics")
async def get_event_statistics(user: AuthUser = Depends(get_current_user)):
    """
    Event totals for the admin dashboard: upcoming, past and draft events
    and enquiries received in the last seven days.
    """
    return {"statistics": EventStatisticsService.get_statistics()}


# =============================================================================
# Single Event
# =============================================================================

@router.get("/{event_id}")
async def get_event(
    event_id: Annotated[str, Path(description="Event UUID or slug")],
    admin: Annotated[bool, Query(description="Include unpublished events")] = False,
    user: AuthUser | None = Depends(get_current_user_optional),
):
    """
    Get an event by UUID or slug with its related events.

    admin=true only takes effect for a signed-in admin.
    """
    return EventService.get_event(event_id, admin=admin and user is not None)


@router.put("/{event_id}")
async def update_event(
    event_id: Annotated[str, Path(description="Event UUID")],
    update: EventUpdate,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Event updated successfully!", "Update Failed"):
        updated = EventService.update_event(event_id, update, user_id=user.key)

    return {"event": updated, "message": "Event updated successfully"}


@router.delete("/{event_id}")
async def delete_event(
    event_id: Annotated[str, Path(description="Event UUID")],
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Event deleted successfully!", "Delete Failed"):
        message = EventService.delete_event(event_id)

    return {"message": message}


# =============================================================================
# Event Images
# =============================================================================

@router.get("/{event_id}/images")
async def list_event_images(
    event_id: Annotated[str, Path(description="Event UUID or slug")],
    type: Annotated[ImageType | None, Query(description="Only this image type")] = None,
    include_inactive: bool = False,
):
    """
    List an event's images grouped by type (featured, hero, logo, gallery).
    """
    return EventImageService.list_images(
        event_id, image_type=type, include_inactive=include_inactive
    )


@router.post("/{event_id}/images", status_code=201)
async def add_event_image(
    event_id: Annotated[str, Path(description="Event UUID")],
    image: EventImageInput,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Attach an already-uploaded image to an event.
    """
    with report_outcome(notifications, user, "Image added successfully!", "Upload Failed"):
        created = EventImageService.add_image(event_id, image, user_id=user.key)

    return {"image": created, "message": "Image added successfully"}


@router.put("/{event_id}/images")
async def update_event_images(
    event_id: Annotated[str, Path(description="Event UUID")],
    request: EventImagesUpdateRequest,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Reorder images or edit their captions / visibility.
    """
    updates = [image.model_dump(exclude_none=True) for image in request.images]
    with report_outcome(notifications, user, "Images updated successfully!", "Update Failed"):
        count = EventImageService.update_images(event_id, updates)

    return {"updated_count": count, "message": "Images updated successfully"}


@router.delete("/{event_id}/images/{image_id}")
async def delete_event_image(
    event_id: Annotated[str, Path(description="Event UUID")],
    image_id: Annotated[str, Path(description="Image UUID")],
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Image deleted successfully!", "Delete Failed"):
        removed = EventImageService.delete_image(event_id, image_id)

    return {"image": removed, "message": "Image deleted successfully"}
