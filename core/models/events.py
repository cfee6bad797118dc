# =============================================================================
# core/models/events.py - Event Schemas
# =============================================================================
# These models define the API contract for the events system:
# - EventInput / EventUpdate: admin create and edit forms
# - EventCategoryInput: category editor
# - EventImageInput: image attached to an event
# - BulkEventAction / BulkCategoryAction: list-page bulk operations
#
# Rows returned by the database are passed through as dicts; these models
# only validate what the admin sends in.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ImageType(str, Enum):
    """
    Role of an image attached to an event.

    Only gallery images can be multiple; the others are one-per-event.
    """
    GALLERY = "gallery"
    FEATURED = "featured"
    HERO = "hero"
    LOGO = "logo"


# Columns an event insert/update may touch. Anything else the client sends
# is dropped before it reaches the database.
EVENT_FIELDS = (
    "title", "slug", "description", "detailed_description", "short_description",
    "category_id", "organizer", "organized_by", "venue", "event_type", "industry", "audience",
    "start_date", "end_date", "date_range",
    "featured_image_url", "hero_image_url", "hero_image_credit",
    "logo_image_url", "logo_text", "logo_subtext",
    "meta_title", "meta_description", "meta_keywords",
    "is_active", "is_featured", "display_order", "published_at",
)

# Empty strings in these columns must become NULL
EVENT_NULLABLE_FIELDS = ("category_id", "start_date", "end_date", "published_at")


class EventInput(BaseModel):
    """
    Schema for creating an event.

    Example:
        {
            "title": "GITEX Global 2025",
            "start_date": "2025-10-13",
            "end_date": "2025-10-17",
            "venue": "Dubai World Trade Centre"
        }
    """

    title: str = Field(..., min_length=1, max_length=255, description="Event title")
    slug: str | None = Field(default=None, description="URL slug; derived from title when empty")
    description: str | None = None
    detailed_description: str | None = None
    short_description: str | None = None

    category_id: str | None = None
    organizer: str | None = None
    organized_by: str | None = None
    venue: str | None = None
    event_type: str | None = None
    industry: str | None = None
    audience: str | None = None

    start_date: str | None = Field(default=None, description="ISO date or datetime")
    end_date: str | None = Field(default=None, description="ISO date or datetime")
    date_range: str | None = Field(default=None, description="Display string; generated when empty")

    featured_image_url: str | None = None
    hero_image_url: str | None = None
    hero_image_credit: str | None = None
    logo_image_url: str | None = None
    logo_text: str | None = None
    logo_subtext: str | None = None

    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None

    is_active: bool = True
    is_featured: bool = False
    display_order: int = 0
    published_at: str | None = None

    model_config = {"extra": "ignore"}


class EventUpdate(BaseModel):
    """
    Partial update of an event. Only fields that were sent are written.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = None
    description: str | None = None
    detailed_description: str | None = None
    short_description: str | None = None
    category_id: str | None = None
    organizer: str | None = None
    organized_by: str | None = None
    venue: str | None = None
    event_type: str | None = None
    industry: str | None = None
    audience: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    date_range: str | None = None
    featured_image_url: str | None = None
    hero_image_url: str | None = None
    hero_image_credit: str | None = None
    logo_image_url: str | None = None
    logo_text: str | None = None
    logo_subtext: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    display_order: int | None = None
    published_at: str | None = None

    model_config = {"extra": "ignore"}


class EventAction(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    FEATURE = "feature"
    UNFEATURE = "unfeature"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    UPDATE = "update"


class BulkEventAction(BaseModel):
    """Bulk operation from the events list page."""
    action: EventAction
    event_ids: list[str] = Field(..., min_length=1)
    data: dict[str, Any] | None = Field(
        default=None,
        description="Field values, only used by the 'update' action"
    )


class BulkDeleteRequest(BaseModel):
    event_ids: list[str] = Field(..., min_length=1)


# =============================================================================
# Categories
# =============================================================================

class EventCategoryInput(BaseModel):
    """
    Schema for creating or editing an event category.

    Example:
        {"name": "Technology", "color": "#a5cd39"}
    """
    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = None
    description: str | None = None
    color: str = Field(default="#22c55e", pattern=r"^#[0-9a-fA-F]{6}$")
    is_active: bool = True
    display_order: int = 0


class EventCategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = None
    description: str | None = None
    color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    is_active: bool | None = None
    display_order: int | None = None


class CategoryAction(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    UPDATE = "update"


class BulkCategoryAction(BaseModel):
    action: CategoryAction
    category_ids: list[str] = Field(..., min_length=1)
    data: dict[str, Any] | None = None


# =============================================================================
# Event Images
# =============================================================================

class EventImageInput(BaseModel):
    """
    Image metadata attached to an event after the file is in storage.
    """
    filename: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1, description="Public URL or storage path")
    original_filename: str | None = None
    image_type: ImageType = ImageType.GALLERY
    display_order: int = 0
    caption: str | None = None
    alt_text: str = "Event image"
    width: int | None = None
    height: int | None = None
    file_size: int = 0
    mime_type: str = "image/jpeg"
