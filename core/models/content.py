# =============================================================================
# core/models/content.py - Portfolio, Blog and Company Profile Schemas
# =============================================================================
# Input models for the smaller content editors:
# - PortfolioItemInput / PortfolioItemUpdate: portfolio gallery grid tiles
# - BlogPostInput: new blog post
# - CompanyProfileUpdate: metadata of an uploaded company profile PDF
# - EventsPortfolioImageUpdate / EventsPortfolioReorder: conference events gallery
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# Portfolio
# =============================================================================

class GridClass(str, Enum):
    """Tile span in the portfolio masonry grid."""
    ROW_SPAN_1 = "row-span-1"
    ROW_SPAN_2 = "row-span-2"
    COL_SPAN_1 = "col-span-1"
    COL_SPAN_2 = "col-span-2"


class PortfolioItemInput(BaseModel):
    """
    Schema for a new portfolio tile.

    Example:
        {"alt_text": "Double decker stand at Arab Health", "grid_class": "row-span-2"}
    """
    title: str | None = None
    description: str | None = None
    alt_text: str = Field(..., min_length=1)
    grid_class: GridClass = GridClass.ROW_SPAN_1
    display_order: int = 0
    image_id: str | None = None
    image_url: str | None = None
    is_active: bool = True


class PortfolioItemUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    alt_text: str | None = Field(default=None, min_length=1)
    grid_class: GridClass | None = None
    display_order: int | None = None
    image_id: str | None = None
    image_url: str | None = None
    is_active: bool | None = None


# =============================================================================
# Blog
# =============================================================================

class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    ARCHIVED = "archived"


class BlogPostInput(BaseModel):
    """
    Schema for creating a blog post.

    The slug is generated server-side by the database when omitted so that
    it is unique across posts.
    """
    title: str = Field(..., min_length=1)
    slug: str | None = None
    excerpt: str | None = None
    content: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    hero_image_url: str | None = None
    hero_image_alt: str | None = None
    status: BlogStatus = BlogStatus.DRAFT
    is_featured: bool = False
    og_title: str | None = None
    og_description: str | None = None
    og_image_url: str | None = None
    category_id: str | None = None
    scheduled_publish_at: str | None = None
    tag_ids: list[str] = Field(default_factory=list)


# =============================================================================
# Company Profile
# =============================================================================

class CompanyProfileUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    version: str | None = None
    is_active: bool | None = None
    is_current: bool | None = None


# =============================================================================
# Events Portfolio
# =============================================================================

class PortfolioEventType(str, Enum):
    """Kind of event an events-portfolio photo was taken at."""
    CONFERENCE = "conference"
    EXHIBITION = "exhibition"
    TRADE_SHOW = "trade_show"
    CORPORATE = "corporate"
    OTHER = "other"


class EventsPortfolioImageUpdate(BaseModel):
    """
    Metadata edit for an events-portfolio image.

    event_type accepts "none" (or "") to clear the type.
    """
    title: str | None = None
    description: str | None = None
    alt_text: str | None = None
    caption: str | None = None
    event_name: str | None = None
    event_date: str | None = None
    event_location: str | None = None
    event_type: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    display_order: int | None = None
    tags: list[str] | None = None
    seo_keywords: str | None = None


class ReorderEntry(BaseModel):
    id: str
    display_order: int


class EventsPortfolioReorder(BaseModel):
    items: list[ReorderEntry] = Field(..., min_length=1)
