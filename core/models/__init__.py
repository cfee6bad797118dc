# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - events.py: Event, category, event image and bulk-action schemas
# - sections.py: Page section editor schemas (About, Conference, Events hero)
# - content.py: Portfolio, events portfolio, blog post and company profile schemas
# - submissions.py: Event enquiry form and inbox schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Event Models
# -----------------------------------------------------------------------------
from .events import (
    EVENT_FIELDS,
    EVENT_NULLABLE_FIELDS,
    BulkCategoryAction,
    BulkDeleteRequest,
    BulkEventAction,
    CategoryAction,
    EventAction,
    EventCategoryInput,
    EventCategoryUpdate,
    EventImageInput,
    EventInput,
    EventUpdate,
    ImageType,
)

# -----------------------------------------------------------------------------
# Section Models
# -----------------------------------------------------------------------------
from .sections import (
    AboutDedicationSectionInput,
    AboutDescriptionSectionInput,
    AboutHeroSectionInput,
    AboutMainSectionInput,
    CommunicateSectionInput,
    ConferenceHeroSectionInput,
    ConferenceManagementSectionInput,
    ConferenceSolutionSectionInput,
    EventManagementSectionInput,
    EventsHeroInput,
    SectionInput,
    SectionItemInput,
)

# -----------------------------------------------------------------------------
# Content Models
# -----------------------------------------------------------------------------
from .content import (
    BlogPostInput,
    BlogStatus,
    CompanyProfileUpdate,
    EventsPortfolioImageUpdate,
    EventsPortfolioReorder,
    GridClass,
    PortfolioEventType,
    PortfolioItemInput,
    PortfolioItemUpdate,
    ReorderEntry,
)

# -----------------------------------------------------------------------------
# Submission Models
# -----------------------------------------------------------------------------
from .submissions import (
    BulkSubmissionAction,
    BulkSubmissionDelete,
    EventSubmissionInput,
    SubmissionAction,
    SubmissionStatus,
    SubmissionUpdate,
)

__all__ = [
    # Events
    "EVENT_FIELDS",
    "EVENT_NULLABLE_FIELDS",
    "BulkCategoryAction",
    "BulkDeleteRequest",
    "BulkEventAction",
    "CategoryAction",
    "EventAction",
    "EventCategoryInput",
    "EventCategoryUpdate",
    "EventImageInput",
    "EventInput",
    "EventUpdate",
    "ImageType",
    # Sections
    "AboutDedicationSectionInput",
    "AboutDescriptionSectionInput",
    "AboutHeroSectionInput",
    "AboutMainSectionInput",
    "CommunicateSectionInput",
    "ConferenceHeroSectionInput",
    "ConferenceManagementSectionInput",
    "ConferenceSolutionSectionInput",
    "EventManagementSectionInput",
    "EventsHeroInput",
    "SectionInput",
    "SectionItemInput",
    # Content
    "BlogPostInput",
    "BlogStatus",
    "CompanyProfileUpdate",
    "EventsPortfolioImageUpdate",
    "EventsPortfolioReorder",
    "GridClass",
    "PortfolioEventType",
    "PortfolioItemInput",
    "PortfolioItemUpdate",
    "ReorderEntry",
    # Submissions
    "BulkSubmissionAction",
    "BulkSubmissionDelete",
    "EventSubmissionInput",
    "SubmissionAction",
    "SubmissionStatus",
    "SubmissionUpdate",
]
