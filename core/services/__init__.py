# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService
from .section_service import SECTIONS, SectionDefinition, SectionService, get_definition
from .portfolio_service import PortfolioService
from .event_service import EventService
from .category_service import CategoryService
from .event_image_service import EventImageService
from .image_library_service import ImageLibraryService
from .blog_service import BlogService
from .company_profile_service import CompanyProfileService
from .events_portfolio_service import EventsPortfolioService
from .event_submission_service import EventSubmissionService
from .event_statistics_service import EventStatisticsService
from .page_service import PageService

__all__ = [
    "StorageService",
    "SECTIONS",
    "SectionDefinition",
    "SectionService",
    "get_definition",
    "PortfolioService",
    "EventService",
    "CategoryService",
    "EventImageService",
    "ImageLibraryService",
    "BlogService",
    "CompanyProfileService",
    "EventsPortfolioService",
    "EventSubmissionService",
    "EventStatisticsService",
    "PageService",
]
