# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - slugs.py: URL slug derivation and validation
# - dates.py: Event date-range display strings
# - uploads.py: Deferred (upload-on-save) image handling
# - notifications.py: Auto-hiding admin notification banners
# - db_errors.py: Friendly messages for database errors
# - utils.py: Shared utilities (UUID detection, record cleanup)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.slugs import slugify, clean_slug_input, validate_slug
from lib.dates import format_date_range, display_date_range
from lib.uploads import (
    ImageFile,
    PendingImage,
    UploadedImage,
    DeferredImage,
    stage_image,
    commit_images,
)
from lib.notifications import (
    Notification,
    NotificationBanner,
    NotificationCenter,
    NotificationType,
)
from lib.db_errors import friendly_database_message
from lib.utils import is_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Slugs / dates
    "slugify",
    "clean_slug_input",
    "validate_slug",
    "format_date_range",
    "display_date_range",
    # Uploads
    "ImageFile",
    "PendingImage",
    "UploadedImage",
    "DeferredImage",
    "stage_image",
    "commit_images",
    # Notifications
    "Notification",
    "NotificationBanner",
    "NotificationCenter",
    "NotificationType",
    # Errors / utils
    "friendly_database_message",
    "is_uuid",
]
