# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - pages.py: Public page data (About, Conference, Portfolio, Events)
# - events.py: Events, categories, event images and the events hero
# - event_submissions.py: Public enquiry form and the admin inbox
# - events_portfolio.py: Events portfolio gallery
# - images.py: Image library over the storage buckets
# - blog.py: Blog posts
# - company_profile.py: Company profile PDF documents
# - admin_sections.py: Page section editors
# - portfolio.py: Portfolio gallery editor
# - notifications.py: Admin notification banner
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import pages
from . import event_submissions
from . import events
from . import events_portfolio
from . import images
from . import blog
from . import company_profile
from . import admin_sections
from . import portfolio
from . import notifications

__all__ = [
    "health",
    "pages",
    "event_submissions",
    "events",
    "events_portfolio",
    "images",
    "blog",
    "company_profile",
    "admin_sections",
    "portfolio",
    "notifications",
]
