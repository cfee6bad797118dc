# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the exhibition CMS API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main          (binds API_HOST:API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import CMSException, cms_exception_handler
from app.routers import (
    admin_sections,
    blog,
    company_profile,
    event_submissions,
    events,
    events_portfolio,
    health,
    images,
    notifications,
    pages,
    portfolio,
)
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The Supabase client is created lazily on first use, so startup only
    logs the configuration.
    """
    logger.info(f"Starting CMS API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down CMS API")


# Create FastAPI application
app = FastAPI(
    title="Exhibition CMS API",
    description="""
## Content API for the exhibition stand marketing site

Public pages read their content here; the admin panel edits it.

### Areas

| Area | Purpose |
|------|---------|
| **Pages** | One call per public page (About, Conference, Portfolio, Events) |
| **Events** | Events, categories, event images and the events hero |
| **Sections** | Editors for the About and Conference page areas |
| **Portfolio** | Portfolio gallery tiles |
| **Images** | Image library over the storage buckets |
| **Blog** | Blog posts |
| **Company Profile** | Downloadable company profile PDF |

Admin endpoints require a Supabase access token:
`Authorization: Bearer <jwt>`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Verify tokens and load the admin profile"},
        {"name": "Pages", "description": "Public page data"},
        {"name": "Events", "description": "Events, categories, event images and hero"},
        {"name": "Images", "description": "Image library"},
        {"name": "Blog", "description": "Blog posts"},
        {"name": "Company Profile", "description": "Company profile documents"},
        {"name": "Sections", "description": "Page section editors"},
        {"name": "Portfolio", "description": "Portfolio gallery editor"},
        {"name": "Notifications", "description": "Admin notification banner"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CMSException)
async def handle_cms_exception(request: Request, exc: CMSException):
    """Handle custom CMS exceptions."""
    return await cms_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Public page data
app.include_router(
    pages.router,
    prefix="/api/pages",
    tags=["Pages"]
)

# Event enquiries; mounted before the events router so "submissions"
# is not read as an event id
app.include_router(
    event_submissions.router,
    prefix="/api/events/submissions",
    tags=["Event Submissions"]
)

# Events, categories, event images, events hero
app.include_router(
    events.router,
    prefix="/api/events",
    tags=["Events"]
)

# Events portfolio gallery
app.include_router(
    events_portfolio.router,
    prefix="/api/events-portfolio",
    tags=["Events Portfolio"]
)

# Image library
app.include_router(
    images.router,
    prefix="/api/images",
    tags=["Images"]
)

# Blog posts
app.include_router(
    blog.router,
    prefix="/api/blog",
    tags=["Blog"]
)

# Company profile documents
app.include_router(
    company_profile.router,
    prefix="/api/company-profile",
    tags=["Company Profile"]
)

# Page section editors
app.include_router(
    admin_sections.router,
    prefix="/api/admin/sections",
    tags=["Sections"]
)

# Portfolio gallery editor
app.include_router(
    portfolio.router,
    prefix="/api/admin/portfolio",
    tags=["Portfolio"]
)

# Admin notification banner
app.include_router(
    notifications.router,
    prefix="/api/admin/notifications",
    tags=["Notifications"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Exhibition CMS API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
