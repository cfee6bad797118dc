# =============================================================================
# app/routers/blog.py - Blog Post Endpoints
# =============================================================================
# Public blog listing and post pages; creating posts requires an admin.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, get_current_user
from core.models.content import BlogPostInput
from core.services.blog_service import BlogService

router = APIRouter()


@router.get("/posts")
async def list_posts(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Posts per page")] = 10,
    category: Annotated[str | None, Query(description="Category slug")] = None,
    status: str = "published",
    search: str | None = None,
    featured: bool | None = None,
    sort_by: str = "published_at",
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$")] = "desc",
    related_to: Annotated[str | None, Query(description="Post id to find related posts for")] = None,
):
    """
    List blog posts.

    With related_to, returns posts related to that post instead; the other
    filters are ignored.
    """
    if related_to:
        return BlogService.related_posts(related_to, limit=page_size)

    return BlogService.list_posts(
        page=page,
        page_size=page_size,
        category=category,
        status=status,
        search=search,
        featured=featured,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post("/posts", status_code=201)
async def create_post(
    post: BlogPostInput,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a blog post. The slug is generated from the title when omitted.
    """
    created = BlogService.create_post(post, author_id=user.key)
    return {"post": created, "message": "Post created successfully"}


@router.get("/posts/{slug}")
async def get_post(
    slug: Annotated[str, Path(description="Post URL slug")],
):
    return {"post": BlogService.get_post(slug)}
