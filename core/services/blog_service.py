# =============================================================================
# core/services/blog_service.py - Blog Posts
# =============================================================================
# Listing, related posts, creation and lookup of blog posts. Slug uniqueness
# is the database's job: the generate_unique_blog_slug function returns a
# free slug for a title.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from core.models.content import BlogPostInput, BlogStatus
from app.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

TABLE = "blog_posts"
CATEGORIES_TABLE = "blog_categories"
POST_TAGS_TABLE = "blog_post_tags"
TAGS_TABLE = "blog_tags"

LIST_COLUMNS = (
    "id, title, slug, excerpt, featured_image_url, featured_image_alt, "
    "published_at, created_at, updated_at, status, is_featured, view_count, category_id"
)

SORTABLE_COLUMNS = ("published_at", "created_at", "updated_at", "title", "view_count")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _empty_page(page: int, page_size: int) -> dict[str, Any]:
    return {
        "posts": [],
        "total_count": 0,
        "page": page,
        "page_size": page_size,
        "has_more": False,
    }


class BlogService:
    """
    Service for blog post operations.
    """

    @staticmethod
    def attach_categories(posts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Flatten each post's category into category_name/slug/color."""
        ids = sorted({p["category_id"] for p in posts if p.get("category_id")})
        categories: dict[str, dict] = {}
        if ids:
            client = SupabaseClient.get_client()
            response = (
                client.table(CATEGORIES_TABLE)
                .select("id, name, slug, color")
                .in_("id", ids)
                .execute()
            )
            categories = {c["id"]: c for c in response.data or []}

        for post in posts:
            category = categories.get(post.get("category_id")) or {}
            post["category_name"] = category.get("name")
            post["category_slug"] = category.get("slug")
            post["category_color"] = category.get("color")
        return posts

    @staticmethod
    def list_posts(
        page: int = 1,
        page_size: int = 10,
        category: str | None = None,
        status: str = "published",
        search: str | None = None,
        featured: bool | None = None,
        sort_by: str = "published_at",
        sort_order: str = "desc",
    ) -> dict[str, Any]:
        """
        List blog posts with pagination.

        status="all" lists every status; "published" also hides posts whose
        publish time is still in the future.

        Returns:
            {"posts", "total_count", "page", "page_size", "has_more"}
        """
        page = max(page, 1)
        page_size = max(page_size, 1)
        offset = (page - 1) * page_size

        client = SupabaseClient.get_client()
        query = client.table(TABLE).select(LIST_COLUMNS, count="exact")

        if status != "all":
            query = query.eq("status", status)
        if status == BlogStatus.PUBLISHED.value:
            query = query.lte("published_at", _now_iso())

        if category:
            found = SupabaseClient.fetch_one(CATEGORIES_TABLE, "slug", category, "id")
            if not found:
                return _empty_page(page, page_size)
            query = query.eq("category_id", found["id"])

        if featured:
            query = query.eq("is_featured", True)

        if search:
            term = search.translate(str.maketrans("", "", ",()")).strip()
            if term:
                query = query.or_(f"title.ilike.%{term}%,excerpt.ilike.%{term}%")

        sort_column = sort_by if sort_by in SORTABLE_COLUMNS else "published_at"

        try:
            response = (
                query.order(sort_column, desc=sort_order != "asc")
                .range(offset, offset + page_size - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch posts: {e}")
            raise DatabaseError("fetch posts", friendly_database_message(e))

        total = response.count or 0
        posts = BlogService.attach_categories(response.data or [])
        for post in posts:
            post["tags"] = []

        return {
            "posts": posts,
            "total_count": total,
            "page": page,
            "page_size": page_size,
            "has_more": total > offset + page_size,
        }

    @staticmethod
    def related_posts(post_id: str, limit: int = 10) -> dict[str, Any]:
        """
        Posts related to the given one, via get_related_blog_posts.

        A failing function yields an empty list rather than an error.
        """
        try:
            posts = SupabaseClient.call_rpc(
                "get_related_blog_posts",
                {"current_post_id": post_id, "limit_count": limit},
            ) or []
        except Exception as e:
            logger.warning(f"Related posts error: {e}")
            posts = []

        return {
            "posts": posts,
            "total_count": len(posts),
            "page": 1,
            "page_size": limit,
            "has_more": False,
        }

    @staticmethod
    def create_post(post: BlogPostInput, author_id: str | None = None) -> dict[str, Any]:
        """
        Create a blog post.

        Without a slug the database picks a unique one from the title.
        published_at is stamped when the post is created as published.
        Tag links that fail to save are logged, not raised.
        """
        slug = (post.slug or "").strip()
        if not slug:
            try:
                slug = SupabaseClient.call_rpc("generate_unique_blog_slug", {"title_text": post.title})
            except Exception as e:
                logger.error(f"Slug generation error: {e}")
                raise DatabaseError("generate slug", friendly_database_message(e))

        data = post.model_dump(mode="json", exclude={"slug", "tag_ids"})
        # Forms send "" for untouched optional fields
        data = {key: (value if value != "" else None) for key, value in data.items()}
        data["slug"] = slug
        data["published_at"] = _now_iso() if post.status == BlogStatus.PUBLISHED else None
        if author_id:
            data["author_id"] = author_id

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Post creation error: {e}")
            raise DatabaseError("create post", friendly_database_message(e))

        created = response.data[0]
        logger.info(f"Created blog post: {created['id']} ({slug})")

        if post.tag_ids:
            relations = [
                {"blog_post_id": created["id"], "blog_tag_id": tag_id}
                for tag_id in post.tag_ids
            ]
            try:
                client.table(POST_TAGS_TABLE).insert(relations).execute()
            except Exception as e:
                logger.warning(f"Tag relation error for post {created['id']}: {e}")

        return created

    @staticmethod
    def get_post(slug: str) -> dict[str, Any]:
        """
        Get a published post by slug, with category and tag names.

        Each read bumps the view counter; a failed bump is only logged.

        Raises:
            NotFoundError: No published post with that slug
        """
        client = SupabaseClient.get_client()
        rows = (
            client.table(TABLE)
            .select("*")
            .eq("slug", slug)
            .eq("status", BlogStatus.PUBLISHED.value)
            .lte("published_at", _now_iso())
            .limit(1)
            .execute()
        ).data or []
        if not rows:
            raise NotFoundError("Post", slug)

        post = BlogService.attach_categories([rows[0]])[0]

        tag_links = (
            client.table(POST_TAGS_TABLE)
            .select("blog_tag_id")
            .eq("blog_post_id", post["id"])
            .execute()
        ).data or []
        tag_ids = [link["blog_tag_id"] for link in tag_links]
        post["tags"] = []
        if tag_ids:
            tags = (
                client.table(TAGS_TABLE)
                .select("id, name")
                .in_("id", tag_ids)
                .execute()
            ).data or []
            post["tags"] = [tag["name"] for tag in tags if tag.get("name")]

        try:
            SupabaseClient.call_rpc("increment_blog_post_views", {"post_slug": slug})
        except Exception as e:
            logger.warning(f"View count increment error: {e}")

        return post
