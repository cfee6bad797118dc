# =============================================================================
# core/services/category_service.py - Event Categories
# =============================================================================
# Categories group events on the listing page and colour their badges.
# A category that still has events cannot be deleted.
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from lib.slugs import clean_slug_input, slugify, validate_slug
from core.models.events import (
    BulkCategoryAction,
    CategoryAction,
    EventCategoryInput,
    EventCategoryUpdate,
)
from core.services.event_service import raise_write_error
from app.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

TABLE = "event_categories"
EVENTS_TABLE = "events"

# Columns the client may never write directly
PROTECTED_FIELDS = ("id", "created_at", "updated_at", "created_by")


def category_slug(typed: str | None, name: str | None) -> str:
    """
    Slug for a category: the typed slug normalised, else derived from the name.

    Raises:
        ValidationFailedError: Neither gives a usable slug
    """
    slug = slugify(clean_slug_input((typed or "").strip())) or slugify(name)
    slug_error = validate_slug(slug)
    if slug_error:
        raise ValidationFailedError(slug_error, field="slug")
    return slug


def parse_update(raw: dict[str, Any]) -> dict[str, Any]:
    """Validate a loose update dict; only the fields sent are returned."""
    try:
        return EventCategoryUpdate.model_validate(raw).model_dump(exclude_unset=True)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationFailedError(f"{field}: {first['msg']}", field=field)


class CategoryService:
    """
    Service for event category operations.
    """

    @staticmethod
    def count_published_events(category_id: str) -> int:
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(EVENTS_TABLE)
                .select("id", count="exact")
                .eq("category_id", category_id)
                .eq("is_active", True)
                .not_.is_("published_at", "null")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to count events of category {category_id}: {e}")
            raise DatabaseError("count category events", friendly_database_message(e))
        return response.count or 0

    @staticmethod
    def fetch_category(category_id: str) -> dict[str, Any]:
        try:
            category = SupabaseClient.fetch_one(TABLE, "id", category_id)
        except Exception as e:
            logger.error(f"Failed to fetch category {category_id}: {e}")
            raise DatabaseError("fetch category", friendly_database_message(e))
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    @staticmethod
    def list_categories(
        is_active: bool | None = None,
        include_counts: bool = False,
    ) -> dict[str, Any]:
        """
        List categories by display order, then name.

        Args:
            is_active: Filter on active flag; None returns all
            include_counts: Add event_count (active, published events)

        Returns:
            {"categories": [...], "total": n}
        """
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*")
        if is_active is not None:
            query = query.eq("is_active", is_active)

        try:
            response = query.order("display_order").order("name").execute()
        except Exception as e:
            logger.error(f"Failed to fetch categories: {e}")
            raise DatabaseError("fetch categories", friendly_database_message(e))

        categories = response.data or []
        if include_counts:
            for category in categories:
                category["event_count"] = CategoryService.count_published_events(category["id"])

        return {"categories": categories, "total": len(categories)}

    @staticmethod
    def get_category(category_id: str) -> dict[str, Any]:
        category = CategoryService.fetch_category(category_id)
        category["event_count"] = CategoryService.count_published_events(category_id)
        return category

    @staticmethod
    def create_category(category: EventCategoryInput) -> dict[str, Any]:
        """
        Create a category; the slug is derived from the name when empty.

        Raises:
            ConflictError: Name or slug already used
        """
        data = category.model_dump()
        data["slug"] = category_slug(data.get("slug"), data["name"])

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            raise_write_error("create category", e, resource="category")

        created = response.data[0]
        logger.info(f"Created category: {created['id']} ({created['slug']})")
        return created

    @staticmethod
    def update_category(category_id: str, update: EventCategoryUpdate | dict[str, Any]) -> dict[str, Any]:
        """
        Update one category.

        A blank slug is derived again from the (new or stored) name; a typed
        slug is normalised the same way as a derived one.

        Raises:
            NotFoundError: No such category
            ValidationFailedError: No usable slug
            ConflictError: Another category already uses the slug
        """
        if isinstance(update, dict):
            data = {k: v for k, v in update.items() if k not in PROTECTED_FIELDS}
            data = parse_update(data)
        else:
            data = update.model_dump(exclude_unset=True)

        existing = CategoryService.fetch_category(category_id)
        if not data:
            return existing

        client = SupabaseClient.get_client()
        if "slug" in data:
            data["slug"] = category_slug(data["slug"], data.get("name") or existing.get("name"))
            try:
                clash = (
                    client.table(TABLE)
                    .select("id")
                    .eq("slug", data["slug"])
                    .neq("id", category_id)
                    .limit(1)
                    .execute()
                )
            except Exception as e:
                logger.error(f"Failed to check category slug: {e}")
                raise DatabaseError("update category", friendly_database_message(e))
            if clash.data:
                raise ConflictError("A category with this slug already exists", field="slug")

        try:
            response = client.table(TABLE).update(data).eq("id", category_id).execute()
        except Exception as e:
            raise_write_error("update category", e, resource="category")

        logger.info(f"Updated category: {category_id}")
        return response.data[0] if response.data else {**existing, **data}

    @staticmethod
    def bulk_action(request: BulkCategoryAction) -> dict[str, Any]:
        """
        Activate, deactivate or update many categories.

        Returns:
            {"updated_count": n, "categories": [...]}
        """
        if request.action == CategoryAction.ACTIVATE:
            fields: dict[str, Any] = {"is_active": True}
        elif request.action == CategoryAction.DEACTIVATE:
            fields = {"is_active": False}
        else:
            raw = {k: v for k, v in (request.data or {}).items() if k not in PROTECTED_FIELDS}
            fields = parse_update(raw)
            if not fields:
                raise ValidationFailedError("No fields to update", field="data")
            if "slug" in fields:
                fields["slug"] = category_slug(fields["slug"], fields.get("name"))

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .update(fields)
                .in_("id", request.category_ids)
                .execute()
            )
        except Exception as e:
            raise_write_error("update categories", e, resource="category")

        categories = response.data or []
        logger.info(f"Bulk {request.action.value}: {len(categories)} categor(ies)")
        return {"updated_count": len(categories), "categories": categories}

    @staticmethod
    def delete_category(category_id: str) -> None:
        """
        Delete a category that no event uses.

        Raises:
            ValidationFailedError: Events still reference the category
        """
        client = SupabaseClient.get_client()
        try:
            usage = (
                client.table(EVENTS_TABLE)
                .select("id", count="exact")
                .eq("category_id", category_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to check category usage: {e}")
            raise DatabaseError("delete category", friendly_database_message(e))
        count = usage.count or 0
        if count > 0:
            raise ValidationFailedError(
                f"Cannot delete category. It has {count} event(s) associated with it.",
                field="category_id",
            )

        try:
            client.table(TABLE).delete().eq("id", category_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete category: {e}")
            raise DatabaseError("delete category", friendly_database_message(e))

        logger.info(f"Deleted category: {category_id}")
