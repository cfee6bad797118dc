# =============================================================================
# core/services/event_service.py - Events Business Logic
# =============================================================================
# Handles event listing, lookup, create/update/delete and bulk operations.
#
# Category columns are attached after the fact (one extra query per page of
# events) rather than through an embedded join, so every event dict carries
# flat category_name / category_slug / category_color keys.
# =============================================================================

import logging
import math
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import (
    FOREIGN_KEY_VIOLATION,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    error_code,
    error_message,
    friendly_database_message,
)
from lib.dates import display_date_range, format_date_range
from lib.slugs import clean_slug_input, slugify, validate_slug
from lib.utils import blank_to_none, is_uuid, pick_fields
from core.models.events import (
    EVENT_FIELDS,
    EVENT_NULLABLE_FIELDS,
    BulkEventAction,
    EventAction,
    EventInput,
    EventUpdate,
)
from app.config import settings
from app.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

TABLE = "events"
CATEGORIES_TABLE = "event_categories"
IMAGES_TABLE = "event_images"

DEFAULT_CATEGORY_NAME = "Event"
DEFAULT_CATEGORY_COLOR = "#22c55e"

SORTABLE_COLUMNS = (
    "created_at", "updated_at", "title", "start_date", "end_date",
    "display_order", "published_at", "category_id",
)

RELATED_EVENT_COLUMNS = (
    "id, title, slug, short_description, featured_image_url, "
    "start_date, end_date, date_range, venue, category_id"
)


def raise_write_error(action: str, error: Exception, resource: str = "event") -> None:
    """
    Translate a failed insert/update into an error the editor can act on.

    Raises:
        ConflictError: Duplicate slug/title/name (23505)
        ValidationFailedError: Unknown category (23503) or missing column (23502)
        DatabaseError: Anything else
    """
    code = error_code(error)
    message = error_message(error)
    article = "An" if resource[:1] in "aeiou" else "A"
    logger.error(f"Failed to {action}: [{code}] {message}")

    if code == UNIQUE_VIOLATION:
        if "slug" in message:
            raise ConflictError(f"{article} {resource} with this URL slug already exists", field="slug")
        if "title" in message:
            raise ConflictError(f"{article} {resource} with this title already exists", field="title")
        if "name" in message:
            raise ConflictError(f"{article} {resource} with this name already exists", field="name")
        raise ConflictError("Duplicate entry detected")

    if code == FOREIGN_KEY_VIOLATION:
        if "category_id" in message:
            raise ValidationFailedError(
                "Invalid category selected. Please choose a valid category.",
                field="category_id",
            )
        raise ValidationFailedError("Invalid reference data")

    if code == NOT_NULL_VIOLATION:
        raise ValidationFailedError(f"Missing required field: {message}")

    raise DatabaseError(action, friendly_database_message(error))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _date_range_for(start: Any, end: Any) -> str | None:
    try:
        return format_date_range(start, end) or None
    except ValueError:
        raise ValidationFailedError(
            "Dates must be ISO formatted (YYYY-MM-DD)",
            field="start_date",
        )


class EventService:
    """
    Service for event operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def fetch_event(event_id: str, columns: str = "*") -> dict[str, Any]:
        """
        Load one event by id for an admin write.

        Raises:
            NotFoundError: No such event
            DatabaseError: The lookup itself failed
        """
        try:
            event = SupabaseClient.fetch_one(TABLE, "id", event_id, columns)
        except Exception as e:
            logger.error(f"Failed to fetch event {event_id}: {e}")
            raise DatabaseError("fetch event", friendly_database_message(e))
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    # -------------------------------------------------------------------------
    # Categories on events
    # -------------------------------------------------------------------------

    @staticmethod
    def attach_categories(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Add category_name / category_slug / category_color to each event.

        Events without a (known) category get the "Event" label and the
        default green.
        """
        category_ids = sorted({e["category_id"] for e in events if e.get("category_id")})
        categories: dict[str, dict] = {}

        if category_ids:
            client = SupabaseClient.get_client()
            try:
                response = (
                    client.table(CATEGORIES_TABLE)
                    .select("id, name, slug, color")
                    .in_("id", category_ids)
                    .execute()
                )
            except Exception as e:
                logger.error(f"Failed to load event categories: {e}")
                raise DatabaseError("load event categories", friendly_database_message(e))
            categories = {c["id"]: c for c in response.data or []}

        for event in events:
            category = categories.get(event.get("category_id")) or {}
            event["category_name"] = category.get("name") or DEFAULT_CATEGORY_NAME
            event["category_slug"] = category.get("slug")
            event["category_color"] = category.get("color") or DEFAULT_CATEGORY_COLOR

        return events

    # -------------------------------------------------------------------------
    # List / Get
    # -------------------------------------------------------------------------

    @staticmethod
    def list_events(
        page: int = 1,
        limit: int = 10,
        category_slug: str | None = None,
        is_featured: bool | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        is_active: bool = True,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        """
        List events with filtering and pagination.

        With is_active=True (the public default) only published events are
        returned.

        Returns:
            Dict with events, total, page, limit, has_more, total_pages
        """
        page = max(page, 1)
        limit = max(limit, 1)
        offset = (page - 1) * limit

        empty = {
            "events": [],
            "total": 0,
            "page": page,
            "limit": limit,
            "has_more": False,
            "total_pages": 0,
        }

        client = SupabaseClient.get_client()
        query = (
            client.table(TABLE)
            .select("*", count="exact")
            .eq("is_active", is_active)
        )

        if is_active:
            query = query.not_.is_("published_at", "null")

        if category_slug:
            category = SupabaseClient.fetch_one(CATEGORIES_TABLE, "slug", category_slug, "id")
            if not category:
                return empty
            query = query.eq("category_id", category["id"])

        if is_featured is not None:
            query = query.eq("is_featured", is_featured)

        if search:
            # Commas and parentheses would break the or() filter syntax
            term = search.translate(str.maketrans("", "", ",()")).strip()
            if term:
                query = query.or_(
                    f"title.ilike.%{term}%,description.ilike.%{term}%,organizer.ilike.%{term}%"
                )

        if start_date:
            query = query.gte("start_date", start_date)
        if end_date:
            query = query.lte("end_date", end_date)

        sort_column = "category_id" if sort_by == "category" else sort_by
        if sort_column not in SORTABLE_COLUMNS:
            sort_column = "created_at"

        try:
            response = (
                query.order(sort_column, desc=sort_order != "asc")
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch events: {e}")
            raise DatabaseError("fetch events", friendly_database_message(e))

        total = response.count or 0
        events = EventService.attach_categories(response.data or [])

        return {
            "events": events,
            "total": total,
            "page": page,
            "limit": limit,
            "has_more": total > offset + limit,
            "total_pages": math.ceil(total / limit),
        }

    @staticmethod
    def find_event(identifier: str, admin: bool = False) -> dict[str, Any] | None:
        """
        Find an event by UUID or slug.

        Public lookups only see active, published events; admin lookups see
        everything.
        """
        column = "id" if is_uuid(identifier) else "slug"
        client = SupabaseClient.get_client()

        query = client.table(TABLE).select("*").eq(column, identifier)
        if not admin:
            query = query.eq("is_active", True).not_.is_("published_at", "null")

        response = query.limit(1).execute()
        rows = response.data or []
        return rows[0] if rows else None

    @staticmethod
    def get_event(identifier: str, admin: bool = False) -> dict[str, Any]:
        """
        Get one event with its related-events carousel.

        Returns:
            {"event": {...}, "related_events": [...]}

        Raises:
            NotFoundError: No such event (or not visible publicly)
        """
        event = EventService.find_event(identifier, admin=admin)
        if not event:
            raise NotFoundError("Event", identifier)

        EventService.attach_categories([event])
        event["display_date_range"] = display_date_range(event)

        return {
            "event": event,
            "related_events": EventService.related_events(event["id"]),
        }

    @staticmethod
    def related_events(event_id: str, limit: int | None = None) -> list[dict[str, Any]]:
        """
        Other events for the "more events" carousel, newest first.

        Prefers active published events; when there are none, falls back to
        any active events. Each carries a display date_range.
        """
        limit = limit or settings.RELATED_EVENTS_LIMIT
        client = SupabaseClient.get_client()

        def fetch(published_only: bool) -> list[dict[str, Any]]:
            query = (
                client.table(TABLE)
                .select(RELATED_EVENT_COLUMNS)
                .neq("id", event_id)
                .eq("is_active", True)
            )
            if published_only:
                query = query.not_.is_("published_at", "null")
            return query.order("created_at", desc=True).limit(limit).execute().data or []

        try:
            related = fetch(published_only=True)
        except Exception as e:
            logger.warning(f"Error fetching related events: {e}")
            related = []

        if not related:
            try:
                related = fetch(published_only=False)
            except Exception as e:
                logger.warning(f"Error fetching fallback related events: {e}")
                return []

        EventService.attach_categories(related)
        for item in related:
            item["date_range"] = display_date_range(item)
        return related

    # -------------------------------------------------------------------------
    # Create / Update / Delete
    # -------------------------------------------------------------------------

    @staticmethod
    def prepare_event_data(data: dict[str, Any]) -> dict[str, Any]:
        """
        Clean admin input for the events table.

        - empty strings in nullable columns become None
        - unknown keys are dropped
        - a slug typed by the admin loses trailing slashes
        """
        data = blank_to_none(data, EVENT_NULLABLE_FIELDS)
        data = pick_fields(data, EVENT_FIELDS)
        if isinstance(data.get("slug"), str):
            data["slug"] = clean_slug_input(data["slug"].strip())
        return data

    @staticmethod
    def create_event(event: EventInput | dict[str, Any], user_id: str | None = None) -> dict[str, Any]:
        """
        Create an event.

        The slug is derived from the title when empty, and date_range is
        generated from start/end dates when not given.

        Raises:
            ValidationFailedError: No usable slug, bad dates, bad category
            ConflictError: Slug or title already used
        """
        if isinstance(event, dict):
            event = EventInput.model_validate(event)

        data = EventService.prepare_event_data(event.model_dump())

        if not data.get("slug"):
            data["slug"] = slugify(data["title"])
        slug_error = validate_slug(data["slug"])
        if slug_error:
            raise ValidationFailedError(slug_error, field="slug")

        if not data.get("date_range"):
            data["date_range"] = _date_range_for(data.get("start_date"), data.get("end_date"))

        data["created_by"] = user_id
        data["updated_by"] = user_id

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            raise_write_error("create event", e)

        created = response.data[0]
        logger.info(f"Created event: {created['id']} ({created.get('slug')})")
        return EventService.attach_categories([created])[0]

    @staticmethod
    def update_event(
        event_id: str,
        update: EventUpdate | dict[str, Any],
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Update a single event with the fields that were sent.

        When start or end date changes without an explicit date_range, the
        stored date_range is regenerated.

        Raises:
            NotFoundError: No such event
        """
        if isinstance(update, dict):
            update = EventUpdate.model_validate(update)

        data = EventService.prepare_event_data(update.model_dump(exclude_unset=True))

        if "slug" in data:
            slug_error = validate_slug(data["slug"])
            if slug_error:
                raise ValidationFailedError(slug_error, field="slug")

        existing = EventService.fetch_event(event_id)

        if ("start_date" in data or "end_date" in data) and "date_range" not in data:
            data["date_range"] = _date_range_for(
                data.get("start_date", existing.get("start_date")),
                data.get("end_date", existing.get("end_date")),
            )

        data["updated_by"] = user_id

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).update(data).eq("id", event_id).execute()
        except Exception as e:
            raise_write_error("update event", e)

        if not response.data:
            raise NotFoundError("Event", event_id)

        logger.info(f"Updated event: {event_id}")
        return EventService.attach_categories([response.data[0]])[0]

    @staticmethod
    def delete_event(event_id: str) -> str:
        """
        Delete an event and its image rows.

        Returns:
            Confirmation message naming the event
        """
        existing = EventService.fetch_event(event_id, "id, title")

        client = SupabaseClient.get_client()
        try:
            client.table(IMAGES_TABLE).delete().eq("event_id", event_id).execute()
            client.table(TABLE).delete().eq("id", event_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete event: {e}")
            raise DatabaseError("delete event", friendly_database_message(e))

        logger.info(f"Deleted event: {event_id}")
        return f'Event "{existing["title"]}" deleted successfully'

    # -------------------------------------------------------------------------
    # Bulk Operations
    # -------------------------------------------------------------------------

    @staticmethod
    def bulk_action(request: BulkEventAction, user_id: str | None = None) -> dict[str, Any]:
        """
        Apply one action to many events.

        publish also activates; unpublish only clears published_at.

        Returns:
            {"updated_count": n, "events": [...]}
        """
        action = request.action

        if action == EventAction.ACTIVATE:
            fields: dict[str, Any] = {"is_active": True}
        elif action == EventAction.DEACTIVATE:
            fields = {"is_active": False}
        elif action == EventAction.FEATURE:
            fields = {"is_featured": True}
        elif action == EventAction.UNFEATURE:
            fields = {"is_featured": False}
        elif action == EventAction.PUBLISH:
            fields = {"published_at": _now_iso(), "is_active": True}
        elif action == EventAction.UNPUBLISH:
            fields = {"published_at": None}
        else:
            fields = EventService.prepare_event_data(request.data or {})
            if not fields:
                raise ValidationFailedError("No fields to update", field="data")

        fields["updated_by"] = user_id

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .update(fields)
                .in_("id", request.event_ids)
                .execute()
            )
        except Exception as e:
            raise_write_error("update events", e)

        events = response.data or []
        logger.info(f"Bulk {action.value}: {len(events)} event(s)")
        return {"updated_count": len(events), "events": events}

    @staticmethod
    def bulk_delete(event_ids: list[str]) -> dict[str, Any]:
        """
        Delete many events and their image rows.

        Returns:
            {"deleted_count": n, "deleted_events": [{"id", "title"}, ...]}
        """
        client = SupabaseClient.get_client()
        try:
            client.table(IMAGES_TABLE).delete().in_("event_id", event_ids).execute()
            response = client.table(TABLE).delete().in_("id", event_ids).execute()
        except Exception as e:
            logger.error(f"Failed to delete events: {e}")
            raise DatabaseError("delete events", friendly_database_message(e))

        deleted = [{"id": row["id"], "title": row.get("title")} for row in response.data or []]
        logger.info(f"Bulk deleted {len(deleted)} event(s)")
        return {"deleted_count": len(deleted), "deleted_events": deleted}
