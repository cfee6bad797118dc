# =============================================================================
# core/services/events_portfolio_service.py - Events Portfolio Gallery
# =============================================================================
# Photos of past events shown in the Conference page's events portfolio.
# Each image is a file in the events-portfolio-images bucket plus a metadata
# row (title, event name/date/location/type, featured flag, order).
#
# Featured toggling and reordering go through database functions so each is
# a single statement.
# =============================================================================

import logging
import secrets
import time
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from lib.uploads import IMAGE_MIME_TYPES, ImageFile, validate_image
from core.models.content import (
    EventsPortfolioImageUpdate,
    PortfolioEventType,
    ReorderEntry,
)
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import DatabaseError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

TABLE = "events_portfolio_images"
BUCKET = "events-portfolio-images"
FOLDER = "portfolio"

SORTABLE_COLUMNS = ("display_order", "created_at", "title", "event_date", "event_name")


def portfolio_filename(original: str, now: float | None = None, token: str | None = None) -> str:
    """
    Example:
        portfolio_filename("Hall 4.JPG", now=1700000000.0, token="x1y2")
        # "events-portfolio-1700000000000-x1y2.jpg"
    """
    timestamp = int((now if now is not None else time.time()) * 1000)
    token = token or secrets.token_hex(6)
    ext = original.rsplit(".", 1)[-1].lower() if "." in original else "jpg"
    return f"events-portfolio-{timestamp}-{token}.{ext}"


def parse_event_type(value: str | None) -> str | None:
    """
    "none" and blank clear the type; anything else must be a known type.

    Raises:
        ValidationFailedError: Unknown event type
    """
    if value is None or not value.strip() or value.strip() == "none":
        return None
    try:
        return PortfolioEventType(value.strip()).value
    except ValueError:
        raise ValidationFailedError("Invalid event type", field="event_type")


def _blank_to_none(value: str | None) -> str | None:
    return (value or "").strip() or None


def _with_url(image: dict[str, Any]) -> dict[str, Any]:
    image["url"] = StorageService.get_public_url(BUCKET, image["file_path"])
    return image


class EventsPortfolioService:
    """
    Service for the events portfolio gallery.
    """

    @staticmethod
    def list_images(
        active_only: bool = False,
        featured_only: bool = False,
        event_type: str | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "display_order",
        sort_order: str = "asc",
    ) -> dict[str, Any]:
        """
        Page through gallery images.

        Sorting by display_order breaks ties newest first. An unknown
        event_type filter is ignored.

        Returns:
            {"images": [...], "total", "page", "limit", "has_more"}
        """
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*")

        if active_only:
            query = query.eq("is_active", True)
        if featured_only:
            query = query.eq("is_featured", True)
        if event_type in {t.value for t in PortfolioEventType}:
            query = query.eq("event_type", event_type)
        if search:
            term = search.translate(str.maketrans("", "", ",()")).strip()
            if term:
                query = query.or_(
                    f"title.ilike.%{term}%,description.ilike.%{term}%,event_name.ilike.%{term}%"
                )

        if sort_by not in SORTABLE_COLUMNS:
            sort_by = "display_order"
        descending = sort_order == "desc"
        query = query.order(sort_by, desc=descending)
        if sort_by == "display_order":
            query = query.order("created_at", desc=True)

        try:
            images = query.range(offset, offset + limit - 1).execute().data or []
        except Exception as e:
            logger.error(f"Failed to fetch events portfolio images: {e}")
            raise DatabaseError("fetch events portfolio images", friendly_database_message(e))

        return {
            "images": [_with_url(image) for image in images],
            "total": len(images),
            "page": offset // limit + 1,
            "limit": limit,
            "has_more": len(images) == limit,
        }

    @staticmethod
    def fetch_image(image_id: str) -> dict[str, Any]:
        try:
            image = SupabaseClient.fetch_one(TABLE, "id", image_id)
        except Exception as e:
            logger.error(f"Failed to fetch events portfolio image {image_id}: {e}")
            raise DatabaseError("fetch image", friendly_database_message(e))
        if not image:
            raise NotFoundError("Image", image_id)
        return image

    @staticmethod
    def get_image(image_id: str) -> dict[str, Any]:
        image = EventsPortfolioService.fetch_image(image_id)
        return {
            "image": image,
            "download_url": StorageService.get_public_url(BUCKET, image["file_path"]),
        }

    @staticmethod
    def upload_image(
        file: ImageFile,
        title: str,
        description: str | None = None,
        alt_text: str | None = None,
        caption: str | None = None,
        event_name: str | None = None,
        event_date: str | None = None,
        event_location: str | None = None,
        event_type: str | None = None,
        is_active: bool = False,
        is_featured: bool = False,
        display_order: int = 0,
        tags: list[str] | None = None,
        seo_keywords: str | None = None,
    ) -> dict[str, Any]:
        """
        Upload a gallery photo and record it.

        Alt text defaults to the title. If the metadata insert fails the
        uploaded file is removed again.

        Raises:
            ValidationFailedError: Missing title or unknown event type
            InvalidFileTypeError: Not JPEG, PNG, WebP or GIF
            FileTooLargeError: Over the image ceiling
            DatabaseError: Metadata insert failed
        """
        title = (title or "").strip()
        if not title:
            raise ValidationFailedError("Title is required", field="title")
        validate_image(file, settings.MAX_IMAGE_UPLOAD_MB, IMAGE_MIME_TYPES)
        event_type = parse_event_type(event_type)

        filename = portfolio_filename(file.filename)
        path = f"{FOLDER}/{filename}"
        StorageService.upload_bytes(BUCKET, path, file.content, file.content_type)

        data = {
            "filename": filename,
            "original_filename": file.filename,
            "file_path": path,
            "file_size": file.size,
            "mime_type": file.content_type,
            "title": title,
            "description": _blank_to_none(description),
            "alt_text": _blank_to_none(alt_text) or title,
            "caption": _blank_to_none(caption),
            "event_name": _blank_to_none(event_name),
            "event_date": event_date or None,
            "event_location": _blank_to_none(event_location),
            "event_type": event_type,
            "is_active": is_active,
            "is_featured": is_featured,
            "display_order": display_order,
            "tags": tags or None,
            "seo_keywords": _blank_to_none(seo_keywords),
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Database insert error, removing uploaded file: {e}")
            StorageService.delete_files(BUCKET, [path])
            raise DatabaseError("save image record", friendly_database_message(e))

        image = response.data[0]
        logger.info(f"Uploaded events portfolio image: {image['id']}")
        return {
            "image": image,
            "url": StorageService.get_public_url(BUCKET, path),
            "path": path,
        }

    @staticmethod
    def update_image(image_id: str, update: EventsPortfolioImageUpdate) -> dict[str, Any]:
        """
        Edit an image's metadata; only the fields sent are changed.

        Raises:
            ValidationFailedError: Blank title or unknown event type
            NotFoundError: No such image
        """
        data = update.model_dump(exclude_unset=True)

        if "title" in data:
            data["title"] = (data["title"] or "").strip()
            if not data["title"]:
                raise ValidationFailedError("Title cannot be empty", field="title")
        for column in ("description", "caption", "event_name", "event_location", "seo_keywords"):
            if column in data:
                data[column] = _blank_to_none(data[column])
        if "alt_text" in data:
            # Blank alt text falls back to the new title, else stays as stored
            alt_text = _blank_to_none(data.pop("alt_text")) or data.get("title")
            if alt_text:
                data["alt_text"] = alt_text
        if "event_type" in data:
            data["event_type"] = parse_event_type(data["event_type"])
        if "event_date" in data:
            data["event_date"] = data["event_date"] or None

        existing = EventsPortfolioService.fetch_image(image_id)
        if not data:
            return existing

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).update(data).eq("id", image_id).execute()
        except Exception as e:
            logger.error(f"Error updating events portfolio image: {e}")
            raise DatabaseError("update image", friendly_database_message(e))

        logger.info(f"Updated events portfolio image: {image_id}")
        return response.data[0] if response.data else {**existing, **data}

    @staticmethod
    def toggle_featured(image_id: str) -> None:
        """
        Flip an image's featured flag.

        Raises:
            NotFoundError: The database function found no such image
        """
        try:
            toggled = SupabaseClient.call_rpc(
                "toggle_events_portfolio_featured",
                {"image_id": image_id},
            )
        except Exception as e:
            logger.error(f"Error toggling featured status: {e}")
            raise DatabaseError("toggle featured status", friendly_database_message(e))

        if not toggled:
            raise NotFoundError("Image", image_id)
        logger.info(f"Toggled featured status of events portfolio image: {image_id}")

    @staticmethod
    def reorder(items: list[ReorderEntry]) -> None:
        """Give each listed image its new display_order."""
        try:
            SupabaseClient.call_rpc(
                "reorder_events_portfolio_images",
                {
                    "image_ids": [item.id for item in items],
                    "new_orders": [item.display_order for item in items],
                },
            )
        except Exception as e:
            logger.error(f"Error reordering events portfolio images: {e}")
            raise DatabaseError("reorder images", friendly_database_message(e))

        logger.info(f"Reordered {len(items)} events portfolio image(s)")

    @staticmethod
    def delete_image(image_id: str) -> None:
        """
        Delete the row, then the file; a storage failure is only logged.
        """
        image = EventsPortfolioService.fetch_image(image_id)

        client = SupabaseClient.get_client()
        try:
            client.table(TABLE).delete().eq("id", image_id).execute()
        except Exception as e:
            logger.error(f"Error deleting events portfolio image from database: {e}")
            raise DatabaseError("delete image record", friendly_database_message(e))

        if not StorageService.delete_files(BUCKET, [image["file_path"]]):
            logger.warning(f"Failed to delete file from storage: {image['file_path']}")

        logger.info(f"Deleted events portfolio image: {image_id}")
