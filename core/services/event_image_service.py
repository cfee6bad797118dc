# =============================================================================
# core/services/event_image_service.py - Images Attached to Events
# =============================================================================
# Event images are rows in event_images pointing at files in the
# event-images bucket. An event has at most one featured, hero and logo
# image, and any number of gallery images.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from lib.utils import is_uuid
from core.models.events import EventImageInput, ImageType
from core.services.storage_service import StorageService
from app.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

TABLE = "event_images"
EVENTS_TABLE = "events"
BUCKET = "event-images"

IMAGE_COLUMNS = (
    "id, image_type, display_order, caption, is_active, created_at, filename, "
    "file_path, alt_text, width, height, file_size, mime_type"
)


def empty_groups() -> dict[str, list]:
    return {image_type.value: [] for image_type in (
        ImageType.FEATURED, ImageType.HERO, ImageType.LOGO, ImageType.GALLERY,
    )}


class EventImageService:
    """
    Service for images attached to events.
    """

    @staticmethod
    def resolve_event_id(identifier: str) -> str | None:
        """
        Accept a UUID as-is; look a slug up among published events.
        """
        if is_uuid(identifier):
            return identifier

        client = SupabaseClient.get_client()
        response = (
            client.table(EVENTS_TABLE)
            .select("id")
            .eq("slug", identifier)
            .eq("is_active", True)
            .not_.is_("published_at", "null")
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0]["id"] if rows else None

    @staticmethod
    def list_images(
        identifier: str,
        image_type: ImageType | None = None,
        include_inactive: bool = False,
    ) -> dict[str, Any]:
        """
        Images of an event grouped by type.

        An unknown slug or a failed read returns empty groups instead of an
        error so public pages still render.

        Returns:
            {"event_id": ..., "images": {"featured": [], ...}, "total": n}
        """
        event_id = EventImageService.resolve_event_id(identifier)
        if not event_id:
            return {"event_id": identifier, "images": empty_groups(), "total": 0}

        client = SupabaseClient.get_client()
        query = client.table(TABLE).select(IMAGE_COLUMNS).eq("event_id", event_id)
        if image_type:
            query = query.eq("image_type", ImageType(image_type).value)
        if not include_inactive:
            query = query.eq("is_active", True)

        try:
            rows = query.order("image_type").order("display_order").execute().data or []
        except Exception as e:
            logger.warning(f"Error fetching event images for {event_id}: {e}")
            return {"event_id": event_id, "images": empty_groups(), "total": 0}

        groups = empty_groups()
        for row in rows:
            if row.get("image_type") in groups:
                groups[row["image_type"]].append(row)

        return {"event_id": event_id, "images": groups, "total": len(rows)}

    @staticmethod
    def add_image(event_id: str, image: EventImageInput, user_id: str | None = None) -> dict[str, Any]:
        """
        Attach an image to an event.

        A featured, hero or logo image replaces the event's existing image of
        that type; gallery images accumulate.

        Raises:
            NotFoundError: No such event
        """
        try:
            event = SupabaseClient.fetch_one(EVENTS_TABLE, "id", event_id, "id")
        except Exception as e:
            logger.error(f"Failed to fetch event {event_id}: {e}")
            raise DatabaseError("add image to event", friendly_database_message(e))
        if not event:
            raise NotFoundError("Event", event_id)

        client = SupabaseClient.get_client()
        image_type = image.image_type.value

        data = image.model_dump(mode="json")
        data["original_filename"] = image.original_filename or image.filename
        data["event_id"] = event_id
        data["uploaded_by"] = user_id
        data["is_active"] = True

        try:
            if image.image_type != ImageType.GALLERY:
                (
                    client.table(TABLE)
                    .delete()
                    .eq("event_id", event_id)
                    .eq("image_type", image_type)
                    .execute()
                )
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to add image to event: {e}")
            raise DatabaseError("add image to event", friendly_database_message(e))

        created = response.data[0]
        logger.info(f"Added {image_type} image {created['id']} to event {event_id}")
        return created

    @staticmethod
    def update_images(event_id: str, updates: list[dict[str, Any]]) -> int:
        """
        Reorder images or edit captions/visibility in one go.

        Each update is {"id", "display_order", "caption", "is_active"}; keys
        that are absent are left alone.

        Returns:
            Number of image rows actually changed; ids that don't belong to
            the event are not counted
        """
        client = SupabaseClient.get_client()
        updated = 0
        for update in updates:
            fields = {
                key: update[key]
                for key in ("display_order", "caption", "is_active")
                if key in update
            }
            if not fields:
                continue
            try:
                response = (
                    client.table(TABLE)
                    .update(fields)
                    .eq("id", update["id"])
                    .eq("event_id", event_id)
                    .execute()
                )
            except Exception as e:
                logger.error(f"Failed to update image {update['id']}: {e}")
                raise DatabaseError("update event images", friendly_database_message(e))
            updated += len(response.data or [])

        logger.info(f"Updated {updated} image(s) of event {event_id}")
        return updated

    @staticmethod
    def delete_image(event_id: str, image_id: str) -> dict[str, Any]:
        """
        Remove an image from an event: row first, then the storage file.

        A storage failure is only logged; the row is already gone.

        Raises:
            NotFoundError: The image doesn't belong to the event
        """
        client = SupabaseClient.get_client()
        rows = (
            client.table(TABLE)
            .select("id, file_path, filename, image_type")
            .eq("event_id", event_id)
            .eq("id", image_id)
            .execute()
        ).data or []
        if not rows:
            raise NotFoundError("Image", image_id)
        image = rows[0]

        try:
            client.table(TABLE).delete().eq("event_id", event_id).eq("id", image_id).execute()
        except Exception as e:
            logger.error(f"Failed to remove image from event: {e}")
            raise DatabaseError("remove image from event", friendly_database_message(e))

        path = StorageService.path_from_url(BUCKET, image["file_path"]) or image["filename"]
        if not StorageService.delete_files(BUCKET, [path]):
            logger.warning(f"Storage file not removed for image {image_id}: {path}")

        logger.info(f"Removed image {image_id} from event {event_id}")
        return {"id": image["id"], "image_type": image["image_type"]}
