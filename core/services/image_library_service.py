# =============================================================================
# core/services/image_library_service.py - Image Browser
# =============================================================================
# Backs the "choose an image" dialog used by the event and section editors.
# For the event-images bucket the event_images table is the catalogue; other
# buckets are browsed by listing storage directly.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.uploads import IMAGE_EXTENSIONS, ImageFile, validate_image
from lib.utils import strip_extension
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import StorageDeleteError

logger = logging.getLogger(__name__)

EVENT_IMAGES_BUCKET = "event-images"
EVENT_IMAGES_TABLE = "event_images"


class ImageLibraryService:
    """
    Service for browsing, uploading and deleting library images.
    """

    @staticmethod
    def list_images(
        bucket: str = EVENT_IMAGES_BUCKET,
        folder: str = "",
        page: int = 1,
        limit: int = 20,
        event_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Browse images in a bucket.

        Returns:
            {"images": [...], "total", "page", "limit", "has_more", "source"}
        """
        page = max(page, 1)
        limit = max(limit, 1)
        offset = (page - 1) * limit

        if bucket == EVENT_IMAGES_BUCKET:
            images = ImageLibraryService._list_from_database(offset, limit, event_id)
            if images is not None:
                return {
                    "images": images,
                    "total": len(images),
                    "page": page,
                    "limit": limit,
                    "has_more": len(images) == limit,
                    "source": "database",
                }

        files = StorageService.list_files(bucket, folder, limit=limit, offset=offset)
        images = []
        for file in files:
            name = file.get("name") or ""
            if not name.lower().endswith(IMAGE_EXTENSIONS):
                continue
            path = f"{folder.strip('/')}/{name}" if folder.strip("/") else name
            metadata = file.get("metadata") or {}
            images.append({
                "id": name,
                "filename": name,
                "file_path": StorageService.get_public_url(bucket, path),
                "title": strip_extension(name),
                "alt_text": strip_extension(name),
                "file_size": metadata.get("size", 0),
                "mime_type": metadata.get("mimetype", "image/jpeg"),
                "created_at": file.get("created_at"),
                "updated_at": file.get("updated_at"),
                "bucket_name": bucket,
                "folder_path": folder,
            })

        return {
            "images": images,
            "total": len(images),
            "page": page,
            "limit": limit,
            "has_more": len(images) == limit,
            "source": "storage",
        }

    @staticmethod
    def _list_from_database(offset: int, limit: int, event_id: str | None) -> list[dict] | None:
        """Catalogue rows for event images, or None if the table can't be read."""
        client = SupabaseClient.get_client()
        query = (
            client.table(EVENT_IMAGES_TABLE)
            .select(
                "id, filename, original_filename, file_path, file_size, mime_type, "
                "alt_text, caption, image_type, display_order, is_active, created_at, event_id"
            )
            .eq("is_active", True)
        )
        if event_id:
            query = query.eq("event_id", event_id)

        try:
            rows = (
                query.order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            ).data
        except Exception as e:
            logger.warning(f"Falling back to storage listing: {e}")
            return None

        if rows is None:
            return None

        return [
            {
                "id": row["id"],
                "filename": row["filename"],
                "file_path": row["file_path"],
                "title": strip_extension(row.get("original_filename") or row["filename"]),
                "alt_text": row.get("alt_text") or row["filename"],
                "description": row.get("caption") or "",
                "tags": [row.get("image_type") or "gallery"],
                "category": "events",
                "file_size": row.get("file_size") or 0,
                "created_at": row.get("created_at"),
                "database_id": row["id"],
                "event_id": row.get("event_id"),
            }
            for row in rows
        ]

    @staticmethod
    def upload_image(
        file: ImageFile,
        bucket: str = EVENT_IMAGES_BUCKET,
        category: str = "general",
        event_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Upload an image into the library.

        When the upload targets the event-images bucket with an event id, a
        gallery row is added to event_images as well; failing to add that
        row is logged and the upload still counts.

        Raises:
            InvalidFileTypeError / FileTooLargeError: Rejected file
            StorageUploadError: Upload failed
        """
        validate_image(file, settings.MAX_IMAGE_UPLOAD_MB, settings.allowed_image_types_list)

        uploaded = StorageService.upload_image(bucket, category, file)
        filename = uploaded.path.rsplit("/", 1)[-1]

        database_id = None
        if bucket == EVENT_IMAGES_BUCKET and event_id:
            client = SupabaseClient.get_client()
            try:
                response = client.table(EVENT_IMAGES_TABLE).insert({
                    "event_id": event_id,
                    "filename": filename,
                    "original_filename": file.filename,
                    "file_path": uploaded.url,
                    "file_size": file.size,
                    "mime_type": file.content_type,
                    "alt_text": file.stem,
                    "image_type": "gallery",
                    "display_order": 0,
                    "is_active": True,
                }).execute()
                database_id = response.data[0]["id"] if response.data else None
            except Exception as e:
                logger.warning(f"Image uploaded but not catalogued for event {event_id}: {e}")

        return {
            "id": database_id or filename,
            "filename": filename,
            "original_filename": file.filename,
            "file_path": uploaded.url,
            "storage_path": uploaded.path,
            "file_size": file.size,
            "mime_type": file.content_type,
            "title": file.stem,
            "alt_text": file.stem,
            "bucket_name": bucket,
            "folder_path": category,
            "database_id": database_id,
        }

    @staticmethod
    def delete_images(
        file_paths: list[str],
        bucket: str = EVENT_IMAGES_BUCKET,
        image_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Delete library files, given as storage paths or public URLs.

        Catalogue rows are removed too when ids are given for the
        event-images bucket.

        Raises:
            StorageDeleteError: Storage refused the delete
        """
        paths = [StorageService.path_from_url(bucket, value) for value in file_paths]

        if not StorageService.delete_files(bucket, paths):
            raise StorageDeleteError(bucket, paths)

        if image_ids and bucket == EVENT_IMAGES_BUCKET:
            client = SupabaseClient.get_client()
            try:
                client.table(EVENT_IMAGES_TABLE).delete().in_("id", image_ids).execute()
            except Exception as e:
                logger.warning(f"Files deleted but catalogue rows remain: {e}")

        return {"deleted_count": len(file_paths), "deleted_files": file_paths}
