# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles file upload/remove/list operations against named Supabase Storage
# buckets, and turns stored paths into public URLs.
# =============================================================================

import logging
from urllib.parse import urlparse

from lib.supabase_client import SupabaseClient
from lib.uploads import ImageFile, UploadedImage, build_storage_path, unique_filename
from app.exceptions import StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Every method takes the bucket name: each page area keeps its images in
    its own bucket (about-dedication, portfolio-gallery-images, ...).
    """

    @staticmethod
    def upload_bytes(
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        """
        Upload raw bytes to a bucket path.

        Returns:
            Storage path where file was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "true" if upsert else "false",
                },
            )
            logger.info(f"Uploaded file to storage: {bucket}/{path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def upload_image(bucket: str, folder: str | None, file: ImageFile) -> UploadedImage:
        """
        Upload an image under a generated unique filename.

        Returns:
            UploadedImage with the storage path and its public URL
        """
        path = build_storage_path(folder, unique_filename(file.filename))
        StorageService.upload_bytes(bucket, path, file.content, file.content_type)
        return UploadedImage(path=path, url=StorageService.get_public_url(bucket, path))

    @staticmethod
    def uploader_for(bucket: str, folder: str | None = "uploads"):
        """Bind a bucket/folder so deferred images can be committed to it."""
        def upload(file: ImageFile) -> UploadedImage:
            return StorageService.upload_image(bucket, folder, file)
        return upload

    @staticmethod
    def get_public_url(bucket: str, storage_path: str) -> str:
        """
        Get a public URL for a storage file.
        """
        client = SupabaseClient.get_client()
        return client.storage.from_(bucket).get_public_url(storage_path)

    @staticmethod
    def resolve_url(bucket: str, value: str | None) -> str | None:
        """
        Turn a stored image reference into something a browser can load.

        Rows hold either a storage path ("uploads/17000_ab.png") or an
        absolute URL chosen from the image browser; only paths are resolved.
        """
        if not value:
            return value
        if value.startswith(("http://", "https://", "data:", "/")):
            return value
        return StorageService.get_public_url(bucket, value)

    @staticmethod
    def path_from_url(bucket: str, value: str) -> str:
        """
        Recover the object path inside a bucket from a stored public URL.

        Relative paths come back unchanged.

        Example:
            StorageService.path_from_url(
                "event-images",
                "https://x.supabase.co/storage/v1/object/public/event-images/uploads/a.png",
            )  # "uploads/a.png"
        """
        marker = f"/{bucket}/"
        path = urlparse(value).path if "://" in value else value
        if marker in path:
            return path.split(marker, 1)[1]
        return path.lstrip("/")

    @staticmethod
    def delete_files(bucket: str, storage_paths: list[str]) -> bool:
        """
        Delete files from storage.

        Returns:
            True if deleted successfully, False if storage reported an error
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove(storage_paths)
            logger.info(f"Deleted {len(storage_paths)} file(s) from storage: {bucket}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            return False

    @staticmethod
    def list_files(
        bucket: str,
        folder: str = "",
        limit: int = 20,
        offset: int = 0,
    ) -> list[dict]:
        """
        List files in a bucket folder, newest first.
        """
        client = SupabaseClient.get_client()

        response = client.storage.from_(bucket).list(
            folder,
            {
                "limit": limit,
                "offset": offset,
                "sortBy": {"column": "created_at", "order": "desc"},
            },
        )
        return response or []
