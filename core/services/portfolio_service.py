# =============================================================================
# core/services/portfolio_service.py - Portfolio Gallery
# =============================================================================
# Portfolio tiles shown in the masonry gallery. Each tile may point at an
# uploaded image in the portfolio-gallery-images bucket.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from lib.uploads import ImageFile, validate_image
from core.models.content import PortfolioItemInput, PortfolioItemUpdate
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

TABLE = "portfolio_items"
IMAGES_TABLE = "portfolio_images"
BUCKET = "portfolio-gallery-images"
FOLDER = "portfolio-gallery"


class PortfolioService:
    """
    Service for portfolio gallery items.
    """

    @staticmethod
    def list_items(active_only: bool = False) -> list[dict[str, Any]]:
        """
        List portfolio tiles in display order.

        Args:
            active_only: Public gallery passes True; the admin list shows all
        """
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*")
        if active_only:
            query = query.eq("is_active", True)

        try:
            response = query.order("display_order").execute()
        except Exception as e:
            logger.error(f"Failed to load portfolio items: {e}")
            raise DatabaseError("load portfolio items", friendly_database_message(e))

        return response.data or []

    @staticmethod
    def get_item(item_id: str) -> dict[str, Any]:
        item = SupabaseClient.fetch_one(TABLE, "id", item_id)
        if not item:
            raise NotFoundError("Portfolio item", item_id)
        return item

    @staticmethod
    def create_item(item: PortfolioItemInput) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        data = item.model_dump(mode="json")

        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create portfolio item: {e}")
            raise DatabaseError("create portfolio item", friendly_database_message(e))

        created = response.data[0]
        logger.info(f"Created portfolio item: {created['id']}")
        return created

    @staticmethod
    def update_item(item_id: str, update: PortfolioItemUpdate | dict[str, Any]) -> dict[str, Any]:
        """
        Update a tile. The id column is never part of the update.

        Raises:
            NotFoundError: No such item
        """
        if isinstance(update, PortfolioItemUpdate):
            data = update.model_dump(mode="json", exclude_unset=True)
        else:
            data = dict(update)
        data.pop("id", None)

        item = PortfolioService.get_item(item_id)
        if not data:
            return item

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).update(data).eq("id", item_id).execute()
        except Exception as e:
            logger.error(f"Failed to update portfolio item: {e}")
            raise DatabaseError("update portfolio item", friendly_database_message(e))

        logger.info(f"Updated portfolio item: {item_id}")
        return response.data[0] if response.data else {**item, **data}

    @staticmethod
    def delete_item(item_id: str) -> None:
        PortfolioService.get_item(item_id)
        client = SupabaseClient.get_client()
        try:
            client.table(TABLE).delete().eq("id", item_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete portfolio item: {e}")
            raise DatabaseError("delete portfolio item", friendly_database_message(e))
        logger.info(f"Deleted portfolio item: {item_id}")

    @staticmethod
    def assign_image(item_id: str, file: ImageFile) -> dict[str, Any]:
        """
        Upload an image and make it the tile's picture.

        Steps: upload to storage, insert the portfolio_images row, point the
        item at the new image id and public URL.

        Returns:
            Updated portfolio item
        """
        PortfolioService.get_item(item_id)
        validate_image(file, settings.MAX_IMAGE_UPLOAD_MB, settings.allowed_image_types_list)

        uploaded = StorageService.upload_image(BUCKET, FOLDER, file)
        client = SupabaseClient.get_client()

        try:
            image = (
                client.table(IMAGES_TABLE)
                .insert({
                    "filename": uploaded.path.rsplit("/", 1)[-1],
                    "original_filename": file.filename,
                    "file_path": uploaded.path,
                    "file_size": file.size,
                    "mime_type": file.content_type,
                    "alt_text": "Portfolio gallery image",
                    "is_active": True,
                    "display_order": 1,
                })
                .execute()
            ).data[0]

            response = (
                client.table(TABLE)
                .update({"image_id": image["id"], "image_url": uploaded.url})
                .eq("id", item_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to assign portfolio image: {e}")
            raise DatabaseError("assign portfolio image", friendly_database_message(e))

        logger.info(f"Assigned image {image['id']} to portfolio item {item_id}")
        return response.data[0]
