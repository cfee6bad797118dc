# =============================================================================
# app/routers/images.py - Image Library Endpoints
# =============================================================================
# Browse, upload and delete images in the storage buckets the editors pick
# images from.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, Field

from app.auth import AuthUser, get_current_user
from app.dependencies import NotificationsDep, read_upload, report_outcome
from core.services.image_library_service import EVENT_IMAGES_BUCKET, ImageLibraryService

logger = logging.getLogger(__name__)

router = APIRouter()


class DeleteImagesRequest(BaseModel):
    """Files to remove, as storage paths or public URLs."""
    file_paths: list[str] = Field(..., min_length=1)
    bucket: str = EVENT_IMAGES_BUCKET
    image_ids: list[str] | None = None


@router.get("")
async def list_images(
    bucket: str = EVENT_IMAGES_BUCKET,
    folder: str = "",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    event_id: str | None = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    List library images.

    For the event-images bucket the catalogue table is read first; other
    buckets are listed straight from storage.
    """
    return ImageLibraryService.list_images(
        bucket=bucket, folder=folder, page=page, limit=limit, event_id=event_id
    )


@router.post("", status_code=201)
async def upload_image(
    notifications: NotificationsDep,
    file: Annotated[UploadFile, File(description="Image to upload")],
    bucket: Annotated[str, Form()] = EVENT_IMAGES_BUCKET,
    category: Annotated[str, Form(description="Folder inside the bucket")] = "general",
    event_id: Annotated[str | None, Form()] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload an image (JPEG, PNG, WebP or GIF, up to 50 MB).

    With an event_id the image is also added to that event's gallery.
    """
    image = await read_upload(file)

    with report_outcome(notifications, user, "Image uploaded successfully!", "Upload Failed"):
        uploaded = ImageLibraryService.upload_image(
            image, bucket=bucket, category=category, event_id=event_id or None
        )

    return {"image": uploaded, "message": "Image uploaded successfully"}


@router.delete("")
async def delete_images(
    request: DeleteImagesRequest,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Images deleted successfully!", "Delete Failed"):
        result = ImageLibraryService.delete_images(
            request.file_paths, bucket=request.bucket, image_ids=request.image_ids
        )

    return {**result, "message": f"{result['deleted_count']} image(s) deleted"}
