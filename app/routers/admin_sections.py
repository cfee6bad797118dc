# =============================================================================
# app/routers/admin_sections.py - Page Section Editor Endpoints
# =============================================================================
# One editor per page area (about-main, conference-hero, ...). Saving accepts
# either a JSON body or a multipart form with:
# - "data": the section fields as a JSON string
# - one file per image column, named after the column
#
# Files are staged as deferred images and only uploaded once the form
# validates, so a rejected form never leaves orphan files in storage.
# =============================================================================

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Path, Request, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.dependencies import NotificationsDep, read_upload, report_outcome
from app.exceptions import ValidationFailedError
from core.services.section_service import SECTIONS, SectionService, get_definition
from lib.uploads import DeferredImage, stage_image

logger = logging.getLogger(__name__)

router = APIRouter()

SectionKey = Annotated[str, Path(description="Section key, e.g. about-main")]


async def _read_section_form(request: Request) -> tuple[dict[str, Any], dict[str, DeferredImage]]:
    """
    Split a save request into the field payload and staged images.

    Raises:
        ValidationFailedError: "data" is not a JSON object
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        payload = await request.json()
        if not isinstance(payload, dict):
            raise ValidationFailedError("Section data must be a JSON object", field="data")
        return payload, {}

    form = await request.form()
    try:
        payload = json.loads(form.get("data") or "{}")
    except json.JSONDecodeError:
        raise ValidationFailedError("Section data is not valid JSON", field="data")
    if not isinstance(payload, dict):
        raise ValidationFailedError("Section data must be a JSON object", field="data")

    images: dict[str, DeferredImage] = {}
    for column, value in form.multi_items():
        if column == "data" or not isinstance(value, StarletteUploadFile):
            continue
        file = await read_upload(value)
        images[column] = stage_image(
            file,
            settings.MAX_SECTION_UPLOAD_MB,
            settings.allowed_image_types_list,
        )

    return payload, images


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
async def list_sections(user: AuthUser = Depends(get_current_user)):
    """
    List the editable page areas.
    """
    return {
        "sections": [
            {
                "key": definition.key,
                "title": definition.title,
                "image_columns": list(definition.image_columns),
                "has_items": definition.items_table is not None,
                "has_image_library": definition.images_table is not None,
            }
            for definition in SECTIONS.values()
        ]
    }


@router.get("/{key}")
async def get_section(key: SectionKey, user: AuthUser = Depends(get_current_user)):
    """
    Load a section editor. Unsaved areas return their defaults with id null.
    """
    return {"section": SectionService.get_section(key)}


@router.put("/{key}")
async def save_section(
    key: SectionKey,
    request: Request,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Save a section editor form, uploading any staged images first.
    """
    definition = get_definition(key)

    with report_outcome(
        notifications, user, f"{definition.title} saved successfully!", "Save Failed"
    ):
        payload, images = await _read_section_form(request)
        section = SectionService.save_section(key, payload, images)

    return {"section": section, "message": f"{definition.title} saved successfully"}


# =============================================================================
# Section Image Library
# =============================================================================

@router.get("/{key}/images")
async def list_section_images(key: SectionKey, user: AuthUser = Depends(get_current_user)):
    images = SectionService.list_section_images(key)
    return {"images": images, "total": len(images)}


@router.post("/{key}/images", status_code=201)
async def upload_section_image(
    key: SectionKey,
    notifications: NotificationsDep,
    file: Annotated[UploadFile, File(description="Image to upload")],
    alt_text: Annotated[str | None, Form()] = None,
    user: AuthUser = Depends(get_current_user),
):
    image_file = await read_upload(file)

    with report_outcome(notifications, user, "Image uploaded successfully!", "Upload Failed"):
        image = SectionService.upload_section_image(key, image_file, alt_text=alt_text)

    return {"image": image, "message": "Image uploaded successfully"}


@router.delete("/{key}/images/{image_id}")
async def delete_section_image(
    key: SectionKey,
    image_id: Annotated[str, Path(description="Image UUID")],
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Image deleted successfully!", "Delete Failed"):
        SectionService.delete_section_image(key, image_id)

    return {"message": "Image deleted successfully"}
