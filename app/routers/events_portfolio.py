# =============================================================================
# app/routers/events_portfolio.py - Events Portfolio Gallery Endpoints
# =============================================================================
# Photos of past events for the Conference page. The public site lists
# active images; admins upload, edit, feature, reorder and delete them.
# =============================================================================

import json
import logging
from typing import Annotated, Literal, TypeVar

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, ValidationError

from app.auth import AuthUser, get_current_user
from app.dependencies import NotificationsDep, read_upload, report_outcome
from app.exceptions import ValidationFailedError
from core.models.content import EventsPortfolioImageUpdate, EventsPortfolioReorder
from core.services.events_portfolio_service import EventsPortfolioService

logger = logging.getLogger(__name__)

router = APIRouter()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate_body(model: type[ModelT], payload: dict | None) -> ModelT:
    try:
        return model.model_validate(payload or {})
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationFailedError(f"{field}: {first['msg']}", field=field)


def _parse_tags(raw: str | None) -> list[str]:
    """Tags arrive as a JSON array inside the multipart form."""
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationFailedError("Tags must be a JSON array", field="tags")
    if not isinstance(tags, list):
        raise ValidationFailedError("Tags must be a JSON array", field="tags")
    return [str(tag) for tag in tags]


@router.get("")
async def get_events_portfolio(
    id: Annotated[str | None, Query(description="Image UUID")] = None,
    active_only: bool = False,
    featured_only: bool = False,
    event_type: str | None = None,
    search: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
    sort_by: str = "display_order",
    sort_order: Literal["asc", "desc"] = "asc",
):
    """
    List gallery images, or get one image with id.
    """
    if id:
        return EventsPortfolioService.get_image(id)

    return EventsPortfolioService.list_images(
        active_only=active_only,
        featured_only=featured_only,
        event_type=event_type,
        search=search,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post("", status_code=201)
async def upload_events_portfolio_image(
    notifications: NotificationsDep,
    file: Annotated[UploadFile, File(description="JPEG, PNG, WebP or GIF")],
    title: Annotated[str, Form()] = "",
    description: Annotated[str | None, Form()] = None,
    alt_text: Annotated[str | None, Form()] = None,
    caption: Annotated[str | None, Form()] = None,
    event_name: Annotated[str | None, Form()] = None,
    event_date: Annotated[str | None, Form()] = None,
    event_location: Annotated[str | None, Form()] = None,
    event_type: Annotated[str | None, Form()] = None,
    is_active: Annotated[bool, Form()] = False,
    is_featured: Annotated[bool, Form()] = False,
    display_order: Annotated[int, Form()] = 0,
    tags: Annotated[str | None, Form(description="JSON array of strings")] = None,
    seo_keywords: Annotated[str | None, Form()] = None,
    user: AuthUser = Depends(get_current_user),
):
    image_file = await read_upload(file)

    with report_outcome(notifications, user, "Image uploaded successfully!", "Upload Failed"):
        result = EventsPortfolioService.upload_image(
            image_file,
            title=title,
            description=description,
            alt_text=alt_text,
            caption=caption,
            event_name=event_name,
            event_date=event_date,
            event_location=event_location,
            event_type=event_type,
            is_active=is_active,
            is_featured=is_featured,
            display_order=display_order,
            tags=_parse_tags(tags),
            seo_keywords=seo_keywords,
        )

    return {**result, "message": "Image uploaded successfully"}


@router.put("")
async def update_events_portfolio(
    notifications: NotificationsDep,
    id: Annotated[str | None, Query(description="Image UUID")] = None,
    action: Annotated[Literal["toggle_featured", "reorder"] | None, Query()] = None,
    payload: dict | None = Body(default=None),
    user: AuthUser = Depends(get_current_user),
):
    """
    Edit an image's metadata, or:

    - action=toggle_featured&id=...: flip the featured flag
    - action=reorder: body {"items": [{"id", "display_order"}, ...]}
    """
    if action == "reorder":
        reorder = _validate_body(EventsPortfolioReorder, payload)
        with report_outcome(notifications, user, "Images reordered successfully!", "Reorder Failed"):
            EventsPortfolioService.reorder(reorder.items)
        return {"message": "Images reordered successfully"}

    if not id:
        raise ValidationFailedError("Image ID is required", field="id")

    if action == "toggle_featured":
        with report_outcome(notifications, user, "Featured status updated!", "Update Failed"):
            EventsPortfolioService.toggle_featured(id)
        return {"message": "Featured status updated successfully"}

    update = _validate_body(EventsPortfolioImageUpdate, payload)
    with report_outcome(notifications, user, "Image updated successfully!", "Update Failed"):
        image = EventsPortfolioService.update_image(id, update)

    return {"image": image, "message": "Image updated successfully"}


@router.delete("")
async def delete_events_portfolio_image(
    notifications: NotificationsDep,
    id: Annotated[str, Query(description="Image UUID")],
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Image deleted successfully!", "Delete Failed"):
        EventsPortfolioService.delete_image(id)

    return {"message": "Image deleted successfully"}
