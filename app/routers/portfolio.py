# =============================================================================
# app/routers/portfolio.py - Portfolio Gallery Editor Endpoints
# =============================================================================
# Admin CRUD for the portfolio masonry grid. The public gallery is served
# by /api/pages/portfolio.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile

from app.auth import AuthUser, get_current_user
from app.dependencies import NotificationsDep, read_upload, report_outcome
from core.models.content import PortfolioItemInput, PortfolioItemUpdate
from core.services.portfolio_service import PortfolioService

router = APIRouter()

ItemId = Annotated[str, Path(description="Portfolio item UUID")]


@router.get("")
async def list_items(user: AuthUser = Depends(get_current_user)):
    """
    List every portfolio tile, active or not, in display order.
    """
    items = PortfolioService.list_items()
    return {"items": items, "total": len(items)}


@router.post("", status_code=201)
async def create_item(
    item: PortfolioItemInput,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Portfolio item created successfully!", "Create Failed"):
        created = PortfolioService.create_item(item)

    return {"item": created, "message": "Portfolio item created successfully"}


@router.get("/{item_id}")
async def get_item(item_id: ItemId, user: AuthUser = Depends(get_current_user)):
    return {"item": PortfolioService.get_item(item_id)}


@router.put("/{item_id}")
async def update_item(
    item_id: ItemId,
    update: PortfolioItemUpdate,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Portfolio item updated successfully!", "Update Failed"):
        updated = PortfolioService.update_item(item_id, update)

    return {"item": updated, "message": "Portfolio item updated successfully"}


@router.delete("/{item_id}")
async def delete_item(
    item_id: ItemId,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Portfolio item deleted successfully!", "Delete Failed"):
        PortfolioService.delete_item(item_id)

    return {"message": "Portfolio item deleted successfully"}


@router.post("/{item_id}/image")
async def assign_image(
    item_id: ItemId,
    notifications: NotificationsDep,
    file: Annotated[UploadFile, File(description="Tile image")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload an image and set it as the tile's picture.
    """
    image = await read_upload(file)

    with report_outcome(notifications, user, "Image uploaded successfully!", "Upload Failed"):
        item = PortfolioService.assign_image(item_id, image)

    return {"item": item, "message": "Image uploaded successfully"}
