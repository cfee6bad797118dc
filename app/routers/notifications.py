# =============================================================================
# app/routers/notifications.py - Admin Notification Banner
# =============================================================================
# The admin UI polls the banner after each editor action. Banners auto-hide
# a few seconds after they were shown; DELETE dismisses one early.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from app.dependencies import NotificationsDep

router = APIRouter()


@router.get("")
async def get_notification(
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the visible banner for the signed-in admin, or null.
    """
    current = notifications.current(user.key)
    return {"notification": current.to_dict() if current else None}


@router.delete("")
async def dismiss_notification(
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    notifications.dismiss(user.key)
    return {"notification": None}
