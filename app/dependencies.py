# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources, plus the helpers every
# admin router uses:
# - the per-admin notification banners
# - reporting an editor action's outcome as a banner
# - turning an UploadFile into an in-memory ImageFile
# =============================================================================

import logging
from contextlib import contextmanager
from typing import Annotated, Iterator

from fastapi import Depends, UploadFile

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.exceptions import CMSException, DatabaseError
from lib.db_errors import friendly_database_message
from lib.notifications import NotificationCenter
from lib.uploads import ImageFile

logger = logging.getLogger(__name__)

# One banner per signed-in admin, shared by all admin routers
notification_center = NotificationCenter(
    auto_hide_seconds=settings.NOTIFICATION_AUTO_HIDE_SECONDS,
)


def get_notification_center() -> NotificationCenter:
    """
    Get the process-wide notification center.

    Tests override this dependency with a center on a fake clock.
    """
    return notification_center


NotificationsDep = Annotated[NotificationCenter, Depends(get_notification_center)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


@contextmanager
def report_outcome(
    notifications: NotificationCenter,
    user: AuthUser,
    success_message: str,
    failure_title: str,
    success_title: str = "Success!",
) -> Iterator[None]:
    """
    Show a success banner if the block completes, an error banner if it
    raises. A CMSException propagates unchanged; any other error (a raw
    PostgREST failure, say) is re-raised as a DatabaseError carrying the
    same friendly message as the banner.

    Usage:
        with report_outcome(notifications, user, "Section saved successfully!", "Save Failed"):
            SectionService.save_section(key, payload)
    """
    banner = notifications.banner_for(user.key)
    try:
        yield
    except CMSException as e:
        banner.error(failure_title, e.message)
        raise
    except Exception as e:
        logger.exception(f"{failure_title}: {e}")
        message = friendly_database_message(e)
        banner.error(failure_title, message)
        raise DatabaseError("complete the request", message) from e
    banner.success(success_title, success_message)


async def read_upload(upload: UploadFile) -> ImageFile:
    """Read a multipart file fully into memory."""
    content = await upload.read()
    return ImageFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )
