# =============================================================================
# app/routers/event_submissions.py - Event Enquiry Endpoints
# =============================================================================
# The public enquiry form posts here without signing in; everything else is
# the admin inbox.
#
# Mounted at /api/events/submissions ahead of the events router so the path
# is not read as an event identifier.
# =============================================================================

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query, Request

from app.auth import AuthUser, get_current_user
from app.dependencies import NotificationsDep, report_outcome
from core.models.submissions import (
    BulkSubmissionAction,
    BulkSubmissionDelete,
    EventSubmissionInput,
    SubmissionStatus,
    SubmissionUpdate,
)
from core.services.event_submission_service import EventSubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()

SubmissionId = Annotated[str, Path(description="Submission UUID")]


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or "unknown"


# =============================================================================
# Public Form
# =============================================================================

@router.post("", status_code=201)
async def submit_event_form(submission: EventSubmissionInput, request: Request):
    """
    Submit an enquiry about an event. No sign-in needed.
    """
    created = EventSubmissionService.create_submission(
        submission,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent") or "unknown",
        referrer=request.headers.get("referer") or "direct",
    )
    return {
        "success": True,
        "message": "Form submitted successfully",
        "submission_id": created["id"],
    }


# =============================================================================
# Inbox
# =============================================================================

@router.get("")
async def list_submissions(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    status: SubmissionStatus | None = None,
    event_id: str | None = None,
    search: str | None = None,
    is_spam: bool = False,
    sort_by: str = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    user: AuthUser = Depends(get_current_user),
):
    """
    Page through enquiries. Spam is listed only with is_spam=true.
    """
    return EventSubmissionService.list_submissions(
        page=page,
        limit=limit,
        status=status,
        event_id=event_id,
        search=search,
        is_spam=is_spam,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.put("")
async def bulk_update_submissions(
    request: BulkSubmissionAction,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Submissions updated successfully!", "Update Failed"):
        result = EventSubmissionService.bulk_action(request)

    return {**result, "message": f"Updated {result['updated_count']} submission(s)"}


@router.delete("")
async def bulk_delete_submissions(
    request: BulkSubmissionDelete,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Submissions deleted successfully!", "Delete Failed"):
        result = EventSubmissionService.bulk_delete(request.submission_ids)

    return {**result, "message": f"Deleted {result['deleted_count']} submission(s)"}


@router.get("/{submission_id}")
async def get_submission(
    submission_id: SubmissionId,
    user: AuthUser = Depends(get_current_user),
):
    return {"submission": EventSubmissionService.get_submission(submission_id)}


@router.patch("/{submission_id}")
async def update_submission(
    submission_id: SubmissionId,
    update: SubmissionUpdate,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Change an enquiry's status, admin notes or spam flag.
    """
    with report_outcome(notifications, user, "Submission updated successfully!", "Update Failed"):
        submission = EventSubmissionService.update_submission(submission_id, update)

    return {"submission": submission, "message": "Submission updated successfully"}


@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: SubmissionId,
    notifications: NotificationsDep,
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Submission deleted successfully!", "Delete Failed"):
        EventSubmissionService.delete_submission(submission_id)

    return {"message": "Submission deleted successfully"}
