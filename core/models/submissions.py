# =============================================================================
# core/models/submissions.py - Event Enquiry Schemas
# =============================================================================
# Visitors enquire about a stand for an event through the public form; admins
# triage the enquiries in the submissions inbox.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SubmissionStatus(str, Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class EventSubmissionInput(BaseModel):
    """
    Schema for the public enquiry form.

    Example:
        {
            "name": "Sara Khan",
            "email": "sara@acme.ae",
            "event_id": "5b0c...",
            "company_name": "Acme",
            "exhibition_name": "GITEX Global",
            "budget": "50k-100k",
            "message": "We need a 6x9m island stand"
        }
    """
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    event_id: str | None = None
    phone: str | None = None
    message: str | None = None
    company_name: str | None = None
    exhibition_name: str | None = None
    budget: str | None = None
    attachment_url: str | None = None
    attachment_filename: str | None = None
    attachment_size: int | None = None


class SubmissionUpdate(BaseModel):
    """Inbox edit of a single enquiry."""
    status: SubmissionStatus | None = None
    admin_notes: str | None = None
    is_spam: bool | None = None


class SubmissionAction(str, Enum):
    MARK_READ = "mark_read"
    MARK_UNREAD = "mark_unread"
    MARK_REPLIED = "mark_replied"
    ARCHIVE = "archive"
    MARK_SPAM = "mark_spam"
    MARK_NOT_SPAM = "mark_not_spam"
    UPDATE = "update"


class BulkSubmissionAction(BaseModel):
    action: SubmissionAction
    submission_ids: list[str] = Field(..., min_length=1)
    data: dict[str, Any] | None = Field(
        default=None,
        description="Field values, only used by the 'update' action"
    )


class BulkSubmissionDelete(BaseModel):
    submission_ids: list[str] = Field(..., min_length=1)
