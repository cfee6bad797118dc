# =============================================================================
# core/services/event_submission_service.py - Event Enquiry Submissions
# =============================================================================
# The public enquiry form writes into event_form_submissions; likely spam is
# stored too but archived straight away. Admins page through the inbox, mark
# enquiries read/replied/spam and delete them.
# =============================================================================

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from core.models.submissions import (
    BulkSubmissionAction,
    EventSubmissionInput,
    SubmissionAction,
    SubmissionStatus,
    SubmissionUpdate,
)
from app.exceptions import DatabaseError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

TABLE = "event_form_submissions"
EVENTS_TABLE = "events"

SORTABLE_COLUMNS = ("created_at", "updated_at", "name", "email", "status", "company_name")

SPAM_KEYWORDS = (
    "viagra", "casino", "lottery", "winner", "congratulations",
    "click here", "free money", "make money fast", "work from home",
    "weight loss", "lose weight", "diet pills", "crypto", "bitcoin",
)
SUSPICIOUS_EMAIL_DOMAINS = ("tempmail", "guerrillamail", "10minutemail", "mailinator")

_URL = re.compile(r"https?://")
_REPEATED_CHARACTER = re.compile(r"(.)\1{4,}")

# Optional form fields stored only when the visitor filled them in
OPTIONAL_FIELDS = (
    "event_id", "phone", "message", "attachment_url", "company_name",
    "exhibition_name", "budget", "attachment_filename", "attachment_size",
)

BULK_ACTION_FIELDS: dict[SubmissionAction, dict[str, Any]] = {
    SubmissionAction.MARK_READ: {"status": SubmissionStatus.READ.value},
    SubmissionAction.MARK_UNREAD: {"status": SubmissionStatus.NEW.value},
    SubmissionAction.MARK_REPLIED: {"status": SubmissionStatus.REPLIED.value},
    SubmissionAction.ARCHIVE: {"status": SubmissionStatus.ARCHIVED.value},
    SubmissionAction.MARK_SPAM: {"is_spam": True, "status": SubmissionStatus.ARCHIVED.value},
    SubmissionAction.MARK_NOT_SPAM: {"is_spam": False, "status": SubmissionStatus.NEW.value},
}


def looks_like_spam(name: str, email: str, message: str | None) -> bool:
    """
    Cheap heuristics over the lowercased name, email and message.

    Flags spam keywords, more than two links, a character repeated five or
    more times in a row, and throwaway email domains.

    Example:
        looks_like_spam("Win", "x@mailinator.com", None)  # True
    """
    text = f"{name} {email} {message or ''}".lower()

    if any(keyword in text for keyword in SPAM_KEYWORDS):
        return True
    if len(_URL.findall(text)) > 2:
        return True
    if _REPEATED_CHARACTER.search(text):
        return True

    domain = email.split("@", 1)[1].lower() if "@" in email else ""
    return any(suspicious in domain for suspicious in SUSPICIOUS_EMAIL_DOMAINS)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventSubmissionService:
    """
    Service for event enquiry submissions.
    """

    @staticmethod
    def attach_events(
        submissions: list[dict[str, Any]],
        columns: str = "id, title, slug",
    ) -> list[dict[str, Any]]:
        """Add the enquired-about event (or None) to each submission."""
        event_ids = sorted({s["event_id"] for s in submissions if s.get("event_id")})
        events: dict[str, dict] = {}

        if event_ids:
            client = SupabaseClient.get_client()
            try:
                response = client.table(EVENTS_TABLE).select(columns).in_("id", event_ids).execute()
            except Exception as e:
                logger.error(f"Failed to load submission events: {e}")
                raise DatabaseError("load submission events", friendly_database_message(e))
            events = {event["id"]: event for event in response.data or []}

        for submission in submissions:
            submission["event"] = events.get(submission.get("event_id"))
        return submissions

    # -------------------------------------------------------------------------
    # Public form
    # -------------------------------------------------------------------------

    @staticmethod
    def create_submission(
        submission: EventSubmissionInput,
        ip_address: str = "unknown",
        user_agent: str = "unknown",
        referrer: str = "direct",
    ) -> dict[str, Any]:
        """
        Store an enquiry from the public form.

        Likely spam is stored with is_spam set and status "archived";
        everything else starts as "new".

        Returns:
            The created row
        """
        is_spam = looks_like_spam(submission.name, submission.email, submission.message)

        data: dict[str, Any] = {
            "name": submission.name.strip(),
            "email": submission.email.strip(),
            "ip_address": ip_address,
            "user_agent": user_agent,
            "referrer": referrer,
            "is_spam": is_spam,
            "status": (SubmissionStatus.ARCHIVED if is_spam else SubmissionStatus.NEW).value,
        }
        for column in OPTIONAL_FIELDS:
            value = getattr(submission, column)
            if value:
                data[column] = value

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Error creating submission: {e}")
            raise DatabaseError("submit form", friendly_database_message(e))

        created = response.data[0]
        logger.info(f"New event submission {created['id']} (spam={is_spam})")
        return created

    # -------------------------------------------------------------------------
    # Inbox
    # -------------------------------------------------------------------------

    @staticmethod
    def list_submissions(
        page: int = 1,
        limit: int = 20,
        status: SubmissionStatus | None = None,
        event_id: str | None = None,
        search: str | None = None,
        is_spam: bool = False,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> dict[str, Any]:
        """
        Page through the inbox.

        Spam is hidden unless is_spam=True, which shows only spam.

        Returns:
            {"submissions": [...], "pagination": {...}}
        """
        offset = (page - 1) * limit
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact").eq("is_spam", is_spam)

        if status:
            query = query.eq("status", SubmissionStatus(status).value)
        if event_id:
            query = query.eq("event_id", event_id)
        if search:
            term = search.translate(str.maketrans("", "", ",()")).strip()
            if term:
                query = query.or_(
                    f"name.ilike.%{term}%,email.ilike.%{term}%,"
                    f"company_name.ilike.%{term}%,message.ilike.%{term}%"
                )

        if sort_by not in SORTABLE_COLUMNS:
            sort_by = "created_at"

        try:
            response = (
                query.order(sort_by, desc=sort_order != "asc")
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching submissions: {e}")
            raise DatabaseError("fetch submissions", friendly_database_message(e))

        total = response.count or 0
        total_pages = math.ceil(total / limit)
        return {
            "submissions": EventSubmissionService.attach_events(response.data or []),
            "pagination": {
                "current_page": page,
                "total_pages": total_pages,
                "total_count": total,
                "per_page": limit,
                "has_next": page < total_pages,
                "has_prev": page > 1,
            },
        }

    @staticmethod
    def get_submission(submission_id: str) -> dict[str, Any]:
        """
        One submission with the event's title, slug, dates and venue.

        Raises:
            NotFoundError: No such submission
        """
        try:
            submission = SupabaseClient.fetch_one(TABLE, "id", submission_id)
        except Exception as e:
            logger.error(f"Error fetching submission {submission_id}: {e}")
            raise DatabaseError("fetch submission", friendly_database_message(e))
        if not submission:
            raise NotFoundError("Submission", submission_id)

        return EventSubmissionService.attach_events(
            [submission],
            columns="id, title, slug, start_date, end_date, venue",
        )[0]

    @staticmethod
    def update_submission(submission_id: str, update: SubmissionUpdate) -> dict[str, Any]:
        """
        Change status / admin notes of one submission.

        Raises:
            NotFoundError: No such submission
        """
        data = update.model_dump(mode="json", exclude_unset=True)
        data["updated_at"] = _now_iso()

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).update(data).eq("id", submission_id).execute()
        except Exception as e:
            logger.error(f"Error updating submission: {e}")
            raise DatabaseError("update submission", friendly_database_message(e))

        if not response.data:
            raise NotFoundError("Submission", submission_id)

        logger.info(f"Updated submission: {submission_id}")
        return response.data[0]

    @staticmethod
    def bulk_action(request: BulkSubmissionAction) -> dict[str, Any]:
        """
        Mark many submissions read/unread/replied/archived/spam, or apply the
        same field update to all of them.

        Returns:
            {"updated_count": n, "submissions": [...]}
        """
        if request.action == SubmissionAction.UPDATE:
            try:
                fields = SubmissionUpdate.model_validate(request.data or {}).model_dump(
                    mode="json", exclude_unset=True
                )
            except ValidationError as e:
                first = e.errors()[0]
                field = ".".join(str(part) for part in first["loc"])
                raise ValidationFailedError(f"{field}: {first['msg']}", field=field)
            if not fields:
                raise ValidationFailedError("No fields to update", field="data")
        else:
            fields = dict(BULK_ACTION_FIELDS[request.action])
        fields["updated_at"] = _now_iso()

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .update(fields)
                .in_("id", request.submission_ids)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating submissions: {e}")
            raise DatabaseError("update submissions", friendly_database_message(e))

        submissions = response.data or []
        logger.info(f"Bulk {request.action.value}: {len(submissions)} submission(s)")
        return {"updated_count": len(submissions), "submissions": submissions}

    @staticmethod
    def delete_submission(submission_id: str) -> None:
        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).delete().eq("id", submission_id).execute()
        except Exception as e:
            logger.error(f"Error deleting submission: {e}")
            raise DatabaseError("delete submission", friendly_database_message(e))

        if not response.data:
            raise NotFoundError("Submission", submission_id)
        logger.info(f"Deleted submission: {submission_id}")

    @staticmethod
    def bulk_delete(submission_ids: list[str]) -> dict[str, Any]:
        """
        Returns:
            {"deleted_count": n, "deleted_submissions": [{"id", "name", "email"}, ...]}
        """
        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).delete().in_("id", submission_ids).execute()
        except Exception as e:
            logger.error(f"Error deleting submissions: {e}")
            raise DatabaseError("delete submissions", friendly_database_message(e))

        deleted = [
            {"id": row["id"], "name": row.get("name"), "email": row.get("email")}
            for row in response.data or []
        ]
        logger.info(f"Deleted {len(deleted)} submission(s)")
        return {"deleted_count": len(deleted), "deleted_submissions": deleted}
