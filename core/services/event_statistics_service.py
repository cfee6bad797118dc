# =============================================================================
# core/services/event_statistics_service.py - Events Dashboard Statistics
# =============================================================================
# Headline numbers for the admin events dashboard: the totals computed by the
# get_event_statistics database function, plus upcoming/past/draft event
# counts and enquiries received in the last week.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)

EVENTS_TABLE = "events"
SUBMISSIONS_TABLE = "event_form_submissions"
RECENT_SUBMISSION_DAYS = 7


def _published_events(client):
    return (
        client.table(EVENTS_TABLE)
        .select("id", count="exact")
        .eq("is_active", True)
        .not_.is_("published_at", "null")
    )


class EventStatisticsService:

    @staticmethod
    def get_statistics(now: datetime | None = None) -> dict[str, Any]:
        """
        Dashboard statistics.

        Upcoming events start today or later, past events ended before today;
        both count only active, published events.

        Returns:
            The database function's columns plus upcoming_events, past_events,
            draft_events and recent_submissions
        """
        now = now or datetime.now(timezone.utc)
        today = now.date().isoformat()
        week_ago = (now - timedelta(days=RECENT_SUBMISSION_DAYS)).isoformat()
        client = SupabaseClient.get_client()

        try:
            rows = SupabaseClient.call_rpc("get_event_statistics") or []

            upcoming = _published_events(client).gte("start_date", today).execute()
            past = _published_events(client).lt("end_date", today).execute()
            drafts = (
                client.table(EVENTS_TABLE)
                .select("id", count="exact")
                .is_("published_at", "null")
                .execute()
            )
            recent = (
                client.table(SUBMISSIONS_TABLE)
                .select("id", count="exact")
                .gte("created_at", week_ago)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching event statistics: {e}")
            raise DatabaseError("fetch statistics", friendly_database_message(e))

        base = rows[0] if isinstance(rows, list) and rows else (rows if isinstance(rows, dict) else {})
        return {
            **base,
            "upcoming_events": upcoming.count or 0,
            "past_events": past.count or 0,
            "draft_events": drafts.count or 0,
            "recent_submissions": recent.count or 0,
        }
