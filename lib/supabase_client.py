# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the lookups every editor and page needs:
# - single-row fetches that treat "no rows" as None
# - the latest active row of a singleton section table
# - parameterless RPC calls that return rows
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   event = SupabaseClient.fetch_one("events", "slug", "gitex-global")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.db_errors import is_no_rows

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        section = SupabaseClient.fetch_latest_active("conference_hero_sections")
        rows = SupabaseClient.call_rpc("get_about_main_section")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side admin operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Row Lookups
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        column: str,
        value: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by an equality filter.

        Returns:
            Row dict, or None if no row matches

        Raises:
            Exception: Any error other than "no rows" propagates
        """
        client = cls.get_client()
        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(column, cls._normalize_uuid(value))
                .single()
                .execute()
            )
            return response.data
        except Exception as e:
            if is_no_rows(e):
                return None
            raise

    @classmethod
    def fetch_latest_active(cls, table: str, columns: str = "*") -> dict[str, Any] | None:
        """
        Fetch the most recent active row of a singleton section table.

        Section tables may accumulate rows over time; editors always read and
        update the newest active one.
        """
        client = cls.get_client()
        response = (
            client.table(table)
            .select(columns)
            .eq("is_active", True)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # RPC
    # -------------------------------------------------------------------------

    @classmethod
    def call_rpc(cls, name: str, params: dict[str, Any] | None = None) -> Any:
        """
        Call a database function by name.

        Most section functions take no arguments and return a list of rows.
        """
        client = cls.get_client()
        response = client.rpc(name, params or {}).execute()
        logger.debug(f"RPC {name} returned {type(response.data).__name__}")
        return response.data
