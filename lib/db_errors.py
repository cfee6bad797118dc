# =============================================================================
# lib/db_errors.py - Database Error Classification
# =============================================================================
# Turns raw PostgREST/Postgres errors into messages an editor can act on.
# Classification is by Postgres error code where one is available and by
# known message substrings otherwise.
# =============================================================================

from typing import Any

# Postgres SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"

# PostgREST: .single() matched zero rows
NO_ROWS = "PGRST116"

_KNOWN_MESSAGES = (
    (("relation", "does not exist"), "Database table not found. Please run the schema script first."),
    (("violates check constraint",), "Data validation failed. Please check your input and try again."),
    (("permission denied",), "Permission denied. Please check your authentication."),
)


def error_code(error: Any) -> str | None:
    """
    Extract the Postgres/PostgREST code from an exception or error dict.

    postgrest-py raises APIError with a `code` attribute; some paths only
    carry the code inside the message text.
    """
    if error is None:
        return None
    if isinstance(error, dict):
        code = error.get("code")
    else:
        code = getattr(error, "code", None)
    if code:
        return str(code)

    text = str(error)
    for known in (UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION, NOT_NULL_VIOLATION, NO_ROWS):
        if known in text:
            return known
    return None


def error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(getattr(error, "message", None) or error)


def is_no_rows(error: Any) -> bool:
    return error_code(error) == NO_ROWS


def friendly_database_message(error: Any) -> str:
    """
    Map a database error to a friendlier message.

    Unknown errors return their own message unchanged.

    Example:
        friendly_database_message('relation "about_main_sections" does not exist')
        # "Database table not found. Please run the schema script first."
    """
    message = error_message(error)
    lowered = message.lower()
    for needles, friendly in _KNOWN_MESSAGES:
        if all(needle in lowered for needle in needles):
            return friendly
    return message
