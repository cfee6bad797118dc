# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from typing import Any, Iterable, Mapping

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


# =============================================================================
# UUID Utilities
# =============================================================================

def is_uuid(value: str) -> bool:
    """
    Tell an id from a slug.

    Routes like /api/events/{id} accept either; this decides which column
    to filter on.
    """
    return bool(_UUID_PATTERN.match(value or ""))


# =============================================================================
# Record Helpers
# =============================================================================

def blank_to_none(record: Mapping[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """
    Convert empty or whitespace-only strings to None for the given fields.

    Foreign keys and timestamps reject "" in Postgres, while HTML forms send
    "" for untouched inputs.
    """
    result = dict(record)
    for name in fields:
        value = result.get(name)
        if isinstance(value, str) and not value.strip():
            result[name] = None
    return result


def pick_fields(record: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """Keep only the allowed keys of a record."""
    allowed = set(allowed)
    return {key: value for key, value in record.items() if key in allowed}


def strip_extension(filename: str) -> str:
    """"stand-photo.jpg" -> "stand-photo"."""
    return filename.rsplit(".", 1)[0] if "." in filename else filename
