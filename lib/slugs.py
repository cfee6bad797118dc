# =============================================================================
# lib/slugs.py - URL Slug Helpers
# =============================================================================
# Derives URL slugs from titles and cleans slugs typed by admins.
#
# Usage:
#   from lib.slugs import slugify
#   slugify("Arab Health 2025!")  # "arab-health-2025"
# =============================================================================

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_TRAILING_SLASHES = re.compile(r"/+$")


def slugify(text: str | None) -> str:
    """
    Derive a URL slug from free text.

    Lowercases, replaces every run of non-alphanumeric characters with a
    single hyphen, then trims hyphens and slashes from both ends.

    The result never starts or ends with a hyphen, never contains "--" and
    never ends with "/". Applying it twice gives the same result.

    Example:
        slugify("  GITEX Global / 2025 ")  # "gitex-global-2025"
    """
    if not text:
        return ""
    slug = _NON_ALNUM.sub("-", text.lower())
    return slug.strip("-/")


def clean_slug_input(value: str) -> str:
    """Strip trailing slashes from a slug typed into the editor."""
    return _TRAILING_SLASHES.sub("", value)


def validate_slug(value: str | None) -> str | None:
    """
    Return an error message for an unusable slug, or None if it is fine.
    """
    if not value or not value.strip():
        return "Please enter a URL slug"
    if value.endswith("/"):
        return "URL slug cannot end with a slash (/)"
    return None
