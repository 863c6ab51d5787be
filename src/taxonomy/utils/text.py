"""Text helpers shared by the taxonomy aggregates."""

from slugify import slugify

SLUG_MAX_LENGTH = 200


def normalize_name(name) -> str:
    """Collapse a display name to its stored form (surrounding whitespace removed)."""
    return (name or "").strip()


def slug_for(name) -> str:
    """URL identifier for a display name; non-Latin scripts are transliterated."""
    return slugify(normalize_name(name), max_length=SLUG_MAX_LENGTH)
