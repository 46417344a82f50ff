"""General utility functions and helper classes."""

import re


def slugify_storage_key(value: str, default: str = "workspace") -> str:
    """Slugify a value for use in property keys (lowercase, underscores, alphanum only)."""
    slug = value.lower()
    slug = re.sub(r"[^a-z0-9]+", "_", slug)
    slug = slug.strip("_")
    return slug or default


def first_non_empty(*values: str | None) -> str:
    """Return the first value that is a non-blank string, or an empty string."""
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return ""
