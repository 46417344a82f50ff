"""Utility modules for shared functionality."""

from .constants import (
    CONFIGS_PROPERTY,
    PAGE_LIMIT,
    WATERMARK_KEY_PREFIX,
)
from .helpers import first_non_empty, slugify_storage_key

__all__ = [
    "CONFIGS_PROPERTY",
    "PAGE_LIMIT",
    "WATERMARK_KEY_PREFIX",
    "first_non_empty",
    "slugify_storage_key",
]
