"""Utilities for truncating message content to fit within Slack-friendly limits."""

from __future__ import annotations

import re

from backlog_slack_relay.utils.constants import SNIPPET_MAX_LENGTH, SNIPPET_TRUNCATION_SUFFIX

MARKUP_TAG_PATTERN = re.compile(r"<[^>]*>")
NEWLINE_PATTERN = re.compile(r"(?:\r\n|\r|\n)+")


def truncate_string_at_end(
    content: str,
    max_length: int,
    truncation_suffix: str = SNIPPET_TRUNCATION_SUFFIX,
) -> tuple[str, bool]:
    """Truncate a string at the end if it exceeds max_length.

    The suffix is appended after the first ``max_length`` characters, so a
    truncated result is ``max_length + len(truncation_suffix)`` long.

    Args:
        content: The string to potentially truncate.
        max_length: Number of characters of content to keep.
        truncation_suffix: Marker appended to truncated content.

    Returns:
        Tuple of (truncated_content, was_truncated).
    """
    if not content or len(content) <= max_length:
        return content, False
    return content[:max_length] + truncation_suffix, True


def clean_snippet(content: str | None, max_length: int = SNIPPET_MAX_LENGTH) -> str:
    """Strip markup tags, flatten newlines and truncate a snippet.

    Args:
        content: Raw text from a comment, description or wiki page.
        max_length: Number of characters to keep before the truncation marker.

    Returns:
        The cleaned snippet, or an empty string when there is no content.
    """
    if not content:
        return ""
    text = MARKUP_TAG_PATTERN.sub("", content)
    text = NEWLINE_PATTERN.sub(" ", text).strip()
    truncated, _ = truncate_string_at_end(text, max_length)
    return truncated
