"""Builds Slack Block Kit messages from Backlog notifications."""

from typing import Any

from backlog_slack_relay.backlog.models import Notification, NotificationKind
from backlog_slack_relay.utils.constants import (
    DEFAULT_ACTOR_NAME,
    DEFAULT_PROJECT_NAME,
    DEFAULT_WIKI_NAME,
    FALLBACK_TITLE,
    TIMESTAMP_FORMAT,
)
from backlog_slack_relay.utils.helpers import first_non_empty
from backlog_slack_relay.utils.truncation import clean_snippet


def escape_mrkdwn(text: str) -> str:
    """Escape the characters Slack treats as control sequences in mrkdwn."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def build_title(notification: Notification) -> str:
    """Derive the message title from the notification's payload variant."""
    kind = notification.kind
    issue = notification.issue
    pull_request = notification.pull_request
    wiki = notification.wiki
    if kind is NotificationKind.ISSUE_COMMENT and issue is not None:
        return f"#{issue.issue_key or ''} にコメント: {issue.summary or ''}"
    if kind is NotificationKind.ISSUE and issue is not None:
        return f"#{issue.issue_key or ''}: {issue.summary or ''}"
    if kind is NotificationKind.PULL_REQUEST and pull_request is not None:
        number = pull_request.number if pull_request.number is not None else ""
        return f"PR {pull_request.repository_name}#{number}: {pull_request.summary or ''}"
    if kind is NotificationKind.WIKI and wiki is not None:
        return f"Wiki更新: {wiki.name or DEFAULT_WIKI_NAME}"
    return notification.reason_name or FALLBACK_TITLE


def build_link(notification: Notification, base_url: str) -> str:
    """Derive the deep link into Backlog, or an empty string when there is none."""
    kind = notification.kind
    issue = notification.issue
    pull_request = notification.pull_request
    wiki = notification.wiki
    project_key = notification.project.project_key if notification.project is not None else None
    if kind in (NotificationKind.ISSUE_COMMENT, NotificationKind.ISSUE) and issue is not None:
        return f"{base_url}/view/{issue.issue_key}" if issue.issue_key else ""
    if kind is NotificationKind.PULL_REQUEST and pull_request is not None:
        if project_key and pull_request.repository_id is not None and pull_request.number is not None:
            return f"{base_url}/git/{project_key}/{pull_request.repository_id}/pullRequests/{pull_request.number}"
        return ""
    if kind is NotificationKind.WIKI and wiki is not None and wiki.id is not None:
        return f"{base_url}/wiki/{wiki.id}"
    return ""


def build_snippet(notification: Notification) -> str:
    """Extract a short plain text excerpt of the notification's content."""
    pull_request = notification.pull_request
    raw = first_non_empty(
        notification.comment.content if notification.comment is not None else None,
        notification.issue.description if notification.issue is not None else None,
        first_non_empty(pull_request.summary, pull_request.description) if pull_request is not None else None,
        notification.wiki.content if notification.wiki is not None else None,
    )
    return clean_snippet(raw)


def format_timestamp(notification: Notification) -> str:
    """Format the creation time in the local time zone."""
    if notification.created is None:
        return ""
    return notification.created.astimezone().strftime(TIMESTAMP_FORMAT)


def build_message(notification: Notification, base_url: str) -> dict[str, Any]:
    """Build the Slack webhook payload for a notification.

    Args:
        notification: The notification to relay.
        base_url: Root URL of the Backlog space, used for deep links.

    Returns:
        dict[str, Any]: A payload with a plain ``text`` fallback and Block Kit ``blocks``.
    """
    title = build_title(notification)
    link = build_link(notification, base_url)
    snippet = build_snippet(notification)
    project_name = first_non_empty(notification.project.name if notification.project is not None else None) or DEFAULT_PROJECT_NAME
    actor = first_non_empty(notification.sender.name if notification.sender is not None else None) or DEFAULT_ACTOR_NAME

    title_text = f"*<{link}|{escape_mrkdwn(title)}>*" if link else f"*{escape_mrkdwn(title)}*"
    context_parts = [escape_mrkdwn(actor)]
    timestamp = format_timestamp(notification)
    if timestamp:
        context_parts.append(timestamp)

    blocks: list[dict[str, Any]] = [
        {"type": "header", "text": {"type": "plain_text", "text": project_name, "emoji": True}},
        {"type": "section", "text": {"type": "mrkdwn", "text": title_text}},
    ]
    if snippet:
        blocks.append({"type": "section", "text": {"type": "mrkdwn", "text": escape_mrkdwn(snippet)}})
    blocks.append({"type": "context", "elements": [{"type": "mrkdwn", "text": " | ".join(context_parts)}]})

    return {"text": title, "blocks": blocks}
