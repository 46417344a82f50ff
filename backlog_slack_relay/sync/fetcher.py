"""Incremental fetch of new Backlog notifications.

The notifications endpoint only lists newest-first and only accepts an upper
bound (``maxId``). Everything newer than the watermark is found by paging
backwards from the newest notification until an ID at or below the watermark
appears. ``PAGE_LIMIT`` caps API calls per run. When the cap is hit the new
watermark is still the newest ID seen, so a backlog deeper than the cap is
not revisited by later runs.

Items are validated one at a time. An item that fails validation is skipped,
but its ID still counts towards the watermark so it cannot stall later runs.
"""

from typing import Any

import structlog
from pydantic import ValidationError

from backlog_slack_relay.backlog.abc import BacklogClientBase
from backlog_slack_relay.backlog.exceptions import RemoteApiError
from backlog_slack_relay.backlog.models import Notification, raw_notification_id
from backlog_slack_relay.sync.results import FetchResult
from backlog_slack_relay.utils.constants import NOTIFICATIONS_PAGE_SIZE, PAGE_LIMIT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _page_items(payload: object, page: int) -> list[Any] | None:
    """Return the raw items on a page, or None when the page is empty or not a list."""
    if not isinstance(payload, list):
        if payload is not None:
            logger.warning("Notification page is not a list", page=page, actual_type=type(payload).__name__)
        return None
    return payload or None


def _item_id(item: Any, page: int) -> int:
    """Return the ID of a raw item, raising RemoteApiError when it has none."""
    notification_id = raw_notification_id(item)
    if notification_id is None:
        logger.error("Notification without a usable ID", page=page)
        raise RemoteApiError(200, f"Notification on page {page} has no usable id: {item!r}")
    return notification_id


def _parse_item(item: Any, notification_id: int, page: int) -> Notification | None:
    """Validate a raw item, or return None when it does not parse as a notification."""
    try:
        return Notification.model_validate(item)
    except ValidationError as exc:
        logger.warning("Skipping malformed notification", page=page, notification_id=notification_id, error_count=exc.error_count())
        return None


def fetch_new_notifications(
    client: BacklogClientBase,
    watermark: int,
    page_limit: int = PAGE_LIMIT,
    page_size: int = NOTIFICATIONS_PAGE_SIZE,
) -> FetchResult:
    """Collect unread notifications newer than the watermark.

    Args:
        client: Backlog client bound to one space.
        watermark: Highest notification ID already relayed.
        page_limit: Maximum number of pages to request.
        page_size: Number of notifications requested per page.

    Raises:
        RemoteApiError: If any page request fails, or a listed item has no ID.

    Returns:
        FetchResult: Unread notifications above the watermark, newest first,
        and the largest ID seen.
    """
    new_notifications: list[Notification] = []
    max_id_seen = watermark
    upper_bound: int | None = None
    page_count = 0
    reached_watermark = False

    while page_count < page_limit and not reached_watermark:
        max_id = upper_bound - 1 if upper_bound is not None else None
        items = _page_items(client.list_notifications(max_id=max_id, count=page_size), page_count + 1)
        if items is None:
            break

        for item in items:
            notification_id = _item_id(item, page_count + 1)
            max_id_seen = max(max_id_seen, notification_id)
            upper_bound = notification_id
            if notification_id <= watermark:
                reached_watermark = True
                break
            notification = _parse_item(item, notification_id, page_count + 1)
            if notification is not None and not notification.already_read:
                new_notifications.append(notification)

        page_count += 1
        logger.debug(
            "Scanned notification page",
            page=page_count,
            size=len(items),
            upper_bound=upper_bound,
            reached_watermark=reached_watermark,
        )

    if page_count >= page_limit and not reached_watermark:
        logger.warning("Page limit reached before the watermark", page_limit=page_limit, watermark=watermark)

    return FetchResult(new_notifications=new_notifications, max_id=max_id_seen, pages_fetched=page_count)
