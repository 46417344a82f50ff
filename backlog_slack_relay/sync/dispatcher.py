"""Delivers new notifications to Slack in chronological order."""

import structlog

from backlog_slack_relay.backlog.models import Notification
from backlog_slack_relay.slack.exceptions import DeliveryError
from backlog_slack_relay.slack.formatting import build_message
from backlog_slack_relay.slack.webhook import SlackWebhookClient

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def dispatch_notifications(notifications: list[Notification], webhook: SlackWebhookClient, base_url: str) -> int:
    """Format and post each notification, oldest first.

    The first failed delivery aborts the rest of the batch. Messages already
    posted stay posted and their count is recorded on the raised error.

    Args:
        notifications: New notifications in any order.
        webhook: Slack webhook client for the tenant.
        base_url: Root URL of the tenant's Backlog space.

    Raises:
        DeliveryError: If a webhook post fails. Its ``delivered`` attribute holds
            the number of messages posted before the failure.

    Returns:
        int: Number of messages delivered.
    """
    if not notifications:
        logger.info("No new notifications", base_url=base_url)
        return 0

    delivered = 0
    for notification in sorted(notifications, key=lambda n: n.id):
        try:
            webhook.post(build_message(notification, base_url))
        except DeliveryError as exc:
            exc.delivered = delivered
            logger.error(
                "Delivery aborted",
                base_url=base_url,
                notification_id=notification.id,
                delivered=delivered,
                remaining=len(notifications) - delivered,
            )
            raise
        delivered += 1
        logger.debug("Delivered notification", notification_id=notification.id, kind=notification.kind.value)
    logger.info("Delivered notifications", base_url=base_url, count=delivered)
    return delivered
