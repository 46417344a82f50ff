"""Posts messages to a Slack incoming webhook."""

from typing import Any

import httpx
import structlog

from .exceptions import DeliveryError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class SlackWebhookClient:
    """Slack incoming webhook client built on an httpx client."""

    def __init__(self, client: httpx.Client, webhook_url: str) -> None:
        """Initialize the webhook client with an already-initialized HTTP client."""
        self.client = client
        self.webhook_url = webhook_url

    def post(self, payload: dict[str, Any]) -> None:
        """Post a single message payload.

        Raises:
            DeliveryError: If the webhook answers with a non-2xx status or the request fails.
        """
        try:
            response = self.client.post(self.webhook_url, json=payload)
        except httpx.TransportError as exc:
            logger.error("Slack webhook request could not be completed", error=str(exc))
            raise DeliveryError(0, str(exc)) from exc
        if not response.is_success:
            logger.error("Slack webhook returned an error", status_code=response.status_code)
            raise DeliveryError(response.status_code, response.text)

    def post_text(self, text: str) -> None:
        """Post a plain text message."""
        self.post({"text": text})
