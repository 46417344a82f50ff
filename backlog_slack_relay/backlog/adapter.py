"""Backlog client adapter for the httpx library."""

from functools import wraps
from typing import Any, Callable, TypeVar

import httpx
import structlog

from backlog_slack_relay.configuration.models import TenantConfig
from backlog_slack_relay.utils.constants import NOTIFICATIONS_PAGE_SIZE

from .abc import BacklogClientBase
from .exceptions import RemoteApiError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_transport_errors(func: F) -> F:
    """Decorator to surface httpx transport failures as RemoteApiError with status 0."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except httpx.TransportError as exc:
            logger.error("Backlog API request could not be completed", function=func.__name__, error=str(exc))
            raise RemoteApiError(0, str(exc)) from exc

    return wrapper  # type: ignore


class BacklogHTTPAdapter(BacklogClientBase):
    """Backlog client adapter for the httpx library."""

    def __init__(self, client: httpx.Client, base_url: str, api_key: str) -> None:
        """Initialize the adapter with an already-initialized HTTP client."""
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    @classmethod
    def for_tenant(cls, client: httpx.Client, tenant: TenantConfig) -> "BacklogHTTPAdapter":
        """Create an adapter bound to a tenant's Backlog space."""
        return cls(client, tenant.base_url, tenant.api_key)

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @handle_transport_errors
    def list_notifications(self, max_id: int | None = None, count: int = NOTIFICATIONS_PAGE_SIZE) -> Any:
        """List one page of notifications in descending ID order.

        Raises:
            RemoteApiError: If the API answers with a non-2xx status.

        Returns:
            The decoded JSON body, or None when the body is not JSON.
        """
        params = self._omit_null_parameters(count=count, order="desc", apiKey=self.api_key, maxId=max_id)
        logger.debug("Requesting notifications", base_url=self.base_url, max_id=max_id, count=count)
        response = self.client.get(f"{self.base_url}/api/v2/notifications", params=params)
        if not response.is_success:
            logger.error(
                "Backlog API returned an error",
                base_url=self.base_url,
                status_code=response.status_code,
            )
            raise RemoteApiError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError:
            logger.warning("Backlog API returned a non-JSON body", base_url=self.base_url)
            return None
