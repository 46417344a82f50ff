"""Base ABC for Backlog clients."""

from abc import ABC, abstractmethod
from typing import Any


class BacklogClientBase(ABC):
    """Base ABC for Backlog clients."""

    @abstractmethod
    def list_notifications(self, max_id: int | None = None, count: int = 100) -> Any:
        """List one page of notifications in descending ID order.

        Args:
            max_id: Only return notifications whose ID is at most this value.
            count: Maximum number of notifications to return.

        Returns:
            The decoded JSON response body, expected to be a list.
        """
        pass
