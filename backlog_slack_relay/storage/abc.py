"""Base ABC for key/value property stores."""

from abc import ABC, abstractmethod


class PropertyStoreBase(ABC):
    """Base ABC for string key/value property stores."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get the value stored under a key, or None when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every stored key."""
        pass
