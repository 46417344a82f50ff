"""Reads and writes per-tenant notification watermarks."""

import structlog

from .abc import PropertyStoreBase

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class WatermarkStore:
    """Stores the highest relayed notification ID for each tenant.

    Watermarks are kept in the property store under the tenant's storage key
    as decimal strings. They never move backwards.
    """

    def __init__(self, properties: PropertyStoreBase) -> None:
        """Initialize the watermark store on top of a property store."""
        self.properties = properties

    def read(self, storage_key: str) -> int:
        """Return the stored watermark, or 0 when absent or unreadable."""
        raw = self.properties.get(storage_key)
        if raw is None or not raw.strip():
            return 0
        raw = raw.strip()
        if not (raw.isascii() and raw.isdigit()):
            logger.warning("Ignoring unreadable watermark", storage_key=storage_key, value=raw)
            return 0
        return int(raw)

    def advance(self, storage_key: str, new_value: int) -> int:
        """Persist new_value if it exceeds the stored watermark.

        Returns:
            The watermark in effect after the call.
        """
        current = self.read(storage_key)
        if new_value <= current:
            logger.debug("Watermark unchanged", storage_key=storage_key, watermark=current)
            return current
        self.properties.set(storage_key, str(new_value))
        logger.info("Advanced watermark", storage_key=storage_key, previous=current, watermark=new_value)
        return new_value
