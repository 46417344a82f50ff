"""Explicit per-run context shared by the relay components.

The context is built once at the start of a command and passed to every
component that needs the property store, the settings or the HTTP client.
"""

from dataclasses import dataclass, field
from types import TracebackType
from typing import Self

import httpx

from backlog_slack_relay.configuration.env import Settings
from backlog_slack_relay.storage.abc import PropertyStoreBase
from backlog_slack_relay.storage.properties import YAMLFilePropertyStore
from backlog_slack_relay.storage.watermark import WatermarkStore


@dataclass
class RunContext:
    """Resources for a single invocation."""

    properties: PropertyStoreBase
    settings: Settings
    http_client: httpx.Client
    watermarks: WatermarkStore = field(init=False)

    def __post_init__(self) -> None:
        """Bind the watermark store to the property store."""
        self.watermarks = WatermarkStore(self.properties)

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        """Create a context backed by the YAML property file named in the settings."""
        return cls(
            properties=YAMLFilePropertyStore(settings.PROPERTIES_FILE),
            settings=settings,
            http_client=httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS),
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.http_client.close()

    def __enter__(self) -> Self:
        """Enter the context."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close resources on exit."""
        self.close()
