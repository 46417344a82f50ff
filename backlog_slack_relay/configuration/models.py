"""Models for resolved tenant configuration."""

from dataclasses import dataclass, field

from backlog_slack_relay.utils.constants import DEFAULT_BACKLOG_DOMAIN


@dataclass(frozen=True)
class TenantConfig:
    """A single Backlog space polled for notifications and relayed to one Slack webhook."""

    space_id: str
    api_key: str = field(repr=False)
    webhook_url: str = field(repr=False)
    label: str
    storage_key: str
    domain: str = DEFAULT_BACKLOG_DOMAIN

    @property
    def base_url(self) -> str:
        """Root URL of the Backlog space."""
        return f"https://{self.space_id}.{self.domain}"
