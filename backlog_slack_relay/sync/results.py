"""Contains results of relay execution."""

from dataclasses import dataclass, field

from backlog_slack_relay.backlog.models import Notification


@dataclass(frozen=True)
class FetchResult:
    """New notifications found above a watermark.

    ``new_notifications`` is in scan order (descending ID). ``max_id`` is the
    largest ID seen on any scanned page, read or unread, and never below the
    watermark the fetch started from.
    """

    new_notifications: list[Notification]
    max_id: int
    pages_fetched: int = 0


@dataclass
class TenantRunResult:
    """Outcome of relaying one tenant's notifications."""

    label: str
    storage_key: str
    previous_watermark: int
    watermark: int
    delivered: int = 0
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the tenant finished without an error."""
        return self.error is None


@dataclass
class RunResult:
    """Outcome of relaying every configured tenant."""

    tenants: list[TenantRunResult] = field(default_factory=list)

    @property
    def failed(self) -> list[TenantRunResult]:
        """Tenants that ended with an error."""
        return [tenant for tenant in self.tenants if not tenant.succeeded]

    @property
    def delivered(self) -> int:
        """Total number of delivered messages."""
        return sum(tenant.delivered for tenant in self.tenants)
